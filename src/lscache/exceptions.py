"""
Custom exception hierarchy for lscache.

All exceptions inherit from LSCacheError, which provides optional context
for structured error handling and logging.
"""

from __future__ import annotations

from typing import Any


class LSCacheError(Exception):
    """Base exception for all lscache errors.

    Attributes:
        message: Human-readable error message.
        context: Optional structured context for logging/debugging.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, context={self.context!r})"


class ConfigurationError(LSCacheError):
    """Raised when configuration is invalid.

    Examples:
        - Unknown STORE_BACKEND
        - SQLite path that cannot be used as a file
    """

    pass


class StoreUnavailableError(LSCacheError):
    """Raised when the backing store cannot be used at all.

    Never reaches Bucket callers: the service probe turns it into
    supported() == False and every bucket operation becomes a no-op.
    """

    pass


class CapacityExceededError(LSCacheError):
    """Raised when a write failed because the store is full.

    Context should include:
        - key: The raw store key being written
        - size: Characters the write needed (key + value)
    """

    pass


class SerializationError(LSCacheError):
    """Raised when a value cannot be encoded to or decoded from JSON.

    Context should include:
        - key: The logical key involved, when known
    """

    pass


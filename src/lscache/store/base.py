"""
Base class for backing stores.

A backend mirrors the host local-storage facility: a flat string-to-string
map with synchronous get/set/remove, positional key enumeration and a hard
capacity limit. Backends raise their own native errors; is_quota_error()
tells the adapter which of them mean "store is full".
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class StorageBackend(ABC):
    """Abstract interface for flat key-value stores."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Get a raw value, or None if absent."""
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Insert or overwrite a raw value."""
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Remove a raw value. No error if absent."""
        ...

    @abstractmethod
    def length(self) -> int:
        """Number of keys currently stored."""
        ...

    @abstractmethod
    def key(self, index: int) -> str | None:
        """Key at position ``index``, or None if out of range."""
        ...

    def keys(self) -> list[str]:
        """Snapshot of every key, in the same order as key(index).

        Backends with a cheaper bulk listing should override this.
        """
        keys: list[str] = []
        for i in range(self.length()):
            key = self.key(i)
            if key is not None:
                keys.append(key)
        return keys

    @abstractmethod
    def is_quota_error(self, exc: BaseException) -> bool:
        """Whether ``exc`` raised by set_item means the store is full."""
        ...

    def close(self) -> None:
        """Release any resources held by the backend."""
        return None

"""
CacheService: process-wide owner of the backing store.

Holds what every bucket shares: the store adapter, the expiry clock, the
cached store-availability probe and the warnings flag. Buckets receive the
service explicitly; get_cache() offers a configured singleton.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from lscache.bucket import Bucket
from lscache.clock import ExpiryClock
from lscache.config import Settings, get_settings
from lscache.exceptions import ConfigurationError
from lscache.keys import ROOT_PATH
from lscache.logging import get_logger
from lscache.store.adapter import StoreAdapter
from lscache.store.base import StorageBackend
from lscache.store.memory import MemoryStore
from lscache.store.sqlite import SQLiteStore

logger = get_logger(__name__)


class CacheService:
    """Shared state for all buckets over one backing store."""

    def __init__(
        self,
        backend: StorageBackend,
        clock: ExpiryClock | None = None,
        eviction_margin: int = 100,
        warnings: bool = False,
    ) -> None:
        """Initialize CacheService.

        Args:
            backend: The flat store holding every bucket's records.
            clock: Expiry clock; minute resolution in radix 10 by default.
            eviction_margin: Padding added to each eviction shortfall.
            warnings: Whether to emit diagnostic warnings initially.
        """
        self.adapter = StoreAdapter(backend)
        self.clock = clock or ExpiryClock()
        self.eviction_margin = eviction_margin
        self._warnings = warnings
        self._supported: bool | None = None

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> CacheService:
        """Build a service with the backend and clock named in settings."""
        settings = settings or get_settings()

        backend: StorageBackend
        if settings.STORE_BACKEND == "memory":
            backend = MemoryStore(quota=settings.STORE_QUOTA)
        elif settings.STORE_BACKEND == "sqlite":
            settings.ensure_directories()
            backend = SQLiteStore(settings.STORE_PATH, quota=settings.STORE_QUOTA)
        else:
            raise ConfigurationError(
                "Unknown store backend", context={"backend": settings.STORE_BACKEND}
            )

        clock = ExpiryClock(
            unit_seconds=settings.EXPIRY_UNIT_SECONDS,
            radix=settings.EXPIRY_RADIX,
        )
        return cls(
            backend,
            clock=clock,
            eviction_margin=settings.EVICTION_MARGIN,
            warnings=settings.WARNINGS_ENABLED,
        )

    def supported(self) -> bool:
        """Whether the backing store is usable.

        Probed once with a sentinel write; the answer is cached.
        """
        if self._supported is None:
            try:
                self.adapter.probe()
                self._supported = True
            except Exception as e:
                self.warn("Storage is unavailable", error=str(e))
                self._supported = False
        return self._supported

    def reset_support_cache(self) -> None:
        """Forget the cached probe result so the next call re-probes."""
        self._supported = None

    @property
    def warnings_enabled(self) -> bool:
        return self._warnings

    def enable_warnings(self, enabled: bool) -> None:
        self._warnings = enabled

    def warn(self, message: str, **fields: Any) -> None:
        """Log a diagnostic warning if warnings are enabled."""
        if self._warnings:
            logger.warning(message, **fields)

    def root(self) -> Bucket:
        """The root bucket, path "/"."""
        return Bucket(self, ROOT_PATH)

    def close(self) -> None:
        self.adapter.backend.close()


@lru_cache
def get_cache() -> Bucket:
    """Get the root bucket of the configured service singleton."""
    return CacheService.from_settings(get_settings()).root()


def clear_cache_singleton() -> None:
    """Clear the cached service (useful for testing)."""
    get_cache.cache_clear()

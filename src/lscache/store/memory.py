"""
In-process store with a character quota, emulating browser local storage.
"""

from __future__ import annotations

from lscache.exceptions import StoreUnavailableError
from lscache.store.base import StorageBackend


class QuotaExceeded(Exception):
    """Native capacity error of MemoryStore."""

    name = "QuotaExceededError"


class MemoryStore(StorageBackend):
    """Dict-backed store bounded by the total length of keys and values.

    Keys enumerate in insertion order. With ``available=False`` every
    operation fails, like local storage disabled by the host.
    """

    def __init__(self, quota: int = 5 * 1024 * 1024, available: bool = True) -> None:
        self.quota = quota
        self.available = available
        self._items: dict[str, str] = {}
        self._usage = 0

    def _check_available(self) -> None:
        if not self.available:
            raise StoreUnavailableError("Storage is disabled")

    def usage(self) -> int:
        """Characters currently used by keys and values."""
        return self._usage

    def get_item(self, key: str) -> str | None:
        self._check_available()
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._check_available()
        old = self._items.get(key)
        freed = len(key) + len(old) if old is not None else 0
        needed = len(key) + len(value)
        if self._usage - freed + needed > self.quota:
            raise QuotaExceeded(
                f"Setting {key!r} needs {needed} characters, "
                f"{self.quota - self._usage + freed} available"
            )
        self._items[key] = value
        self._usage += needed - freed

    def remove_item(self, key: str) -> None:
        self._check_available()
        old = self._items.pop(key, None)
        if old is not None:
            self._usage -= len(key) + len(old)

    def length(self) -> int:
        self._check_available()
        return len(self._items)

    def key(self, index: int) -> str | None:
        self._check_available()
        if 0 <= index < len(self._items):
            # dicts have no positional access
            for i, k in enumerate(self._items):
                if i == index:
                    return k
        return None

    def keys(self) -> list[str]:
        self._check_available()
        return list(self._items)

    def is_quota_error(self, exc: BaseException) -> bool:
        return isinstance(exc, QuotaExceeded)

    def clear(self) -> None:
        self._check_available()
        self._items.clear()
        self._usage = 0

"""
StoreAdapter: the cache's only view of a backing store.

Native backend errors are classified here, once: a write that fails
because the store is full surfaces as CapacityExceededError, and every
other failure propagates unchanged.
"""

from __future__ import annotations

from lscache.exceptions import CapacityExceededError
from lscache.store.base import StorageBackend

PROBE_KEY = "__lscachetest__"


class StoreAdapter:
    """Thin synchronous facade over a StorageBackend."""

    def __init__(self, backend: StorageBackend) -> None:
        self.backend = backend

    def read(self, raw_key: str) -> str | None:
        return self.backend.get_item(raw_key)

    def write(self, raw_key: str, value: str) -> None:
        """Clear any existing value at ``raw_key``, then write ``value``.

        Some stores only accept an overwrite when the new value fits beside
        the old one, so the old value is removed first.

        Raises:
            CapacityExceededError: If the backend reports the store is full.
        """
        self.backend.remove_item(raw_key)
        try:
            self.backend.set_item(raw_key, value)
        except Exception as e:
            if self.backend.is_quota_error(e):
                raise CapacityExceededError(
                    "Store capacity exceeded",
                    context={"key": raw_key, "size": len(raw_key) + len(value)},
                ) from e
            raise

    def delete(self, raw_key: str) -> None:
        self.backend.remove_item(raw_key)

    def count(self) -> int:
        return self.backend.length()

    def key_at(self, index: int) -> str | None:
        return self.backend.key(index)

    def raw_keys(self) -> list[str]:
        """Snapshot of every key in the store, in enumeration order.

        Callers that delete while walking the store iterate this snapshot
        rather than live indices.
        """
        return self.backend.keys()

    def probe(self) -> None:
        """Write and remove a sentinel key; raises whatever the backend raises."""
        self.backend.set_item(PROBE_KEY, PROBE_KEY)
        self.backend.remove_item(PROBE_KEY)

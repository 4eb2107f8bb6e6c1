"""
Bucket: a nestable namespace of cached entries.

A bucket owns no data; it only knows its path and the service whose store
holds every bucket's records. Reads purge expired entries as a side effect.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from lscache import keys as codec
from lscache.eviction import EvictionCandidate, evict, shortfall_for
from lscache.exceptions import CapacityExceededError
from lscache.logging import log_context
from lscache.serialization import decode_value, encode_value

if TYPE_CHECKING:
    from lscache.service import CacheService


class Bucket:
    """Handle on one bucket path.

    Every operation is a no-op returning None or an empty result when the
    backing store is unavailable.
    """

    def __init__(self, service: CacheService, path: str = codec.ROOT_PATH) -> None:
        self._service = service
        self._path = path

    @property
    def path(self) -> str:
        return self._path

    def __repr__(self) -> str:
        return f"Bucket({self._path!r})"

    def create_bucket(self, name: str) -> Bucket:
        """Return the child bucket ``name``. Does not touch the store."""
        return Bucket(self._service, codec.child_path(self._path, name))

    def supported(self) -> bool:
        return self._service.supported()

    def enable_warnings(self, enabled: bool) -> None:
        self._service.enable_warnings(enabled)

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """Store a value, optionally expiring ``ttl`` clock units from now.

        A set without a positive ttl removes any earlier expiry, making the
        entry permanent. If the store is full, soonest-expiring entries from
        any bucket are evicted and the write is retried once.

        Raises:
            SerializationError: If the value cannot be serialized.
            CapacityExceededError: If the store is still full after eviction.
        """
        if not self._service.supported():
            return

        encoded = encode_value(value, key)
        data_key = codec.data_key(self._path, key)
        expiry_key = codec.expiry_key(self._path, key)
        adapter = self._service.adapter

        with log_context(bucket=self._path, operation="set"):
            try:
                adapter.write(data_key, encoded)
            except CapacityExceededError:
                shortfall = shortfall_for(
                    data_key, encoded, self._service.eviction_margin
                )
                evict(
                    adapter,
                    self._service.clock,
                    shortfall,
                    on_evict=self._warn_evicted,
                )
                try:
                    adapter.write(data_key, encoded)
                except CapacityExceededError as e:
                    self._service.warn("Could not store item after eviction", error=str(e))
                    raise

            if ttl is not None and ttl > 0:
                clock = self._service.clock
                adapter.write(expiry_key, clock.encode(clock.expires_at(ttl)))
            else:
                adapter.delete(expiry_key)

    def get(self, key: str) -> Any:
        """Return the stored value, or None if absent or expired.

        Raises:
            SerializationError: If the stored text is not valid JSON.
        """
        if not self._service.supported():
            return None
        if self._purge_if_expired(key):
            return None
        raw = self._service.adapter.read(codec.data_key(self._path, key))
        return decode_value(raw, key)

    def exists(self, key: str) -> bool:
        """Whether an unexpired entry is stored under ``key``."""
        if not self._service.supported():
            return False
        if self._purge_if_expired(key):
            return False
        return self._service.adapter.read(codec.data_key(self._path, key)) is not None

    def remove(self, key: str) -> None:
        """Delete an entry and its expiry record. No error if absent."""
        if not self._service.supported():
            return
        adapter = self._service.adapter
        adapter.delete(codec.data_key(self._path, key))
        adapter.delete(codec.expiry_key(self._path, key))

    def flush(self) -> None:
        """Delete every entry of this bucket, leaving child buckets alone."""
        self._flush(recursive=False)

    def flush_recursive(self) -> None:
        """Delete every entry of this bucket and all its descendants."""
        self._flush(recursive=True)

    def keys(self) -> list[str]:
        """Keys of this bucket's entries that carry an expiry.

        Entries stored without a ttl have no expiry record and are not
        listed.
        """
        if not self._service.supported():
            return []
        _, expiry_prefix = codec.bucket_prefixes(self._path)
        return [
            raw_key[len(expiry_prefix):]
            for raw_key in self._service.adapter.raw_keys()
            if raw_key.startswith(expiry_prefix)
        ]

    def _flush(self, recursive: bool) -> None:
        if not self._service.supported():
            return
        data_prefix, expiry_prefix = codec.bucket_prefixes(self._path, recursive=recursive)
        adapter = self._service.adapter
        with log_context(bucket=self._path, operation="flush"):
            # Deleting shifts positional indices, so walk a snapshot
            for raw_key in reversed(adapter.raw_keys()):
                if raw_key.startswith(data_prefix) or raw_key.startswith(expiry_prefix):
                    adapter.delete(raw_key)

    def _purge_if_expired(self, key: str) -> bool:
        """Delete the entry if its expiry has passed; report whether it did."""
        adapter = self._service.adapter
        expiry_key = codec.expiry_key(self._path, key)
        stamp_text = adapter.read(expiry_key)
        if stamp_text is None:
            return False

        clock = self._service.clock
        try:
            expired = clock.is_expired(clock.decode(stamp_text))
        except ValueError:
            expired = True
        if not expired:
            return False

        adapter.delete(codec.data_key(self._path, key))
        adapter.delete(expiry_key)
        return True

    def _warn_evicted(self, candidate: EvictionCandidate) -> None:
        self._service.warn(
            "Cache is full, removing item",
            key=candidate.data_key,
            expires_at=candidate.expires_at,
        )

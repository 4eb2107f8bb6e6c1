"""
Eviction planning for a full store.

When a write hits the store's capacity, space is freed across every bucket
in the store, soonest-expiring entries first. Entries without an expiry
record are never candidates.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from lscache import keys
from lscache.clock import ExpiryClock
from lscache.logging import get_logger
from lscache.store.adapter import StoreAdapter

logger = get_logger(__name__)


@dataclass(frozen=True)
class EvictionCandidate:
    """An expiring entry that may be removed to free space.

    Attributes:
        data_key: Raw key of the data record.
        expiry_key: Raw key of the expiry record.
        size: Length of the data value plus the data key. Used for
            budgeting only, not an exact account of store usage.
        expires_at: Decoded expiry stamp.
    """

    data_key: str
    expiry_key: str
    size: int
    expires_at: int


def shortfall_for(data_key: str, encoded_value: str, margin: int) -> int:
    """Characters to free before retrying a failed write.

    The margin absorbs the expiry record written after the data record
    and any bookkeeping overhead of the store.
    """
    return len(encoded_value) + len(data_key) + margin


def collect_candidates(adapter: StoreAdapter, clock: ExpiryClock) -> list[EvictionCandidate]:
    """Find every expiring entry in the store, across all buckets."""
    candidates: list[EvictionCandidate] = []
    for raw_key in adapter.raw_keys():
        if keys.classify(raw_key) is not keys.RecordKind.EXPIRY:
            continue

        stamp_text = adapter.read(raw_key)
        if stamp_text is None:
            continue
        try:
            expires_at = clock.decode(stamp_text)
        except ValueError:
            # Unreadable stamps rank as long expired
            expires_at = 0

        data_key = keys.data_key_for(raw_key)
        value = adapter.read(data_key) or ""
        candidates.append(
            EvictionCandidate(
                data_key=data_key,
                expiry_key=raw_key,
                size=len(value) + len(data_key),
                expires_at=expires_at,
            )
        )
    return candidates


def plan_eviction(
    candidates: list[EvictionCandidate],
    shortfall: int,
) -> list[EvictionCandidate]:
    """Choose which candidates to evict, in eviction order.

    Candidates are ranked latest-expiring first and popped from the end,
    so the result is the shortest soonest-expiring run whose sizes cover
    ``shortfall``. If all candidates together fall short, all are returned.
    """
    ranked = sorted(candidates, key=lambda c: c.expires_at, reverse=True)
    chosen: list[EvictionCandidate] = []
    remaining = shortfall
    while ranked and remaining > 0:
        candidate = ranked.pop()
        chosen.append(candidate)
        remaining -= candidate.size
    return chosen


def evict(
    adapter: StoreAdapter,
    clock: ExpiryClock,
    shortfall: int,
    on_evict: Callable[[EvictionCandidate], None] | None = None,
) -> list[EvictionCandidate]:
    """Free at least ``shortfall`` characters if enough candidates exist.

    Args:
        adapter: Store to scan and delete from.
        clock: Clock used to decode expiry stamps.
        shortfall: Characters that need to be freed.
        on_evict: Called once per evicted entry, before it is deleted.

    Returns:
        The evicted candidates, soonest-expiring first.
    """
    candidates = collect_candidates(adapter, clock)
    chosen = plan_eviction(candidates, shortfall)
    logger.debug(
        "Eviction pass",
        candidates=len(candidates),
        evicting=len(chosen),
        shortfall=shortfall,
    )

    for candidate in chosen:
        if on_evict is not None:
            on_evict(candidate)
        adapter.delete(candidate.data_key)
        adapter.delete(candidate.expiry_key)

    return chosen

"""
Tests for eviction planning.
"""

from __future__ import annotations

from lscache import keys
from lscache.clock import ExpiryClock
from lscache.eviction import (
    EvictionCandidate,
    collect_candidates,
    evict,
    plan_eviction,
    shortfall_for,
)
from lscache.store import MemoryStore, StoreAdapter


def _candidate(name: str, expires_at: int, size: int = 10) -> EvictionCandidate:
    return EvictionCandidate(
        data_key=keys.data_key("/", name),
        expiry_key=keys.expiry_key("/", name),
        size=size,
        expires_at=expires_at,
    )


def _put(adapter: StoreAdapter, clock: ExpiryClock, path: str, name: str, value: str, stamp: int | None) -> None:
    adapter.write(keys.data_key(path, name), value)
    if stamp is not None:
        adapter.write(keys.expiry_key(path, name), clock.encode(stamp))


class TestPlanEviction:
    """Test candidate ranking and selection."""

    def test_soonest_expiring_first(self) -> None:
        candidates = [_candidate("c", 30), _candidate("a", 10), _candidate("b", 20)]

        chosen = plan_eviction(candidates, shortfall=15)

        assert [c.expires_at for c in chosen] == [10, 20]

    def test_minimal_prefix(self) -> None:
        candidates = [_candidate("a", 10, size=100), _candidate("b", 20)]
        assert plan_eviction(candidates, shortfall=100) == [candidates[0]]

    def test_everything_when_short(self) -> None:
        candidates = [_candidate("a", 10), _candidate("b", 20)]
        assert len(plan_eviction(candidates, shortfall=1000)) == 2

    def test_nothing_for_zero_shortfall(self) -> None:
        assert plan_eviction([_candidate("a", 10)], shortfall=0) == []

    def test_no_candidates(self) -> None:
        assert plan_eviction([], shortfall=50) == []

    def test_shortfall_includes_margin(self) -> None:
        assert shortfall_for("ls-cache:/:k", '"v"', 100) == 12 + 3 + 100


class TestCollectCandidates:
    """Test reconstructing candidates from raw keys."""

    def test_only_expiring_entries_across_all_buckets(self, clock: ExpiryClock) -> None:
        adapter = StoreAdapter(MemoryStore())
        _put(adapter, clock, "/", "keep", '"forever"', None)
        _put(adapter, clock, "/", "soon", '"a"', 1_000_010)
        _put(adapter, clock, "/other/", "later", '"bb"', 1_000_020)
        adapter.write("foreign-key", "untouched")

        candidates = collect_candidates(adapter, clock)

        by_key = {c.data_key: c for c in candidates}
        assert set(by_key) == {"ls-cache:/:soon", "ls-cache:/other/:later"}
        assert by_key["ls-cache:/:soon"].size == len('"a"') + len("ls-cache:/:soon")
        assert by_key["ls-cache:/other/:later"].expires_at == 1_000_020

    def test_unreadable_stamp_ranks_first(self, clock: ExpiryClock) -> None:
        adapter = StoreAdapter(MemoryStore())
        _put(adapter, clock, "/", "ok", '"a"', 1_000_010)
        adapter.write(keys.data_key("/", "bad"), '"b"')
        adapter.write(keys.expiry_key("/", "bad"), "not-a-number")

        chosen = plan_eviction(collect_candidates(adapter, clock), shortfall=1)

        assert chosen[0].data_key == "ls-cache:/:bad"


class TestEvict:
    """Test that evict deletes both records of chosen entries."""

    def test_evict_removes_records_and_reports(self, clock: ExpiryClock) -> None:
        adapter = StoreAdapter(MemoryStore())
        _put(adapter, clock, "/", "first", '"x"', 1_000_001)
        _put(adapter, clock, "/", "second", '"y"', 1_000_002)
        seen: list[str] = []

        evicted = evict(adapter, clock, shortfall=1, on_evict=lambda c: seen.append(c.data_key))

        assert [c.data_key for c in evicted] == ["ls-cache:/:first"]
        assert seen == ["ls-cache:/:first"]
        assert adapter.read("ls-cache:/:first") is None
        assert adapter.read("ls-cache-expiry:/:first") is None
        assert adapter.read("ls-cache:/:second") == '"y"'

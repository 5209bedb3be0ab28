"""Unit tests for ReadCache.

Key Test Scenarios:
1. Entries are fresh until their TTL elapses
2. Block tolerance expires entries that trail the head
3. Expired entries remain available for stale fallback
4. Size bound evicts the oldest entry
"""

from baseproof.application.services.read_cache import (
    ReadCache,
    mark_stale_read,
    read_was_stale,
    reset_stale_flag,
)
from tests.helpers.proof_registry import FakeClock


class TestTtl:
    """Tests for TTL expiry."""

    def test_fresh_until_ttl(self) -> None:
        clock = FakeClock()
        cache = ReadCache(ttl_seconds=10, clock=clock)
        cache.set(("totalProofs",), 5)

        clock.advance(9.9)
        assert cache.get(("totalProofs",)) == 5

        clock.advance(0.1)
        assert cache.get(("totalProofs",)) is None

    def test_expired_entry_still_looked_up(self) -> None:
        clock = FakeClock()
        cache = ReadCache(ttl_seconds=1, clock=clock)
        cache.set(("getProofs", "0xabc"), [1, 2])
        clock.advance(5)

        entry = cache.lookup(("getProofs", "0xabc"))

        assert entry is not None
        assert entry.value == [1, 2]
        assert not cache.is_fresh(entry)
        assert entry.age(clock()) == 5

    def test_per_entry_ttl_override(self) -> None:
        clock = FakeClock()
        cache = ReadCache(ttl_seconds=10, clock=clock)
        cache.set(("k",), "v", ttl_seconds=1)
        clock.advance(2)

        assert cache.get(("k",)) is None


class TestBlockLag:
    """Tests for block tolerance."""

    def test_entry_behind_head_is_expired(self) -> None:
        cache = ReadCache(ttl_seconds=60, max_block_lag=2, clock=FakeClock())
        cache.set(("k",), "v", block=100)

        assert cache.get(("k",), head=102) == "v"
        assert cache.get(("k",), head=103) is None

    def test_disabled_without_tolerance(self) -> None:
        cache = ReadCache(ttl_seconds=60, clock=FakeClock())
        cache.set(("k",), "v", block=100)

        assert cache.get(("k",), head=10_000) == "v"

    def test_entry_without_block_ignores_head(self) -> None:
        cache = ReadCache(ttl_seconds=60, max_block_lag=0, clock=FakeClock())
        cache.set(("k",), "v")

        assert cache.get(("k",), head=500) == "v"


class TestBounds:
    """Tests for eviction and invalidation."""

    def test_oldest_entry_evicted(self) -> None:
        cache = ReadCache(max_entries=2, clock=FakeClock())
        cache.set(("a",), 1)
        cache.set(("b",), 2)
        cache.set(("c",), 3)

        assert ("a",) not in cache
        assert ("b",) in cache
        assert len(cache) == 2

    def test_rewrite_refreshes_position(self) -> None:
        cache = ReadCache(max_entries=2, clock=FakeClock())
        cache.set(("a",), 1)
        cache.set(("b",), 2)
        cache.set(("a",), 10)
        cache.set(("c",), 3)

        assert cache.get(("a",)) == 10
        assert ("b",) not in cache

    def test_invalidate_where(self) -> None:
        cache = ReadCache(clock=FakeClock())
        cache.set(("getProofs", "0xa"), [])
        cache.set(("hasProof", "0xa", b"\x01" * 32), True)
        cache.set(("getProofs", "0xb"), [])

        dropped = cache.invalidate_where(lambda key: key[1] == "0xa")

        assert dropped == 2
        assert ("getProofs", "0xb") in cache
        assert len(cache) == 1

    def test_invalidate_and_clear(self) -> None:
        cache = ReadCache(clock=FakeClock())
        cache.set(("a",), 1)
        cache.set(("b",), 2)

        assert cache.invalidate(("a",)) is True
        assert cache.invalidate(("a",)) is False

        cache.clear()
        assert len(cache) == 0


class TestStaleFlag:
    """Tests for the context-scoped stale flag."""

    def test_mark_and_reset(self) -> None:
        reset_stale_flag()
        assert read_was_stale() is False

        mark_stale_read()
        assert read_was_stale() is True

        reset_stale_flag()
        assert read_was_stale() is False

"""Read cache for contract lookups.

In-memory snapshot store keyed by (operation, *arguments). Invalidation
is pull-based: freshness is checked when an entry is read, there are
no background timers.

An entry is fresh while
- it is younger than its TTL, and
- when a block tolerance is configured, the head block is no more than
  max_block_lag blocks past the block the entry was fetched at.

Expired entries are kept (until evicted) so the reader can fall back to
them under the serve-stale policy. Callers learn that a stale value was
served through read_was_stale(), which is scoped to the current task
context like the correlation ID.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable, Hashable
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

CacheKey = tuple[Hashable, ...]

_stale_read: ContextVar[bool] = ContextVar("stale_read", default=False)


def reset_stale_flag() -> None:
    """Clear the stale flag for the current context (call at request start)."""
    _stale_read.set(False)


def mark_stale_read() -> None:
    """Record that a stale value was served in the current context."""
    _stale_read.set(True)


def read_was_stale() -> bool:
    """True if any read in the current context was served from a stale entry."""
    return _stale_read.get()


@dataclass
class CacheEntry:
    """Cached snapshot of one contract read.

    Attributes:
        key: (operation, *arguments).
        value: The cached result.
        fetched_at: Monotonic clock reading at store time.
        ttl_seconds: Lifetime of the entry.
        fetched_at_block: Head block number at fetch time, if tracked.
    """

    key: CacheKey
    value: Any
    fetched_at: float
    ttl_seconds: float
    fetched_at_block: int | None = None

    def age(self, now: float) -> float:
        return now - self.fetched_at

    def is_expired(self, now: float) -> bool:
        """Check if the entry has outlived its TTL."""
        return self.age(now) >= self.ttl_seconds

    def is_behind(self, head: int | None, max_block_lag: int | None) -> bool:
        """Check if the entry's source block trails the head beyond tolerance."""
        if head is None or max_block_lag is None or self.fetched_at_block is None:
            return False
        return head - self.fetched_at_block > max_block_lag


class ReadCache:
    """Bounded TTL cache for contract reads."""

    def __init__(
        self,
        ttl_seconds: float = 15.0,
        max_entries: int = 4096,
        max_block_lag: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize read cache.

        Args:
            ttl_seconds: Default entry lifetime.
            max_entries: Size bound; the oldest entry is evicted first.
            max_block_lag: Block tolerance, None to disable.
            clock: Monotonic time source (injectable for tests).
        """
        self._entries: OrderedDict[CacheKey, CacheEntry] = OrderedDict()
        self._ttl_seconds = ttl_seconds
        self._max_entries = max_entries
        self._max_block_lag = max_block_lag
        self._clock = clock
        self._log = logger.bind(component="read_cache")

    @property
    def max_block_lag(self) -> int | None:
        return self._max_block_lag

    def lookup(self, key: CacheKey) -> CacheEntry | None:
        """Return the entry for key regardless of freshness."""
        return self._entries.get(key)

    def is_fresh(self, entry: CacheEntry, head: int | None = None) -> bool:
        """Check an entry against TTL and block tolerance."""
        if entry.is_expired(self._clock()):
            return False
        return not entry.is_behind(head, self._max_block_lag)

    def get(self, key: CacheKey, head: int | None = None) -> Any | None:
        """Return the cached value if fresh, else None."""
        entry = self._entries.get(key)
        if entry is None:
            self._log.debug("cache_miss", key=_render_key(key))
            return None
        if not self.is_fresh(entry, head):
            self._log.debug("cache_expired", key=_render_key(key))
            return None
        self._log.debug("cache_hit", key=_render_key(key))
        return entry.value

    def set(
        self,
        key: CacheKey,
        value: Any,
        block: int | None = None,
        ttl_seconds: float | None = None,
    ) -> CacheEntry:
        """Store a value, evicting the oldest entry when full."""
        entry = CacheEntry(
            key=key,
            value=value,
            fetched_at=self._clock(),
            ttl_seconds=self._ttl_seconds if ttl_seconds is None else ttl_seconds,
            fetched_at_block=block,
        )
        self._entries.pop(key, None)
        self._entries[key] = entry
        while len(self._entries) > self._max_entries:
            evicted, _ = self._entries.popitem(last=False)
            self._log.debug("cache_evicted", key=_render_key(evicted))
        return entry

    def invalidate(self, key: CacheKey) -> bool:
        """Drop one entry. Returns True if it existed."""
        return self._entries.pop(key, None) is not None

    def invalidate_where(self, predicate: Callable[[CacheKey], bool]) -> int:
        """Drop every entry whose key matches predicate."""
        doomed = [key for key in self._entries if predicate(key)]
        for key in doomed:
            del self._entries[key]
        if doomed:
            self._log.debug("cache_entries_invalidated", count=len(doomed))
        return len(doomed)

    def clear(self) -> None:
        """Clear all cache entries."""
        count = len(self._entries)
        self._entries.clear()
        self._log.info("cache_cleared", entries_cleared=count)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


def _render_key(key: CacheKey) -> str:
    parts = [part.hex() if isinstance(part, bytes) else str(part) for part in key]
    return ":".join(parts)

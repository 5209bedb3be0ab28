"""In-flight request deduplication.

Concurrent lookups for the same key share one upstream fetch. The fetch
runs as its own task and each caller awaits it through asyncio.shield,
so a caller that gives up (for instance an HTTP client disconnecting)
does not cancel the fetch for the others. The fetch is cancelled only
when its last waiter leaves.

Lookup states: Requested -> InFlight -> {Satisfied | Failed}.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from baseproof.application.services.base import LoggingMixin

T = TypeVar("T")


@dataclass
class _Flight:
    task: asyncio.Task[Any]
    waiters: int = field(default=0)


class RequestCoalescer(LoggingMixin):
    """At most one in-flight fetch per key."""

    def __init__(self) -> None:
        self._inflight: dict[Hashable, _Flight] = {}
        self._init_logger(component="reader")

    async def run(self, key: Hashable, factory: Callable[[], Awaitable[T]]) -> T:
        """Run factory() for key, or join the fetch already in flight.

        Args:
            key: Deduplication key.
            factory: Zero-argument coroutine function performing the fetch.

        Returns:
            The fetch result (shared by every waiter).
        """
        flight = self._inflight.get(key)
        if flight is None:
            task = asyncio.get_running_loop().create_task(_drive(factory))
            flight = _Flight(task=task)
            self._inflight[key] = flight
            task.add_done_callback(lambda _t, k=key, f=flight: self._forget(k, f))
        else:
            self._log_operation("coalesce", key=repr(key)).debug(
                "request_joined_inflight", waiters=flight.waiters + 1
            )

        flight.waiters += 1
        try:
            return await asyncio.shield(flight.task)
        finally:
            flight.waiters -= 1
            if flight.waiters == 0 and not flight.task.done():
                self._log_operation("coalesce", key=repr(key)).debug(
                    "inflight_fetch_abandoned"
                )
                flight.task.cancel()
                self._forget(key, flight)

    def is_inflight(self, key: Hashable) -> bool:
        return key in self._inflight

    def _forget(self, key: Hashable, flight: _Flight) -> None:
        if self._inflight.get(key) is flight:
            del self._inflight[key]

    def __len__(self) -> int:
        return len(self._inflight)


async def _drive(factory: Callable[[], Awaitable[T]]) -> T:
    return await factory()

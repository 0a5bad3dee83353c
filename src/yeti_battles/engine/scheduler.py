"""Timer scheduling behind one small interface.

The engine never calls ``time`` or ``asyncio`` directly; it asks a scheduler
to run a callback after a delay and keeps the token to cancel it.
"""
from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
from typing import Any, Callable, Protocol

logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    def now_ms(self) -> int: ...

    def schedule(self, delay_ms: int, callback: Callable[[], None], name: str = "") -> Any: ...

    def cancel(self, token: Any) -> None: ...


class ManualScheduler:
    """Virtual clock. Time only moves when :meth:`advance` is called.

    Callbacks due at the same instant fire in the order they were scheduled.
    A callback may schedule or cancel other timers while running.
    """

    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms
        self._seq = itertools.count()
        self._queue: list[tuple[int, int, Callable[[], None], str]] = []
        self._cancelled: set[int] = set()

    def now_ms(self) -> int:
        return self._now

    def schedule(self, delay_ms: int, callback: Callable[[], None], name: str = "") -> int:
        token = next(self._seq)
        heapq.heappush(self._queue, (self._now + max(0, int(delay_ms)), token, callback, name))
        return token

    def cancel(self, token: Any) -> None:
        if token is None:
            return
        if any(t == token for _, t, _, _ in self._queue):
            self._cancelled.add(token)

    def pending(self) -> list[str]:
        """Names of timers that are still due to fire, soonest first."""
        return [name for _, t, _, name in sorted(self._queue) if t not in self._cancelled]

    def advance(self, ms: int) -> int:
        """Move the clock forward, firing every timer that comes due. Returns fired count."""
        target = self._now + ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, token, callback, name = heapq.heappop(self._queue)
            if token in self._cancelled:
                self._cancelled.discard(token)
                continue
            self._now = due
            logger.debug(f"Timer fired: {name or token} at {due}ms")
            callback()
            fired += 1
        self._now = target
        return fired

    def run_all(self) -> int:
        """Fire everything that is queued, however far in the future."""
        fired = 0
        while self.pending():
            due = min(d for d, t, _, _ in self._queue if t not in self._cancelled)
            fired += self.advance(due - self._now)
        return fired


class AsyncioScheduler:
    """Scheduler for hosts that already run an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now_ms(self) -> int:
        return int(self.loop.time() * 1000)

    def schedule(self, delay_ms: int, callback: Callable[[], None], name: str = "") -> asyncio.TimerHandle:
        return self.loop.call_later(max(0, delay_ms) / 1000.0, callback)

    def cancel(self, token: Any) -> None:
        if token is not None:
            token.cancel()

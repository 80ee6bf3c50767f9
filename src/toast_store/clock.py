from __future__ import annotations

import asyncio
import heapq
import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Protocol

logger = logging.getLogger(__name__)


class Cancellable(Protocol):
    """Handle returned by a scheduler; ``cancel()`` must be safe to call twice."""

    def cancel(self) -> Any:
        ...


class Scheduler(Protocol):
    """Protocol for one-shot delayed callbacks. Allows decoupling from real time in tests."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> Cancellable:
        ...


class ThreadingScheduler:
    """Fire callbacks from daemon ``threading.Timer`` threads."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(max(0.0, delay), callback)
        timer.daemon = True
        timer.start()
        return timer


class AsyncioScheduler:
    """Fire callbacks on an asyncio event loop via ``loop.call_later``.

    Without an explicit loop the running loop is used, so scheduling must
    happen from inside that loop.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(max(0.0, delay), callback)


@dataclass(order=True)
class ScheduledCall:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Deterministic fake clock. Time only moves when ``advance`` is called.

    Callbacks due within an advance run in due order (ties in scheduling
    order), including callbacks scheduled by earlier callbacks in the same
    advance.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = float(start)
        self._queue: List[ScheduledCall] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(self._now + max(0.0, delay), next(self._seq), callback)
        heapq.heappush(self._queue, call)
        return call

    def advance(self, seconds: float) -> int:
        """Move the clock forward and run every callback that falls due.

        Returns:
            Number of callbacks that ran.
        """
        if seconds < 0:
            raise ValueError("cannot advance a clock backwards")
        target = self._now + seconds
        fired = 0
        while self._queue and self._queue[0].due <= target:
            call = heapq.heappop(self._queue)
            if call.cancelled:
                continue
            self._now = call.due
            call.callback()
            fired += 1
        self._now = target
        logger.debug("ManualScheduler advanced to %.3f (%d fired)", self._now, fired)
        return fired

    def advance_ms(self, milliseconds: float) -> int:
        return self.advance(milliseconds / 1000.0)

    def run_all(self) -> int:
        """Advance until nothing is scheduled."""
        fired = 0
        while self.pending():
            fired += self.advance(max(0.0, self._queue[0].due - self._now))
        return fired

    def pending(self) -> int:
        self._queue = [c for c in self._queue if not c.cancelled]
        heapq.heapify(self._queue)
        return len(self._queue)


__all__ = [
    "AsyncioScheduler",
    "Cancellable",
    "ManualScheduler",
    "ScheduledCall",
    "Scheduler",
    "ThreadingScheduler",
]

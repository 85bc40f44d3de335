from __future__ import annotations

import heapq
import itertools
from typing import Callable, List, Protocol, Tuple


class TimerHandle:
    """One pending callback. ``cancel`` is idempotent."""

    def __init__(self, due_ms: int, callback: Callable[[], None]) -> None:
        self.due_ms = due_ms
        self.callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.pending:
            return
        self.fired = True
        self.callback()


class Scheduler(Protocol):
    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle: ...


class ManualScheduler:
    """Virtual clock driven by explicit ``advance`` calls.

    Callbacks run in due order; a callback scheduled while advancing runs in
    the same ``advance`` call if it falls due within the window.
    """

    def __init__(self) -> None:
        self.now_ms = 0
        self._queue: List[Tuple[int, int, TimerHandle]] = []
        self._counter = itertools.count()

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        if delay_ms < 0:
            raise ValueError(f"negative delay {delay_ms}")
        handle = TimerHandle(self.now_ms + int(delay_ms), callback)
        heapq.heappush(self._queue, (handle.due_ms, next(self._counter), handle))
        return handle

    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if h.pending)

    def advance(self, ms: int) -> int:
        """Move the clock forward by ``ms`` and return how many callbacks ran."""
        target = self.now_ms + int(ms)
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            self.now_ms = due
            if handle.pending:
                handle.fire()
                ran += 1
        self.now_ms = target
        return ran

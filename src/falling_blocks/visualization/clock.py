from __future__ import annotations

from typing import Callable, List, Optional

import pygame

from falling_blocks.game.scheduler import TimerHandle


class PygameScheduler:
    """Scheduler backed by ``pygame.time.get_ticks``; the main loop calls ``poll``."""

    def __init__(self, now: Optional[Callable[[], int]] = None) -> None:
        self._now = now or pygame.time.get_ticks
        self._handles: List[TimerHandle] = []

    def schedule(self, delay_ms: int, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self._now() + int(delay_ms), callback)
        self._handles.append(handle)
        return handle

    def poll(self) -> int:
        now = self._now()
        due = sorted((h for h in self._handles if h.pending and h.due_ms <= now), key=lambda h: h.due_ms)
        self._handles = [h for h in self._handles if h.pending and h not in due]
        for handle in due:
            handle.fire()
        return len(due)

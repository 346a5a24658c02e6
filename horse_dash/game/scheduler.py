# horse_dash/game/scheduler.py
from __future__ import annotations
import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Tuple

logger = logging.getLogger(__name__)


@dataclass
class ScheduledTask:
    fire_at: int
    callback: Callable[[], None]
    cancelled: bool = False


@dataclass
class TickScheduler:
    """
    Cooperative timer queue driven by the simulation tick counter.

    Tasks due at the same tick fire in the order they were scheduled. A task
    may schedule new tasks; those due at or before the current tick fire in
    the same `advance` call.
    """
    tick: int = 0
    _heap: List[Tuple[int, int, ScheduledTask]] = field(default_factory=list)
    _seq: itertools.count = field(default_factory=itertools.count)

    def call_at(self, tick: int, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(fire_at=int(tick), callback=callback)
        heapq.heappush(self._heap, (task.fire_at, next(self._seq), task))
        return task

    def call_later(self, delay: int, callback: Callable[[], None]) -> ScheduledTask:
        return self.call_at(self.tick + max(0, int(delay)), callback)

    @staticmethod
    def cancel(task: ScheduledTask | None):
        if task is not None:
            task.cancelled = True

    def pending(self) -> int:
        return sum(1 for _, _, t in self._heap if not t.cancelled)

    def advance(self, tick: int) -> int:
        """Move the clock to `tick` and run everything due. Returns how many fired."""
        self.tick = int(tick)
        fired = 0
        while self._heap and self._heap[0][0] <= self.tick:
            _, _, task = heapq.heappop(self._heap)
            if task.cancelled:
                continue
            task.callback()
            fired += 1
        return fired

    def clear(self):
        for _, _, task in self._heap:
            task.cancelled = True
        self._heap.clear()

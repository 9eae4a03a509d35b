from __future__ import annotations

"""Cooperative clock: the tick source and deferred-callback scheduler.

Nothing runs on a background thread. The owner calls `run_due()` from its
loop and every due callback fires there, one at a time, in due order.
"""

import heapq
import itertools
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional


@dataclass(order=True)
class ScheduledTask:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    interval: Optional[float] = field(default=None, compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class CooperativeClock:
    def __init__(self, now: Callable[[], float] = time.monotonic) -> None:
        self._now = now
        self._queue: List[ScheduledTask] = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now()

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(due=self._now() + max(0.0, float(delay_s)), seq=next(self._seq), callback=callback)
        heapq.heappush(self._queue, task)
        return task

    def call_every(self, interval_s: float, callback: Callable[[], None]) -> ScheduledTask:
        if interval_s <= 0:
            raise ValueError(f"interval must be positive, got {interval_s}")
        task = ScheduledTask(
            due=self._now() + float(interval_s), seq=next(self._seq), callback=callback, interval=float(interval_s)
        )
        heapq.heappush(self._queue, task)
        return task

    def next_due(self) -> Optional[float]:
        self._drop_cancelled()
        return self._queue[0].due if self._queue else None

    def pending(self) -> int:
        self._drop_cancelled()
        return sum(1 for t in self._queue if not t.cancelled)

    def run_due(self, now: Optional[float] = None) -> int:
        """Fire every task due at or before `now`. Returns how many fired.

        A repeating task that fell behind fires once per missed interval so
        the tick count matches elapsed time.
        """
        limit = self._now() if now is None else now
        fired = 0
        while self._queue and self._queue[0].due <= limit:
            task = heapq.heappop(self._queue)
            if task.cancelled:
                continue
            if task.interval is not None:
                # Re-arm before running so the callback may cancel it
                task.due += task.interval
                task.seq = next(self._seq)
                heapq.heappush(self._queue, task)
            task.callback()
            fired += 1
        return fired

    def _drop_cancelled(self) -> None:
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)

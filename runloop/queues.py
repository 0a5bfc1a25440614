"""Containers for pending work: a FIFO task queue and a min-heap of timers."""

from __future__ import annotations

import heapq
import math
from collections import deque
from collections.abc import Iterator

from runloop.clock import Clock
from runloop.errors import InvalidDelayError
from runloop.task import Task, TimerEntry


def validate_delay(delay_ms: float) -> float:
    if isinstance(delay_ms, bool) or not isinstance(delay_ms, int | float):
        raise TypeError(f"delay_ms must be a number, got {type(delay_ms).__name__}")
    try:
        delay = float(delay_ms)
    except OverflowError as exc:
        raise InvalidDelayError(delay_ms) from exc
    if math.isnan(delay) or math.isinf(delay) or delay < 0.0:
        raise InvalidDelayError(delay_ms)
    return delay


class TaskQueue:
    """Strict FIFO queue of tasks."""

    def __init__(self) -> None:
        self._items: deque[Task] = deque()

    def push_back(self, task: Task) -> None:
        self._items.append(task)

    def pop_front(self) -> Task | None:
        if not self._items:
            return None
        return self._items.popleft()

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[Task]:
        return iter(tuple(self._items))


class TimerSet:
    """Pending timers ordered by ``(expiry, insertion)``.

    Expiries are absolute instants on ``clock``; they are computed once at
    insertion and never recomputed.
    """

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._sequence = 0
        self._items: list[tuple[float, int, TimerEntry]] = []

    def insert(self, task: Task, delay_ms: float) -> TimerEntry:
        delay = validate_delay(delay_ms)
        entry = TimerEntry(task=task, expiry=self._clock.now() + delay)
        self._sequence += 1
        heapq.heappush(self._items, (entry.expiry, self._sequence, entry))
        return entry

    def drain_expired(self, now: float) -> list[Task]:
        expired: list[Task] = []
        while self._items and self._items[0][0] <= now:
            _expiry, _sequence, entry = heapq.heappop(self._items)
            expired.append(entry.task)
        return expired

    def min_expiry(self) -> float | None:
        if not self._items:
            return None
        return self._items[0][0]

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)


__all__ = ["TaskQueue", "TimerSet", "validate_delay"]

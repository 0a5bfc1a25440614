"""Clock sources for the scheduler.

All instants are milliseconds on a monotonic timeline. ``MonotonicClock``
reads the process monotonic clock and blocks on the scheduler's condition
while idle; ``SimClock`` is virtual and jumps forward instead of blocking,
which makes every run deterministic.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import InitVar, dataclass, field
from typing import Protocol, runtime_checkable


def _coerce_finite_float(value: float, *, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise TypeError(f"{name} must be float, got {type(value).__name__}")
    try:
        coerced = float(value)
    except OverflowError as exc:
        raise ValueError(f"{name} must be finite, got {value!r}") from exc
    if math.isnan(coerced) or math.isinf(coerced):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return coerced


@runtime_checkable
class Clock(Protocol):
    def now(self) -> float:
        """Current instant in milliseconds."""
        ...

    def wait(self, condition: threading.Condition, timeout_ms: float) -> None:
        """Idle for up to ``timeout_ms``; called with ``condition`` held."""
        ...


class MonotonicClock:
    def now(self) -> float:
        return time.monotonic_ns() / 1_000_000

    def wait(self, condition: threading.Condition, timeout_ms: float) -> None:
        # notify() from a producer ends the wait early; the loop re-waits
        # after a capped timeout
        timeout = min(max(0.0, timeout_ms) / 1000, threading.TIMEOUT_MAX)
        condition.wait(timeout=timeout)


@dataclass
class SimClock:
    """Virtual clock: ``wait`` advances time instead of sleeping."""

    start_ms: InitVar[float] = 0.0
    _mut_current_time: float = field(init=False, default=0.0)

    def __post_init__(self, start_ms: float) -> None:
        self._mut_current_time = _coerce_finite_float(start_ms, name="start_ms")

    @property
    def current_time(self) -> float:
        return self._mut_current_time

    def now(self) -> float:
        return self._mut_current_time

    def wait(self, condition: threading.Condition, timeout_ms: float) -> None:
        self.advance_by(max(0.0, timeout_ms))

    def advance_by(self, delta_ms: float) -> float:
        delta = _coerce_finite_float(delta_ms, name="delta_ms")
        if delta < 0.0:
            raise ValueError("delta_ms must be >= 0")
        self._mut_current_time += delta
        return self.current_time

    def advance_to(self, target_ms: float) -> float:
        target = _coerce_finite_float(target_ms, name="target_ms")
        if target > self._mut_current_time:
            self._mut_current_time = target
        return self.current_time

    def set_time(self, new_ms: float) -> float:
        self._mut_current_time = _coerce_finite_float(new_ms, name="new_ms")
        return self.current_time


__all__ = [
    "Clock",
    "MonotonicClock",
    "SimClock",
]

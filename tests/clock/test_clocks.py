from __future__ import annotations

import math
import threading

import pytest

from runloop import Clock, MonotonicClock, SimClock


class TestSimClock:
    def test_starts_at_given_instant(self) -> None:
        assert SimClock().now() == 0.0
        assert SimClock(1500).now() == 1500.0

    def test_advance_by_moves_forward(self) -> None:
        clock = SimClock(10.0)
        assert clock.advance_by(2.5) == 12.5
        assert clock.current_time == 12.5

    def test_advance_by_rejects_negative(self) -> None:
        with pytest.raises(ValueError, match="delta_ms must be >= 0"):
            SimClock().advance_by(-1)

    def test_advance_to_never_moves_backwards(self) -> None:
        clock = SimClock(100.0)
        assert clock.advance_to(50.0) == 100.0
        assert clock.advance_to(150.0) == 150.0

    def test_set_time_can_move_backwards(self) -> None:
        clock = SimClock(100.0)
        assert clock.set_time(20.0) == 20.0

    def test_wait_advances_without_blocking(self) -> None:
        clock = SimClock()
        condition = threading.Condition()
        with condition:
            clock.wait(condition, 1000.0)
        assert clock.now() == 1000.0

    @pytest.mark.parametrize("value", [math.nan, math.inf, -math.inf])
    def test_rejects_non_finite(self, value: float) -> None:
        with pytest.raises(ValueError, match="must be finite"):
            SimClock(value)

    def test_start_ms_keyword(self) -> None:
        clock = SimClock(start_ms=5.0)
        assert clock.now() == 5.0
        assert clock.advance_by(1.5) == 6.5

    def test_rejects_int_too_large_for_float(self) -> None:
        with pytest.raises(ValueError, match="start_ms must be finite"):
            SimClock(start_ms=10**400)

    def test_rejects_non_numbers(self) -> None:
        with pytest.raises(TypeError, match="start_ms must be float"):
            SimClock("0")  # type: ignore[arg-type]


class TestMonotonicClock:
    def test_is_non_decreasing(self) -> None:
        clock = MonotonicClock()
        first = clock.now()
        second = clock.now()
        assert second >= first

    def test_wait_returns_after_timeout(self) -> None:
        clock = MonotonicClock()
        condition = threading.Condition()
        start = clock.now()
        with condition:
            clock.wait(condition, 5.0)
        assert clock.now() - start >= 4.0

    def test_wait_ends_early_when_notified(self) -> None:
        clock = MonotonicClock()
        condition = threading.Condition()

        def _notify() -> None:
            with condition:
                condition.notify_all()

        start = clock.now()
        with condition:
            threading.Timer(0.02, _notify).start()
            clock.wait(condition, 10_000.0)
        assert clock.now() - start < 5_000.0

    def test_wait_caps_timeout_beyond_platform_limit(self) -> None:
        class RecordingCondition:
            def __init__(self) -> None:
                self.timeouts: list[float] = []

            def wait(self, timeout: float) -> bool:
                self.timeouts.append(timeout)
                return False

        condition = RecordingCondition()
        MonotonicClock().wait(condition, 10**13)  # type: ignore[arg-type]
        assert condition.timeouts == [threading.TIMEOUT_MAX]

    def test_huge_wait_still_ends_when_notified(self) -> None:
        clock = MonotonicClock()
        condition = threading.Condition()

        def _notify() -> None:
            with condition:
                condition.notify_all()

        with condition:
            threading.Timer(0.02, _notify).start()
            clock.wait(condition, 10**13)


def test_both_clocks_satisfy_protocol() -> None:
    assert isinstance(SimClock(), Clock)
    assert isinstance(MonotonicClock(), Clock)

"""Shared fixtures for scheduler tests."""

from __future__ import annotations

import pytest

from runloop import LoopConfig, Scheduler, SimClock


@pytest.fixture(autouse=True)
def _isolate_loop_env(monkeypatch):
    """Keep developer RUNLOOP_* settings out of the tests."""
    monkeypatch.delenv("RUNLOOP_MIN_TICK_MS", raising=False)
    monkeypatch.delenv("RUNLOOP_PROFILE", raising=False)


@pytest.fixture
def clock() -> SimClock:
    return SimClock()


@pytest.fixture
def loop(clock: SimClock) -> Scheduler:
    return Scheduler(clock, config=LoopConfig())

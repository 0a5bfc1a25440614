from __future__ import annotations

import pytest

from runloop import ConfigError, LoopConfig, Scheduler, SimClock
from runloop.profiling import profile


def test_defaults_without_environment() -> None:
    config = LoopConfig.from_env({})

    assert config.min_tick_ms == 1.0
    assert config.profile is False


def test_reads_environment_values() -> None:
    config = LoopConfig.from_env({"RUNLOOP_MIN_TICK_MS": "2.5", "RUNLOOP_PROFILE": "yes"})

    assert config.min_tick_ms == 2.5
    assert config.profile is True


@pytest.mark.parametrize("raw", ["abc", "0", "-1", "nan", "inf"])
def test_rejects_bad_min_tick(raw: str) -> None:
    with pytest.raises(ConfigError, match="RUNLOOP_MIN_TICK_MS"):
        LoopConfig.from_env({"RUNLOOP_MIN_TICK_MS": raw})


def test_rejects_unrecognised_flag() -> None:
    with pytest.raises(ConfigError, match="RUNLOOP_PROFILE"):
        LoopConfig.from_env({"RUNLOOP_PROFILE": "maybe"})


def test_direct_construction_is_validated() -> None:
    with pytest.raises(ValueError):
        LoopConfig(min_tick_ms=0)


def test_scheduler_reads_process_environment(monkeypatch) -> None:
    monkeypatch.setenv("RUNLOOP_MIN_TICK_MS", "7")

    assert Scheduler(SimClock()).config.min_tick_ms == 7.0


def test_profiling_reports_each_task(capsys) -> None:
    loop = Scheduler(SimClock(), config=LoopConfig(profile=True))
    loop.queue_microtask(lambda: None, name="measured")
    loop.schedule_after(lambda: None, 5)

    loop.run()

    err = capsys.readouterr().err
    assert "[PROFILE] microtask #1 measured:" in err
    assert "[PROFILE] macrotask #2:" in err


def test_profile_reports_failing_task(capsys) -> None:
    with pytest.raises(RuntimeError), profile("macrotask #9 broken", enabled=True):
        raise RuntimeError("boom")

    err = capsys.readouterr().err
    assert err.startswith("[PROFILE] macrotask #9 broken: ")
    assert err.rstrip().endswith("ms")


def test_profile_disabled_writes_nothing(capsys) -> None:
    with profile("microtask #1", enabled=False):
        pass

    assert capsys.readouterr().err == ""

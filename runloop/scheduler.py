"""Run-to-completion scheduler with microtask, macrotask and timer classes.

One outer iteration of :meth:`Scheduler.run`:

1. drain microtasks to exhaustion (a microtask may queue more microtasks);
2. promote expired timers into the macrotask queue, earliest expiry first;
3. drain any microtasks that appeared meanwhile;
4. execute exactly one macrotask, then promote expired timers again;
5. return once microtasks, macrotasks and timers are all empty;
6. otherwise, with only timers pending, idle until the nearest expiry.

All three containers are guarded by a single condition variable. Task
bodies run with the lock released, so they (and other threads) can queue
more work while the loop is executing.
"""

from __future__ import annotations

import itertools
import logging
import math
import threading
from collections.abc import Callable
from typing import Any

from runloop.clock import Clock, MonotonicClock
from runloop.config import LoopConfig
from runloop.errors import RuntimeStateError
from runloop.profiling import profile
from runloop.queues import TaskQueue, TimerSet, validate_delay
from runloop.result import Err, Ok
from runloop.runtimes.base import RuntimeResult
from runloop.task import Task, TimerEntry

logger = logging.getLogger(__name__)


class Scheduler:
    """Owns the pending work of one event loop.

    Schedulers hold no shared state; any number of them can coexist.

    Args:
        clock: Instant source in milliseconds. Defaults to ``MonotonicClock``;
            pass a ``SimClock`` for deterministic runs.
        config: Loop tuning. Defaults to ``LoopConfig.from_env()``.
    """

    def __init__(self, clock: Clock | None = None, *, config: LoopConfig | None = None) -> None:
        self._clock: Clock = clock if clock is not None else MonotonicClock()
        self._config = config if config is not None else LoopConfig.from_env()
        self._cond = threading.Condition(threading.Lock())
        self._ids = itertools.count(1)
        self._micro = TaskQueue()
        self._macro = TaskQueue()
        self._timers = TimerSet(self._clock)
        self._last_now = -math.inf
        self._executed = 0
        self._running = False

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def config(self) -> LoopConfig:
        return self._config

    @property
    def executed(self) -> int:
        """Number of task bodies started so far."""
        return self._executed

    @property
    def pending_microtasks(self) -> int:
        with self._cond:
            return len(self._micro)

    @property
    def pending_macrotasks(self) -> int:
        with self._cond:
            return len(self._macro)

    @property
    def pending_timers(self) -> int:
        with self._cond:
            return len(self._timers)

    def is_drained(self) -> bool:
        with self._cond:
            return self._all_empty()

    # -- producers -----------------------------------------------------

    def queue_microtask(self, callback: Callable[[], Any], *, name: str | None = None) -> Task:
        """Append ``callback`` to the microtask queue.

        Safe to call before ``run()``, from inside a running task, or from
        another thread.
        """
        _ensure_callable(callback)
        with self._cond:
            task = Task(id=next(self._ids), body=callback, name=name)
            self._micro.push_back(task)
            self._cond.notify_all()
        logger.debug("queued microtask %s", task.describe())
        return task

    def schedule_after(
        self,
        callback: Callable[[], Any],
        delay_ms: float,
        *,
        name: str | None = None,
    ) -> TimerEntry:
        """Run ``callback`` as a macrotask once ``delay_ms`` has elapsed.

        A zero delay still goes through timer promotion, so the callback
        runs after macrotasks that are already queued.

        Raises:
            InvalidDelayError: ``delay_ms`` is negative or not finite.
            TypeError: ``callback`` is not callable or ``delay_ms`` is not a number.
        """
        _ensure_callable(callback)
        validate_delay(delay_ms)
        with self._cond:
            task = Task(id=next(self._ids), body=callback, name=name)
            entry = self._timers.insert(task, delay_ms)
            self._cond.notify_all()
        logger.debug("scheduled timer %s at %.3fms", task.describe(), entry.expiry)
        return entry

    set_timeout = schedule_after

    # -- run loop ------------------------------------------------------

    def run(self) -> None:
        """Execute pending work until every container is empty.

        An exception raised by a task propagates unchanged. The task has
        already been removed from its queue, so calling ``run()`` again
        resumes with the remaining work.
        """
        with self._cond:
            if self._running:
                raise RuntimeStateError("Scheduler.run() is already in progress")
            self._running = True
        logger.debug("run loop started")
        try:
            self._loop()
        finally:
            with self._cond:
                self._running = False
        logger.debug("run loop drained after %d task(s)", self._executed)

    def run_safe(self) -> RuntimeResult[None]:
        """Like :meth:`run`, but return task faults as ``Err`` instead of raising."""
        try:
            self.run()
        except Exception as exc:
            return RuntimeResult(Err(exc))
        return RuntimeResult(Ok(None))

    def _loop(self) -> None:
        while True:
            self._drain_microtasks()
            self._promote_expired()
            if self.pending_microtasks:
                self._drain_microtasks()

            task = self._pop(self._macro)
            if task is not None:
                self._execute(task, "macrotask")
                self._promote_expired()
                continue

            with self._cond:
                if self._all_empty():
                    return
                if self._micro or self._macro:
                    # a producer raced in after the checks above
                    continue
                self._idle_wait()

    def _drain_microtasks(self) -> None:
        while True:
            task = self._pop(self._micro)
            if task is None:
                return
            self._execute(task, "microtask")

    def _pop(self, queue: TaskQueue) -> Task | None:
        with self._cond:
            return queue.pop_front()

    def _promote_expired(self) -> None:
        with self._cond:
            now = self._now()
            expired = self._timers.drain_expired(now)
            for task in expired:
                self._macro.push_back(task)
        if expired:
            logger.debug(
                "promoted %d timer(s) at %.3fms: %s",
                len(expired),
                now,
                ", ".join(task.describe() for task in expired),
            )

    def _execute(self, task: Task, kind: str) -> None:
        self._executed += 1
        logger.debug("running %s %s", kind, task.describe())
        try:
            with profile(f"{kind} {task.describe()}", enabled=self._config.profile):
                task.run()
        except Exception as exc:
            logger.error("%s %s raised %s: %s", kind, task.describe(), type(exc).__name__, exc)
            raise

    # -- helpers (lock held) -------------------------------------------

    def _now(self) -> float:
        # never step back behind an instant already observed
        now = self._clock.now()
        if now < self._last_now:
            return self._last_now
        self._last_now = now
        return now

    def _all_empty(self) -> bool:
        return self._micro.is_empty() and self._macro.is_empty() and self._timers.is_empty()

    def _idle_wait(self) -> None:
        nearest = self._timers.min_expiry()
        if nearest is None:
            return
        remaining = nearest - self._now()
        wait_ms = remaining if remaining > 0 else self._config.min_tick_ms
        logger.debug("idle for %.3fms until next timer", wait_ms)
        self._clock.wait(self._cond, wait_ms)


def _ensure_callable(callback: Any) -> None:
    if not callable(callback):
        raise TypeError(f"task body must be callable, got {type(callback).__name__}")


__all__ = ["Scheduler"]

"""ThreadedRuntime - run a scheduler on a dedicated worker thread."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from runloop.errors import RuntimeStateError

if TYPE_CHECKING:
    from runloop.scheduler import Scheduler

logger = logging.getLogger(__name__)


class ThreadedRuntime:
    """Hosts ``scheduler.run()`` on a daemon thread.

    Producers keep calling ``queue_microtask``/``schedule_after`` on the
    scheduler from any thread; an idle loop wakes up for them. The worker
    exits once the scheduler drains, so seed work before ``start()``.
    A task fault on the worker is re-raised from :meth:`join`.
    """

    def __init__(self, scheduler: Scheduler, *, name: str = "runloop-worker") -> None:
        self._scheduler = scheduler
        self._name = name
        self._thread: threading.Thread | None = None
        self._error: BaseException | None = None

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> ThreadedRuntime:
        if self._thread is not None:
            raise RuntimeStateError("ThreadedRuntime can only be started once")
        self._thread = threading.Thread(target=self._worker, name=self._name, daemon=True)
        self._thread.start()
        return self

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the loop to drain.

        Returns:
            ``True`` once the worker has exited, ``False`` if ``timeout``
            (seconds) elapsed first.
        """
        if self._thread is None:
            raise RuntimeStateError("ThreadedRuntime.join() called before start()")
        self._thread.join(timeout)
        if self._thread.is_alive():
            return False
        if self._error is not None:
            error, self._error = self._error, None
            raise error
        return True

    def _worker(self) -> None:
        try:
            self._scheduler.run()
        except BaseException as exc:
            logger.debug("worker %s stopped on %s", self._name, type(exc).__name__)
            self._error = exc


__all__ = ["ThreadedRuntime"]

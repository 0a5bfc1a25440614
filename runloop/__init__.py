"""
runloop - a deterministic run-to-completion event loop.

Work falls into three classes. Microtasks run first and are always drained
to exhaustion; macrotasks run one per loop iteration; timers become
macrotasks once their delay has elapsed.

Example:
    >>> from runloop import Scheduler, SimClock
    >>>
    >>> loop = Scheduler(SimClock())
    >>> order = []
    >>> _ = loop.schedule_after(lambda: order.append("timer"), 1000)
    >>> _ = loop.queue_microtask(lambda: order.append("microtask"))
    >>> loop.run()
    >>> order
    ['microtask', 'timer']
"""

from runloop.clock import Clock, MonotonicClock, SimClock
from runloop.config import LoopConfig
from runloop.errors import ConfigError, InvalidDelayError, RunloopError, RuntimeStateError
from runloop.promise import Promise, PromiseState
from runloop.queues import TaskQueue, TimerSet
from runloop.result import Err, Ok, Result
from runloop.runtimes import AsyncioRuntime, RuntimeResult, ThreadedRuntime
from runloop.scheduler import Scheduler
from runloop.task import Task, TimerEntry

__version__ = "0.1.0"

__all__ = [
    # Loop
    "Scheduler",
    "Task",
    "TimerEntry",
    "TaskQueue",
    "TimerSet",
    # Clocks
    "Clock",
    "MonotonicClock",
    "SimClock",
    # Producers
    "Promise",
    "PromiseState",
    # Hosting
    "AsyncioRuntime",
    "ThreadedRuntime",
    "RuntimeResult",
    "Result",
    "Ok",
    "Err",
    # Config / errors
    "LoopConfig",
    "RunloopError",
    "InvalidDelayError",
    "ConfigError",
    "RuntimeStateError",
]

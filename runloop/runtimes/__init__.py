"""Hosting runtimes for a ``Scheduler``.

- ``Scheduler.run()``: blocking, on the caller's thread
- ThreadedRuntime: on a dedicated worker thread
- AsyncioRuntime: awaited from asyncio code
"""

from runloop.runtimes.base import RuntimeResult
from runloop.runtimes.asyncio_runtime import AsyncioRuntime
from runloop.runtimes.threaded import ThreadedRuntime

__all__ = [
    "RuntimeResult",
    "AsyncioRuntime",
    "ThreadedRuntime",
]

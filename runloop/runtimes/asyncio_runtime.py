"""AsyncioRuntime - drive a scheduler from asyncio code."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from runloop.result import Err, Ok
from runloop.runtimes.base import RuntimeResult

if TYPE_CHECKING:
    from runloop.scheduler import Scheduler


class AsyncioRuntime:
    """Runs the blocking loop in a worker thread so the event loop stays free."""

    async def run(self, scheduler: Scheduler) -> None:
        await asyncio.to_thread(scheduler.run)

    async def run_safe(self, scheduler: Scheduler) -> RuntimeResult[None]:
        try:
            await self.run(scheduler)
        except Exception as e:
            return RuntimeResult(Err(e))
        return RuntimeResult(Ok(None))


__all__ = ["AsyncioRuntime"]

"""Units of work handled by the scheduler."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Task:
    """A zero-argument callable tagged with its enqueue sequence number.

    ``id`` is assigned by the owning scheduler and is unique per scheduler.
    A task is executed at most once.
    """

    id: int
    body: Callable[[], Any] = field(compare=False)
    name: str | None = field(default=None, compare=False)

    def run(self) -> Any:
        return self.body()

    def describe(self) -> str:
        if self.name:
            return f"#{self.id} {self.name}"
        return f"#{self.id}"


@dataclass(frozen=True)
class TimerEntry:
    task: Task
    expiry: float


__all__ = ["Task", "TimerEntry"]

"""Error types raised by the scheduler and its hosting runtimes.

Task bodies are never wrapped: a task that raises propagates its own
exception out of ``Scheduler.run()``. The types below cover misuse of the
scheduling API itself.
"""

from __future__ import annotations

from typing import Any


class RunloopError(Exception):
    """Base class for runloop errors."""


class InvalidDelayError(RunloopError, ValueError):
    """Raised when a timer is requested with a negative or non-finite delay."""

    def __init__(self, delay_ms: Any) -> None:
        self.delay_ms = delay_ms
        super().__init__(f"delay_ms must be a finite non-negative number, got {delay_ms!r}")


class ConfigError(RunloopError, ValueError):
    def __init__(self, key: str, raw: Any, reason: str) -> None:
        self.key = key
        self.raw = raw
        super().__init__(f"Invalid value for {key}: {raw!r} ({reason})")


class RuntimeStateError(RunloopError):
    """Raised when a hosting runtime is driven out of order."""


__all__ = [
    "ConfigError",
    "InvalidDelayError",
    "RunloopError",
    "RuntimeStateError",
]

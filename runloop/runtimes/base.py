"""Result type shared by the ``run_safe`` entry points."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from runloop.result import Result

T = TypeVar("T")


@dataclass(frozen=True)
class RuntimeResult(Generic[T]):
    """Outcome of a complete loop run."""

    result: Result[T]

    @property
    def is_ok(self) -> bool:
        return self.result.is_ok()

    @property
    def is_err(self) -> bool:
        return self.result.is_err()

    def unwrap(self) -> T:
        """Get value or raise if error."""
        return self.result.unwrap()

    def unwrap_err(self) -> Exception:
        """Get error or raise if ok."""
        return self.result.unwrap_err()

    def display(self) -> str:
        if self.is_ok:
            return f"Ok({self.result.ok()!r})"
        return f"Err({self.result.err()!r})"


__all__ = ["RuntimeResult"]

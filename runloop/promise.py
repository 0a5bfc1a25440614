"""Single-assignment promise whose reactions run as microtasks.

A ``Promise`` starts pending and settles exactly once, either fulfilled
with a value or rejected with an exception. Reactions registered with
:meth:`Promise.then` are never called synchronously: each one is queued
on the owning scheduler as a microtask when the promise settles (or
immediately, if it already has).

Example::

    loop = Scheduler()
    p = Promise(loop, lambda resolve, reject: resolve(21))
    p.then(lambda v: v * 2).then(print)
    loop.run()   # prints 42
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from runloop.scheduler import Scheduler

T = TypeVar("T")

Resolver = Callable[[Any], bool]
Rejecter = Callable[[BaseException], bool]


class PromiseState(Enum):
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


@dataclass(frozen=True)
class _Reaction:
    on_fulfilled: Callable[[Any], Any] | None
    on_rejected: Callable[[BaseException], Any] | None
    derived: Promise[Any]


class Promise(Generic[T]):
    def __init__(
        self,
        scheduler: Scheduler,
        executor: Callable[[Resolver, Rejecter], Any] | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._lock = threading.Lock()
        self._state = PromiseState.PENDING
        self._value: Any = None
        self._reason: BaseException | None = None
        # set once resolve() has adopted another promise's outcome
        self._locked_in = False
        self._reactions: list[_Reaction] = []
        if executor is not None:
            try:
                executor(self.resolve, self.reject)
            except Exception as exc:
                self.reject(exc)

    @classmethod
    def resolved(cls, scheduler: Scheduler, value: T) -> Promise[T]:
        promise: Promise[T] = cls(scheduler)
        promise.resolve(value)
        return promise

    @classmethod
    def rejected(cls, scheduler: Scheduler, error: BaseException) -> Promise[Any]:
        promise: Promise[Any] = cls(scheduler)
        promise.reject(error)
        return promise

    @property
    def state(self) -> PromiseState:
        return self._state

    @property
    def value(self) -> T | None:
        """Fulfilment value, or ``None`` while pending or rejected."""
        return self._value

    @property
    def reason(self) -> BaseException | None:
        return self._reason

    def resolve(self, value: Any) -> bool:
        """Fulfil with ``value``, or follow it if it is another promise.

        Returns ``False`` when the promise was already settled or locked in.
        """
        if value is self:
            return self.reject(TypeError("a promise cannot be resolved with itself"))
        if isinstance(value, Promise):
            with self._lock:
                if self._state is not PromiseState.PENDING or self._locked_in:
                    return False
                self._locked_in = True
            value.then(self._adopt_value, self._adopt_reason)
            return True
        return self._settle(PromiseState.FULFILLED, value, None)

    def reject(self, error: BaseException) -> bool:
        if not isinstance(error, BaseException):
            raise TypeError(f"error must be BaseException, got {type(error).__name__}")
        return self._settle(PromiseState.REJECTED, None, error)

    def then(
        self,
        on_fulfilled: Callable[[T], Any] | None = None,
        on_rejected: Callable[[BaseException], Any] | None = None,
    ) -> Promise[Any]:
        """Register reactions and return a promise for their outcome.

        A missing reaction passes the settled outcome through unchanged.
        A reaction that raises rejects the returned promise.
        """
        derived: Promise[Any] = Promise(self._scheduler)
        reaction = _Reaction(on_fulfilled, on_rejected, derived)
        with self._lock:
            if self._state is PromiseState.PENDING:
                self._reactions.append(reaction)
                return derived
        self._dispatch(reaction)
        return derived

    def catch(self, on_rejected: Callable[[BaseException], Any]) -> Promise[Any]:
        return self.then(None, on_rejected)

    def __repr__(self) -> str:
        if self._state is PromiseState.FULFILLED:
            return f"Promise(fulfilled, {self._value!r})"
        if self._state is PromiseState.REJECTED:
            return f"Promise(rejected, {self._reason!r})"
        return "Promise(pending)"

    def _adopt_value(self, value: Any) -> None:
        self._settle(PromiseState.FULFILLED, value, None, adopting=True)

    def _adopt_reason(self, error: BaseException) -> None:
        self._settle(PromiseState.REJECTED, None, error, adopting=True)

    def _settle(
        self,
        state: PromiseState,
        value: Any,
        reason: BaseException | None,
        *,
        adopting: bool = False,
    ) -> bool:
        with self._lock:
            if self._state is not PromiseState.PENDING:
                return False
            if self._locked_in and not adopting:
                return False
            self._state = state
            self._value = value
            self._reason = reason
            reactions, self._reactions = self._reactions, []
        for reaction in reactions:
            self._dispatch(reaction)
        return True

    def _dispatch(self, reaction: _Reaction) -> None:
        self._scheduler.queue_microtask(partial(self._react, reaction), name="promise reaction")

    def _react(self, reaction: _Reaction) -> None:
        if self._state is PromiseState.FULFILLED:
            if reaction.on_fulfilled is None:
                reaction.derived.resolve(self._value)
                return
            handler: Callable[[Any], Any] = reaction.on_fulfilled
            argument: Any = self._value
        else:
            if reaction.on_rejected is None:
                assert self._reason is not None
                reaction.derived.reject(self._reason)
                return
            handler = reaction.on_rejected
            argument = self._reason
        try:
            outcome = handler(argument)
        except Exception as exc:
            reaction.derived.reject(exc)
            return
        reaction.derived.resolve(outcome)


__all__ = ["Promise", "PromiseState"]

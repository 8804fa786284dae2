"""
Outcome — a deferred railway chain.

An Outcome[T] wraps a payload and queues steps; nothing runs until a terminal
read drains the queue:

    person = await (
        Outcome.of(Person())
        .on_success(lambda p: setattr(p, "first_name", "Shaddy"))
        .ensure(lambda p: p.first_name, "first name is required")
        .map(to_contact_card)
        .on_failure(lambda reason: audit.record(reason.message))
        .get_or_raise()
    )

Two kinds of failure, handled differently:
  - ensure() rejecting the payload is expected. The outcome latches into
    Failed(reason); get_or_default() substitutes the fallback, get_or_raise()
    raises ValidationFault.
  - A step callable raising is a fault. It aborts the drain and propagates
    unchanged out of the terminal read.

The first terminal read settles the outcome: later reads return the same
answer (or re-raise the same fault) without running any step again. A drain
cancelled part-way is never replayed: later reads raise ChainConsumedError.

map() moves the chain into a new handle typed for the converted payload. The
handle map() was called on is consumed and refuses further use.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any, Generic, TypeVar

from deferred_railway.config import get_settings
from deferred_railway.drain import drain_steps
from deferred_railway.errors import ChainConsumedError, DrainInProgressError, ValidationFault
from deferred_railway.failure import ErrorCode, FailureReason
from deferred_railway.state import Failed, OutcomeState, Status
from deferred_railway.steps import (
    MaybeAwaitable,
    OnFailureEffect,
    OnSuccessEffect,
    Step,
    Transform,
    Validate,
)

T = TypeVar("T")
U = TypeVar("U")
D = TypeVar("D")
R = TypeVar("R")


class Outcome(Generic[T]):
    """
    Deferred railway chain over a payload of type T.

    Chain methods append one step each and return the chain; terminal reads
    are coroutines (with blocking *_sync variants).

        >>> import asyncio
        >>> asyncio.run(Outcome.of(20).map(lambda x: x * 2).ensure(lambda x: x > 0, "neg").get_or_raise())
        40
    """

    def __init__(self, state: OutcomeState, steps: list[Step]) -> None:
        self._state = state
        self._steps = steps
        self._consumed = False
        self._draining = False
        self._settled = False
        self._fault: Exception | None = None
        self._interrupted = False

    # ──────────────────────── Factory ────────────────────────

    @classmethod
    def of(cls, value: T) -> Outcome[T]:
        """Start a chain over value. Status is Pending until the first terminal read."""
        return cls(OutcomeState(value), [])

    from_value = of

    # ──────────────────────── Chain methods ────────────────────────

    def ensure(
        self,
        predicate: Callable[[T], MaybeAwaitable[bool]],
        message: str,
        code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ) -> Outcome[T]:
        """
        Queue a validation step.

        At drain time, if the latch is still open and predicate(payload) is
        falsy, the outcome fails with FailureReason(message, code). Once
        failed, later ensure() steps never call their predicate.
        """
        return self._append(Validate(predicate=predicate, message=message, code=code))

    def map(self, convert: Callable[[T], MaybeAwaitable[U]]) -> Outcome[U]:
        """
        Queue a transformation and move the chain into a new handle.

        At drain time the payload becomes convert(payload), unless the
        outcome has already failed. This handle is consumed: use the
        returned one from here on.
        """
        self._append(Transform(convert=convert))
        self._consumed = True
        return Outcome(self._state, self._steps)

    def on_success(self, effect: Callable[[T], MaybeAwaitable[Any]]) -> Outcome[T]:
        """Queue effect(payload), run only while every ensure() so far has passed."""
        return self._append(OnSuccessEffect(effect=effect))

    def on_failure(self, effect: Callable[[FailureReason], MaybeAwaitable[Any]]) -> Outcome[T]:
        """
        Queue effect(reason), run only once the outcome has failed.

        The effect may mutate the reason (e.g. rewrite its message); the
        outcome stays failed either way.
        """
        return self._append(OnFailureEffect(effect=effect))

    # ──────────────────────── Terminal reads ────────────────────────

    async def get_or_raise(self) -> T:
        """
        Drain the chain and return the final payload.

        Raises:
            ValidationFault: the outcome ended failed; carries the reason.
            Exception: whatever a step callable raised during the drain.
        """
        await self._resolve()
        match self._state.status:
            case Failed(reason):
                raise ValidationFault(reason)
        return self._state.payload

    async def get_or_default(self, fallback: D) -> T | D:
        """
        Drain the chain and return the payload, or fallback if it ended failed.

        Never raises for a failed ensure(); step faults still propagate.
        """
        await self._resolve()
        if not self._state.succeeded:
            return fallback
        return self._state.payload

    def get_or_raise_sync(self) -> T:
        """Blocking get_or_raise(). Not usable from inside a running event loop."""
        return self._run_blocking(self.get_or_raise)

    def get_or_default_sync(self, fallback: D) -> T | D:
        """Blocking get_or_default(). Not usable from inside a running event loop."""
        return self._run_blocking(lambda: self.get_or_default(fallback))

    # ──────────────────────── Introspection ────────────────────────

    @property
    def status(self) -> Status:
        """Pending before the first terminal read, then Succeeded or Failed(reason)."""
        return self._state.status

    def is_settled(self) -> bool:
        """True once a terminal read has finished draining (normally, by a fault, or cancelled)."""
        return self._settled

    def __len__(self) -> int:
        return len(self._steps)

    def __repr__(self) -> str:
        if self._consumed:
            return "Outcome(consumed)"
        match self._state.status:
            case Failed(reason):
                return f"Outcome(failed: {reason.message!r}, steps={len(self._steps)})"
        state = "settled" if self._settled else "pending"
        return f"Outcome({state}, steps={len(self._steps)})"

    # ──────────────────────── Internals ────────────────────────

    def _append(self, step: Step) -> Outcome[T]:
        self._check_usable()
        if self._settled or self._draining:
            raise ChainConsumedError(
                "Cannot add steps to an outcome that has already been read",
                hint="Build a new chain with Outcome.of() instead",
            )
        self._steps.append(step)
        return self

    def _check_usable(self) -> None:
        if self._consumed:
            raise ChainConsumedError(
                "This outcome handle was consumed by map()",
                hint="Keep chaining on the handle map() returned",
            )

    async def _resolve(self) -> None:
        """Drain once; later calls replay the settlement."""
        self._check_usable()
        if self._draining:
            raise DrainInProgressError("Outcome is already being drained")
        if not self._settled:
            trace = get_settings().trace_steps
            self._draining = True
            try:
                await drain_steps(self._steps, self._state, trace=trace)
            except Exception as e:
                self._fault = e
                self._settled = True
                raise
            except BaseException:
                # Cancelled mid-drain: the steps already run have changed the
                # state, so the queue must never be replayed.
                self._interrupted = True
                self._settled = True
                raise
            else:
                self._settled = True
            finally:
                self._draining = False
        if self._interrupted:
            raise ChainConsumedError(
                "Outcome drain was interrupted before it finished",
                hint="Build a new chain with Outcome.of() instead",
            )
        if self._fault is not None:
            raise self._fault

    def _run_blocking(self, read: Callable[[], Coroutine[Any, Any, R]]) -> R:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(read())
        raise RuntimeError(
            "Blocking reads cannot be used inside a running event loop; "
            "await get_or_raise() / get_or_default() instead"
        )

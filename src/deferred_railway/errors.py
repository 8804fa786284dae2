"""Exception hierarchy for deferred-railway."""

from __future__ import annotations

from deferred_railway.failure import FailureReason


class OutcomeError(Exception):
    """Base exception for all deferred-railway errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ValidationFault(OutcomeError):
    """
    Raised by get_or_raise() when the chain ended in the failed state.

    Carries the captured FailureReason as it stood after the drain, so any
    rewrite done by an on_failure() effect is visible here.
    """

    def __init__(self, reason: FailureReason) -> None:
        super().__init__(reason.message)
        self.reason = reason


class ChainConsumedError(OutcomeError):
    """A chain call or terminal read was issued on a handle that can no longer be used."""


class DrainInProgressError(OutcomeError):
    """A terminal read was issued while the same outcome was still draining."""

"""
Deferred steps — the closed set of operations a chain can queue.

Each chain call appends exactly one of these variants. They hold nothing but
the user callable (and, for Validate, the failure message and code); the
behaviour lives in a single drain loop that matches on the variant, so the
"always visit, conditionally act" rule is enforced in one place.

Every callable may return either a plain value or an awaitable.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from deferred_railway.failure import ErrorCode, FailureReason

type MaybeAwaitable[R] = R | Awaitable[R]


@dataclass(frozen=True, slots=True)
class Validate:
    """Latch into Failed(message) when the predicate rejects the payload."""

    predicate: Callable[[Any], MaybeAwaitable[bool]]
    message: str
    code: ErrorCode = ErrorCode.VALIDATION_ERROR


@dataclass(frozen=True, slots=True)
class Transform:
    """Replace the payload with convert(payload)."""

    convert: Callable[[Any], MaybeAwaitable[Any]]


@dataclass(frozen=True, slots=True)
class OnSuccessEffect:
    effect: Callable[[Any], MaybeAwaitable[None]]


@dataclass(frozen=True, slots=True)
class OnFailureEffect:
    effect: Callable[[FailureReason], MaybeAwaitable[None]]


type Step = Validate | Transform | OnSuccessEffect | OnFailureEffect


def step_kind(step: Step) -> str:
    """Short label used in log events."""
    match step:
        case Validate():
            return "ensure"
        case Transform():
            return "map"
        case OnSuccessEffect():
            return "on_success"
        case OnFailureEffect():
            return "on_failure"
    raise TypeError(f"Unknown step: {step!r}")

"""
Failure reason — the record captured when an ensure() predicate rejects the payload.

A FailureReason is the recoverable half of the two-tier error model: it lives
inside the outcome's Failed state, is handed to on_failure() effects, and only
becomes an exception when the caller asks for get_or_raise().

Unlike an exception it is deliberately mutable: on_failure() effects may
rewrite the message before the terminal read observes it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum, unique


@unique
class ErrorCode(Enum):
    """
    Codes an ensure() step can attach to its failure reason.

    All of them describe expected, domain-level rejections. Unexpected
    exceptions raised by step functions never get a code; they propagate.
    """

    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Invalid input format, missing fields, type mismatches."""

    BUSINESS_RULE_ERROR = "BUSINESS_RULE_ERROR"
    """Domain invariant violated, business constraint failed."""

    NOT_FOUND = "NOT_FOUND"
    """A referenced resource doesn't exist."""

    AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
    """Insufficient permissions."""


@dataclass(slots=True)
class FailureReason:
    """
    Why an outcome latched into the failed state.

    >>> reason = FailureReason("Name is required")
    >>> reason.code
    <ErrorCode.VALIDATION_ERROR: 'VALIDATION_ERROR'>
    >>> reason.message
    'Name is required'
    """

    message: str
    code: ErrorCode = ErrorCode.VALIDATION_ERROR
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

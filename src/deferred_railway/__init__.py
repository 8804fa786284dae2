"""
Deferred railway outcomes for Python.

Queue validations, transformations and side effects; run them all, in order,
on the first terminal read.

    from deferred_railway import Outcome

    age = await (
        Outcome.of({"name": "Alice", "age": 30})
        .ensure(lambda d: d["age"] >= 0, "Age must be non-negative")
        .map(lambda d: d["age"])
        .get_or_default(0)
    )
"""

from deferred_railway.outcome import Outcome
from deferred_railway.failure import ErrorCode, FailureReason
from deferred_railway.errors import (
    ChainConsumedError,
    DrainInProgressError,
    OutcomeError,
    ValidationFault,
)
from deferred_railway.state import Failed, Pending, Succeeded
from deferred_railway.config import RailwaySettings, get_settings
from deferred_railway.log_setup import configure_from_settings, configure_structlog
from deferred_railway.assertions import OutcomeAssertions

__all__ = [
    "Outcome",
    "ErrorCode",
    "FailureReason",
    "OutcomeError",
    "ValidationFault",
    "ChainConsumedError",
    "DrainInProgressError",
    "Pending",
    "Succeeded",
    "Failed",
    "RailwaySettings",
    "get_settings",
    "configure_structlog",
    "configure_from_settings",
    "OutcomeAssertions",
]

__version__ = "1.0.0"

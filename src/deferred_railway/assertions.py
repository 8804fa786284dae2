"""
Test assertions for Outcome chains.

Each helper drains the chain and produces a clear failure message when the
outcome did not end the way the test expected.

Usage in tests:
    from deferred_railway import OutcomeAssertions

    @pytest.mark.asyncio
    async def test_register_person():
        person = await OutcomeAssertions.assert_resolves(register(command))
        assert person.first_name == "Shaddy"

    @pytest.mark.asyncio
    async def test_rejects_unknown_last_name():
        await OutcomeAssertions.assert_fails_with_message(register(bad_command), "mismatch")
"""

from __future__ import annotations

from typing import Any, TypeVar

from deferred_railway.errors import ValidationFault
from deferred_railway.failure import ErrorCode, FailureReason
from deferred_railway.outcome import Outcome

T = TypeVar("T")


class OutcomeAssertions:
    """Expressive async test assertions for Outcome chains."""

    @staticmethod
    async def assert_resolves(outcome: Outcome[T], message: str = "") -> T:
        """
        Assert the chain drains without a failed ensure() and return the payload.

            value = await OutcomeAssertions.assert_resolves(outcome)
        """
        context = f" — {message}" if message else ""
        try:
            return await outcome.get_or_raise()
        except ValidationFault as fault:
            raise AssertionError(
                f"Expected outcome to resolve but it failed with "
                f"{fault.reason.code.value}: {fault.reason.message!r}{context}"
            ) from fault

    @staticmethod
    async def assert_resolves_to(outcome: Outcome[T], expected_value: Any) -> None:
        """Assert the chain resolves to a specific payload."""
        value = await OutcomeAssertions.assert_resolves(outcome)
        assert value == expected_value, (
            f"Expected resolved value {expected_value!r} but got {value!r}"
        )

    @staticmethod
    async def assert_fails(
        outcome: Outcome[T],
        expected_code: ErrorCode | None = None,
        message: str = "",
    ) -> FailureReason:
        """
        Assert the chain ends failed, optionally checking the error code.

            reason = await OutcomeAssertions.assert_fails(outcome, ErrorCode.VALIDATION_ERROR)
        """
        context = f" — {message}" if message else ""
        try:
            value = await outcome.get_or_raise()
        except ValidationFault as fault:
            reason = fault.reason
        else:
            raise AssertionError(f"Expected outcome to fail but it resolved to {value!r}{context}")

        if expected_code is not None:
            assert reason.code == expected_code, (
                f"Expected error code {expected_code.value} "
                f"but got {reason.code.value}: {reason.message!r}{context}"
            )
        return reason

    @staticmethod
    async def assert_fails_with_message(outcome: Outcome[T], expected_message: str) -> None:
        """Assert the chain ends failed with exactly this reason message."""
        reason = await OutcomeAssertions.assert_fails(outcome)
        assert reason.message == expected_message, (
            f"Expected failure message {expected_message!r} "
            f"but got {reason.message!r}"
        )

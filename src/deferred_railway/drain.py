"""
Drain engine — runs a chain's queued steps against its state, in order.

    ensure ──→ map ──→ on_success ──→ ensure ──→ on_failure ──→ on_success
      │         │          │            │  ✗          │             │
      ▼         ▼          ▼            ▼             ▼             ▼
    check    replace     effect       latch        effect        (skip)

Every step is visited. Validate, Transform and OnSuccessEffect act only while
the latch is open; OnFailureEffect acts only once it has closed. That is how
an on_failure() registered after a later, skipped ensure() still runs.

A step's return value is awaited when it is awaitable, so each step settles
before the next one starts. The engine itself never suspends.

Exceptions raised by step callables are not validation failures: they are
logged and re-raised unchanged, leaving the state where the fault found it.
"""

from __future__ import annotations

import inspect
from collections.abc import Sequence
from typing import Any

import structlog

from deferred_railway.failure import FailureReason
from deferred_railway.state import OutcomeState
from deferred_railway.steps import (
    OnFailureEffect,
    OnSuccessEffect,
    Step,
    Transform,
    Validate,
    step_kind,
)

log = structlog.get_logger()


async def _settle(value: Any) -> Any:
    """Await value if it is awaitable, otherwise hand it back as is."""
    if inspect.isawaitable(value):
        return await value
    return value


async def apply_step(step: Step, state: OutcomeState) -> bool:
    """
    Apply one step to the state.

    Returns True when the step acted, False when it self-skipped.
    """
    match step:
        case Validate(predicate, message, code):
            if not state.succeeded:
                return False
            if not await _settle(predicate(state.payload)):
                state.latch(FailureReason(message=message, code=code))
            return True
        case Transform(convert):
            if not state.succeeded:
                return False
            state.replace(await _settle(convert(state.payload)))
            return True
        case OnSuccessEffect(effect):
            if not state.succeeded:
                return False
            await _settle(effect(state.payload))
            return True
        case OnFailureEffect(effect):
            reason = state.reason
            if reason is None:
                return False
            await _settle(effect(reason))
            return True
    raise TypeError(f"Unknown step: {step!r}")


async def drain_steps(
    steps: Sequence[Step],
    state: OutcomeState,
    *,
    trace: bool = False,
) -> None:
    """
    Run every step in registration order against state.

    Args:
        steps: The chain's queue, in the order the chain calls were made.
        state: The shared outcome state; mutated in place.
        trace: Emit a debug event for every applied or skipped step.

    Raises:
        Whatever a step callable raises. Remaining steps are not visited.
    """
    state.begin()
    log.debug("outcome.drain_started", steps=len(steps))

    for index, step in enumerate(steps):
        was_succeeded = state.succeeded
        try:
            acted = await apply_step(step, state)
        except Exception as e:
            log.warning(
                "outcome.drain_aborted",
                index=index,
                step=step_kind(step),
                error=str(e),
            )
            raise

        if was_succeeded and not state.succeeded:
            reason = state.reason
            assert reason is not None  # guaranteed by latch()
            log.info(
                "outcome.validation_failed",
                index=index,
                message=reason.message,
                code=reason.code.value,
            )
        if trace:
            log.debug(
                "outcome.step_applied" if acted else "outcome.step_skipped",
                index=index,
                step=step_kind(step),
            )

    log.debug("outcome.drain_completed", succeeded=state.succeeded)

"""
Outcome state — the payload cell and the latched tri-state status.

    Pending ──begin()──→ Succeeded ──latch(reason)──→ Failed(reason)
                                                         │
                                          latch() again ─┘ (no-op)

Status is modeled as three small variants instead of a bool plus an optional
reason, so a failed status always carries its reason. The status only moves
forward: nothing brings a Failed state back to Succeeded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from deferred_railway.failure import FailureReason


@dataclass(frozen=True, slots=True)
class Pending:
    """Created, not drained yet."""


@dataclass(frozen=True, slots=True)
class Succeeded:
    """Latch still open: every ensure() so far has passed."""


@dataclass(frozen=True, slots=True)
class Failed:
    """Latched. The reason is the first rejection, possibly rewritten by on_failure()."""

    reason: FailureReason


type Status = Pending | Succeeded | Failed


class OutcomeState:
    """Mutable cell shared by a chain and every handle map() derives from it."""

    __slots__ = ("payload", "_status")

    def __init__(self, payload: Any) -> None:
        self.payload = payload
        self._status: Status = Pending()

    @property
    def status(self) -> Status:
        return self._status

    @property
    def succeeded(self) -> bool:
        return not isinstance(self._status, Failed)

    @property
    def reason(self) -> FailureReason | None:
        match self._status:
            case Failed(reason):
                return reason
            case _:
                return None

    def begin(self) -> None:
        """Open the latch at the start of a drain."""
        if isinstance(self._status, Pending):
            self._status = Succeeded()

    def latch(self, reason: FailureReason) -> None:
        """Move to Failed(reason). The first reason wins; later calls are ignored."""
        if isinstance(self._status, Failed):
            return
        self._status = Failed(reason)

    def replace(self, payload: Any) -> None:
        self.payload = payload

    def __repr__(self) -> str:
        match self._status:
            case Pending():
                return f"OutcomeState(pending, {self.payload!r})"
            case Succeeded():
                return f"OutcomeState(succeeded, {self.payload!r})"
            case Failed(reason):
                return f"OutcomeState(failed, {reason.message!r})"
        raise TypeError("unreachable")  # pragma: no cover

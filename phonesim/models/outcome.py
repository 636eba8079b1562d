"""Outcome of a single call attempt."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from phonesim.errors import CallRejectedError, PhoneUnavailableError


class CallOutcome(str, Enum):
    CONNECTED = "connected"
    SELF_BUSY = "self_busy"
    DESTINATION_BUSY = "destination_busy"
    REJECTED = "rejected"


@dataclass(frozen=True)
class CallResult:
    """What happened when a phone tried to call another one.

    Busy and rejected calls are ordinary results, not exceptions.  Shells
    that want exceptions call ``raise_for_outcome()``.
    """

    outcome: CallOutcome
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is CallOutcome.CONNECTED

    @property
    def error(self) -> Optional[CallOutcome]:
        """The failed outcome, or None when the call connected."""
        return None if self.ok else self.outcome

    def raise_for_outcome(self) -> None:
        if self.outcome is CallOutcome.REJECTED:
            raise CallRejectedError(self.message)
        if self.outcome in (CallOutcome.SELF_BUSY, CallOutcome.DESTINATION_BUSY):
            raise PhoneUnavailableError(self.message)

    def to_dict(self) -> dict:
        return {"outcome": self.outcome.value, "ok": self.ok, "message": self.message}

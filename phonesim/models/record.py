"""Pydantic model for one entry in a phone's call register."""

from __future__ import annotations

from datetime import datetime, timedelta

from pydantic import BaseModel

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_duration(duration: timedelta) -> str:
    """Render a duration as an ISO-8601 time-based string (``PT1M30S``).

    Hours are never folded into days, so 26 hours renders as ``PT26H``.
    Fractional seconds keep only their significant digits (``PT1.5S``).
    """
    micros = (duration.days * 86400 + duration.seconds) * 1_000_000 + duration.microseconds
    if micros == 0:
        return "PT0S"

    whole_seconds, fraction = divmod(micros, 1_000_000)
    hours, remainder = divmod(whole_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)

    out = "PT"
    if hours:
        out += f"{hours}H"
    if minutes:
        out += f"{minutes}M"
    if seconds or fraction:
        out += str(seconds)
        if fraction:
            out += "." + f"{fraction:06d}".rstrip("0")
        out += "S"
    return out


class CallRecord(BaseModel):
    """One call attempt as seen from one phone.

    ``counterparty_number`` is the other phone: the destination on an
    outbound record, the caller on an inbound one.  ``was_available`` tells
    whether the destination was free when the attempt was made.
    """

    counterparty_number: str
    accepted: bool
    was_available: bool
    timestamp: datetime
    duration: timedelta = timedelta(0)

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return (
            "{"
            f"{self.counterparty_number}, "
            f"{'Accepted' if self.accepted else 'Rejected'}, "
            f"{'Available' if self.was_available else 'Unavailable'}, "
            f"{self.timestamp.strftime(TIMESTAMP_FORMAT)}, "
            f"{format_duration(self.duration)}"
            "}"
        )

    def to_dict(self) -> dict:
        """Serialize for the HTTP API (duration in seconds)."""
        return {
            "counterparty_number": self.counterparty_number,
            "accepted": self.accepted,
            "was_available": self.was_available,
            "timestamp": self.timestamp.strftime(TIMESTAMP_FORMAT),
            "duration": self.duration.total_seconds(),
        }

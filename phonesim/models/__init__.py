"""Value types shared by the phone core and the shells."""

from .outcome import CallOutcome, CallResult
from .record import CallRecord, format_duration

__all__ = ["CallOutcome", "CallRecord", "CallResult", "format_duration"]

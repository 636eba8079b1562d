"""Phone call simulator: phones calling each other with per-phone call registers."""

from phonesim.models import CallOutcome, CallRecord, CallResult
from phonesim.phone import Phone, create_phone

__all__ = ["CallOutcome", "CallRecord", "CallResult", "Phone", "create_phone"]

"""Exceptions raised by the phone simulator.

Call outcomes (busy, rejected) are returned as values from ``Phone.call``.
The ``CallError`` family only exists for shells that opt into raising via
``CallResult.raise_for_outcome()``.
"""

from __future__ import annotations


class PhoneSimError(Exception):
    """Base class for every simulator error."""


class CallError(PhoneSimError):
    """A call attempt did not connect."""


class PhoneUnavailableError(CallError):
    """The calling or the called phone is already in a conversation."""


class CallRejectedError(CallError):
    """The destination phone declined the call."""


class InvalidPhoneNumber(PhoneSimError, ValueError):
    """A phone number does not match the configured pattern."""


class DuplicatePhoneNumber(PhoneSimError):
    """A phone with this number is already in the directory."""


class PhoneNotFound(PhoneSimError, LookupError):
    """No phone exists for the given ID or number."""


class InvalidFilename(PhoneSimError, ValueError):
    """An export filename was rejected."""

"""Simulated phone and its call protocol.

A phone is either idle (available) or busy.  ``Phone.call`` drives the
two-phone handshake:

  1. A busy caller fails straight away (SELF_BUSY), nothing is recorded.
  2. A busy destination fails the call (DESTINATION_BUSY); both phones get
     an "unavailable" record and the caller stays idle.
  3. Otherwise the caller goes busy and the destination receives the call.
     Accepting makes the destination busy too and schedules a release that
     returns both phones to idle once the conversation is over.  Rejecting
     returns both phones to idle immediately (REJECTED).

Every phone guards its availability flag and registers with its own lock.
A call takes both phones' locks in a stable order, and so does the release.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from contextlib import contextmanager
from datetime import datetime, timedelta
from functools import partial
from typing import Any, Callable, Iterator, Optional, Union

from phonesim.models.outcome import CallOutcome, CallResult
from phonesim.models.record import CallRecord
from phonesim.scheduler import ReleaseScheduler, get_default_scheduler

log = logging.getLogger("phonesim.phone")

DurationLike = Union[timedelta, int, float]


def redact_number(value: str) -> str:
    """Mask a phone number for logging: show first 3 and last 2 chars only."""
    if not value or len(value) <= 5:
        return "***"
    return value[:3] + "***" + value[-2:]


def _as_timedelta(duration: DurationLike) -> timedelta:
    if isinstance(duration, timedelta):
        return duration
    return timedelta(seconds=duration)


@contextmanager
def _locked(*phones: "Phone") -> Iterator[None]:
    """Hold the locks of all given phones, acquired in id order."""
    ordered = sorted({id(p): p for p in phones}.values(), key=id)
    for phone in ordered:
        phone._lock.acquire()
    try:
        yield
    finally:
        for phone in reversed(ordered):
            phone._lock.release()


def _release(caller: "Phone", callee: "Phone") -> None:
    # Unconditional: a phone reused since this call connected is freed too.
    with _locked(caller, callee):
        caller._available = True
        callee._available = True
    log.debug(
        "Conversation %s -> %s finished, both phones available",
        redact_number(caller.number),
        redact_number(callee.number),
    )


class Phone:
    """A simulated phone with inbound and outbound call registers.

    Registers are kept newest first.  They are only mutated by the call
    protocol; readers get tuple snapshots.
    """

    def __init__(
        self,
        number: str,
        scheduler: Optional[ReleaseScheduler] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._number = number
        self._available = True
        self._inbound: deque[CallRecord] = deque()
        self._outbound: deque[CallRecord] = deque()
        self._lock = threading.RLock()
        self._scheduler = scheduler or get_default_scheduler()
        self._clock = clock

    # ── Public API ────────────────────────────────────────────

    @property
    def number(self) -> str:
        return self._number

    @property
    def available(self) -> bool:
        with self._lock:
            return self._available

    @property
    def outbound(self) -> tuple[CallRecord, ...]:
        return self.outbound_history()

    @property
    def inbound(self) -> tuple[CallRecord, ...]:
        return self.inbound_history()

    def outbound_history(self) -> tuple[CallRecord, ...]:
        """Outgoing call records, newest first."""
        with self._lock:
            return tuple(self._outbound)

    def inbound_history(self) -> tuple[CallRecord, ...]:
        """Incoming call records, newest first."""
        with self._lock:
            return tuple(self._inbound)

    def call(self, destination: "Phone", accept: bool, duration: DurationLike) -> CallResult:
        """Call ``destination``; it accepts or rejects according to ``accept``.

        ``duration`` is how long an accepted conversation keeps both phones
        busy; rejected calls are recorded with a zero duration.  Returns
        immediately; the release runs in the background.
        Raises ValueError for a negative duration.
        """
        duration = _as_timedelta(duration)
        if duration < timedelta(0):
            raise ValueError(f"conversation duration must not be negative, got {duration}")
        if not accept:
            duration = timedelta(0)

        with _locked(self, destination):
            if not self._available:
                return self._fail(CallOutcome.SELF_BUSY, f"{self} is already during the conversation")

            if not destination._available:
                now = self._clock()
                self._outbound.appendleft(CallRecord(
                    counterparty_number=destination.number,
                    accepted=False,
                    was_available=False,
                    timestamp=now,
                    duration=timedelta(0),
                ))
                destination._inbound.appendleft(CallRecord(
                    counterparty_number=self.number,
                    accepted=False,
                    was_available=False,
                    timestamp=now,
                    duration=timedelta(0),
                ))
                return self._fail(
                    CallOutcome.DESTINATION_BUSY,
                    f"{destination} is currently unavailable",
                )

            self._outbound.appendleft(CallRecord(
                counterparty_number=destination.number,
                accepted=accept,
                was_available=True,
                timestamp=self._clock(),
                duration=duration,
            ))
            self._available = False
            return destination._receive_call(self, accept, duration)

    def to_dict(self, detail: bool = False) -> dict[str, Any]:
        """Serialize phone state for the API."""
        with self._lock:
            d: dict[str, Any] = {
                "number": self._number,
                "available": self._available,
                "outbound_count": len(self._outbound),
                "inbound_count": len(self._inbound),
            }
            if detail:
                d["outbound"] = [r.to_dict() for r in self._outbound]
                d["inbound"] = [r.to_dict() for r in self._inbound]
        return d

    # ── Internal: handshake ──────────────────────────────────

    def _receive_call(self, caller: "Phone", accept: bool, duration: timedelta) -> CallResult:
        """Destination side of the handshake. Caller holds both phones' locks."""
        self._inbound.appendleft(CallRecord(
            counterparty_number=caller.number,
            accepted=accept,
            was_available=True,
            timestamp=self._clock(),
            duration=duration,
        ))

        if not accept:
            self._available = True
            caller._available = True
            return caller._fail(CallOutcome.REJECTED, f"{self} rejected call from {caller.number}")

        self._available = False
        self._scheduler.schedule(duration, partial(_release, caller, self))
        message = (
            f"{self} accepted call from {caller.number}. "
            f"Conversation will last for {int(duration.total_seconds())}s ..."
        )
        log.info(
            "Call connected: %s -> %s for %.1fs",
            redact_number(caller.number),
            redact_number(self.number),
            duration.total_seconds(),
        )
        return CallResult(CallOutcome.CONNECTED, message)

    def _fail(self, outcome: CallOutcome, message: str) -> CallResult:
        log.info("Call from %s failed (%s)", redact_number(self._number), outcome.value)
        return CallResult(outcome, message)

    def __repr__(self) -> str:
        return f"Phone(number={self._number!r}, available={self.available})"

    def __str__(self) -> str:
        return "Phone{" + self._number + "}"


def create_phone(number: str, scheduler: Optional[ReleaseScheduler] = None) -> Phone:
    """Create an idle phone with empty registers."""
    return Phone(number, scheduler=scheduler)

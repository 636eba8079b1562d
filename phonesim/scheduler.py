"""Deferred availability release for connected calls.

Each connected call gets one daemon ``threading.Timer``.  Timers are never
cancelled; a timer still pending when the interpreter exits is dropped.
"""

from __future__ import annotations

import logging
import threading
import time
from datetime import timedelta
from typing import Callable

log = logging.getLogger("phonesim.scheduler")


class ReleaseScheduler:
    """Runs release callbacks after a conversation's duration elapses."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._timers: set[threading.Timer] = set()

    def schedule(self, delay: timedelta, callback: Callable[[], None]) -> None:
        """Run ``callback`` once after ``delay`` on a daemon thread."""
        seconds = max(delay.total_seconds(), 0.0)

        def _fire() -> None:
            try:
                callback()
            except Exception:
                log.exception("Release callback failed")
            finally:
                with self._lock:
                    self._timers.discard(timer)

        timer = threading.Timer(seconds, _fire)
        timer.daemon = True
        with self._lock:
            self._timers.add(timer)
        timer.start()
        log.debug("Release scheduled in %.3fs (pending: %d)", seconds, self.pending())

    def pending(self) -> int:
        """Number of releases that have not fired yet."""
        with self._lock:
            return len(self._timers)

    def join(self, timeout: float | None = None) -> bool:
        """Wait for every pending release. Returns False on timeout.

        ``timeout`` bounds the whole wait, not each timer.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._lock:
            timers = list(self._timers)
        for timer in timers:
            if deadline is None:
                timer.join()
            else:
                timer.join(max(deadline - time.monotonic(), 0.0))
            if timer.is_alive():
                return False
        return self.pending() == 0


_default_scheduler = ReleaseScheduler()


def get_default_scheduler() -> ReleaseScheduler:
    return _default_scheduler

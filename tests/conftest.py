"""Shared fixtures for phone simulator tests."""

from datetime import datetime, timedelta

import pytest

from phonesim.phone import Phone

FIXED_NOW = datetime(2026, 10, 18, 12, 30, 5)


class ManualScheduler:
    """Collects releases instead of running timers; tests fire them explicitly."""

    def __init__(self):
        self.scheduled: list[tuple[timedelta, object]] = []

    def schedule(self, delay, callback):
        self.scheduled.append((delay, callback))

    def pending(self):
        return len(self.scheduled)

    def fire_all(self):
        items, self.scheduled = self.scheduled, []
        for _, callback in items:
            callback()


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def make_phone(scheduler):
    def _make(number):
        return Phone(number, scheduler=scheduler, clock=lambda: FIXED_NOW)
    return _make


@pytest.fixture
def pair(make_phone):
    return make_phone("5005550001"), make_phone("5005550002")

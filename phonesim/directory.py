"""Managed collection of phones used by the CLI and HTTP shells.

Phones are addressed by integer ID (their position in the directory) or by
number.  Numbers are unique within a directory.
"""

from __future__ import annotations

import logging
import random
import re
import threading
from typing import Any, Iterator, Optional

from phonesim.config import settings
from phonesim.errors import DuplicatePhoneNumber, InvalidPhoneNumber, PhoneNotFound
from phonesim.phone import Phone, redact_number
from phonesim.scheduler import ReleaseScheduler

log = logging.getLogger("phonesim.directory")


def random_number(rng: random.Random) -> str:
    """Random nine-digit number in the 500-899 / 500-899 / 000-999 blocks."""
    return "%03d%03d%03d" % (
        rng.randint(500, 899),
        rng.randint(500, 899),
        rng.randint(0, 999),
    )


class PhoneDirectory:
    def __init__(
        self,
        scheduler: Optional[ReleaseScheduler] = None,
        number_pattern: Optional[str] = None,
    ) -> None:
        self._phones: list[Phone] = []
        self._lock = threading.Lock()
        self._scheduler = scheduler or ReleaseScheduler()
        self._pattern = re.compile(number_pattern or settings.number_pattern)

    @property
    def scheduler(self) -> ReleaseScheduler:
        return self._scheduler

    def generate(self, amount: int, rng: Optional[random.Random] = None) -> list[Phone]:
        """Replace the directory content with ``amount`` random phones."""
        if amount < 0:
            raise ValueError(f"invalid amount {amount} of phones to generate")
        rng = rng or random.Random()
        with self._lock:
            self._phones.clear()
            seen: set[str] = set()
            while len(self._phones) < amount:
                number = random_number(rng)
                if number in seen:
                    continue
                seen.add(number)
                self._phones.append(Phone(number, scheduler=self._scheduler))
            phones = list(self._phones)
        log.info("Generated %d phones", amount)
        return phones

    def add(self, number: str) -> Phone:
        number = number.strip()
        if not self._pattern.fullmatch(number):
            raise InvalidPhoneNumber(f"invalid phone number {number!r}")
        with self._lock:
            if any(p.number == number for p in self._phones):
                raise DuplicatePhoneNumber(f"phone number {number} already exists")
            phone = Phone(number, scheduler=self._scheduler)
            self._phones.append(phone)
        log.info("Phone added: %s", redact_number(number))
        return phone

    def remove(self, phone_id: int) -> Phone:
        with self._lock:
            if phone_id < 0 or phone_id >= len(self._phones):
                raise PhoneNotFound(f"invalid phone ID {phone_id}")
            phone = self._phones.pop(phone_id)
        log.info("Phone removed: %s", redact_number(phone.number))
        return phone

    def remove_number(self, number: str) -> Phone:
        with self._lock:
            for idx, phone in enumerate(self._phones):
                if phone.number == number:
                    del self._phones[idx]
                    break
            else:
                raise PhoneNotFound(f"no phone with number {number}")
        log.info("Phone removed: %s", redact_number(number))
        return phone

    def get(self, phone_id: int) -> Phone:
        with self._lock:
            if phone_id < 0 or phone_id >= len(self._phones):
                raise PhoneNotFound(f"invalid phone ID {phone_id}")
            return self._phones[phone_id]

    def find(self, number: str) -> Phone:
        with self._lock:
            for phone in self._phones:
                if phone.number == number:
                    return phone
        raise PhoneNotFound(f"no phone with number {number}")

    def list(self) -> list[tuple[int, Phone]]:
        with self._lock:
            return list(enumerate(self._phones))

    def clear(self) -> None:
        with self._lock:
            self._phones.clear()

    def to_dict(self) -> dict[str, Any]:
        phones = [phone.to_dict() for _, phone in self.list()]
        return {"phones": phones, "count": len(phones)}

    def __len__(self) -> int:
        with self._lock:
            return len(self._phones)

    def __iter__(self) -> Iterator[Phone]:
        with self._lock:
            return iter(list(self._phones))

"""Tests for PhoneDirectory — generation, add/remove and lookup."""

import random
import re

import pytest

from phonesim.directory import PhoneDirectory, random_number
from phonesim.errors import DuplicatePhoneNumber, InvalidPhoneNumber, PhoneNotFound


@pytest.fixture
def directory(scheduler):
    return PhoneDirectory(scheduler=scheduler)


class TestGenerate:
    def test_generates_amount(self, directory):
        phones = directory.generate(10, rng=random.Random(42))
        assert len(phones) == 10
        assert len(directory) == 10
        assert len({p.number for p in phones}) == 10

    def test_number_format(self):
        rng = random.Random(7)
        for _ in range(200):
            number = random_number(rng)
            assert re.fullmatch(r"\d{9}", number)
            assert 500 <= int(number[:3]) <= 899
            assert 500 <= int(number[3:6]) <= 899

    def test_replaces_existing(self, directory):
        directory.add("500555000")
        directory.generate(3)
        assert len(directory) == 3
        with pytest.raises(PhoneNotFound):
            directory.find("500555000")

    def test_zero(self, directory):
        assert directory.generate(0) == []
        assert len(directory) == 0

    def test_negative_amount(self, directory):
        with pytest.raises(ValueError):
            directory.generate(-1)

    def test_phones_share_scheduler(self, directory, scheduler):
        a, b = directory.generate(2)
        a.call(b, True, 1)
        assert scheduler.pending() == 1


class TestAddRemove:
    def test_add(self, directory):
        phone = directory.add("600123456")
        assert phone.number == "600123456"
        assert directory.get(0) is phone
        assert directory.find("600123456") is phone

    @pytest.mark.parametrize("number", ["400123456", "60012345", "6001234567", "abc", ""])
    def test_add_invalid(self, directory, number):
        with pytest.raises(InvalidPhoneNumber):
            directory.add(number)

    def test_add_duplicate(self, directory):
        directory.add("600123456")
        with pytest.raises(DuplicatePhoneNumber):
            directory.add("600123456")

    def test_custom_pattern(self, scheduler):
        directory = PhoneDirectory(scheduler=scheduler, number_pattern=r"\+1\d{10}")
        assert directory.add("+15005550001").number == "+15005550001"

    def test_remove_by_id(self, directory):
        first = directory.add("600000001")
        second = directory.add("600000002")
        assert directory.remove(0) is first
        assert directory.get(0) is second

    def test_remove_out_of_range(self, directory):
        with pytest.raises(PhoneNotFound):
            directory.remove(0)
        with pytest.raises(PhoneNotFound):
            directory.remove(-1)

    def test_remove_number(self, directory):
        directory.add("600000001")
        directory.remove_number("600000001")
        assert len(directory) == 0
        with pytest.raises(PhoneNotFound):
            directory.remove_number("600000001")


class TestListing:
    def test_list_and_iter(self, directory):
        a = directory.add("600000001")
        b = directory.add("600000002")
        assert directory.list() == [(0, a), (1, b)]
        assert list(directory) == [a, b]

    def test_get_missing(self, directory):
        with pytest.raises(PhoneNotFound):
            directory.get(3)

    def test_to_dict(self, directory):
        directory.add("600000001")
        d = directory.to_dict()
        assert d["count"] == 1
        assert d["phones"][0] == {
            "number": "600000001",
            "available": True,
            "outbound_count": 0,
            "inbound_count": 0,
        }

    def test_clear(self, directory):
        directory.generate(4)
        directory.clear()
        assert len(directory) == 0

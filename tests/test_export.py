"""Tests for register export rendering and file saving."""

from pathlib import Path

import pytest

from phonesim.errors import InvalidFilename
from phonesim.export import (
    INBOUND_HEADER,
    OUTBOUND_HEADER,
    render_history,
    render_register,
    save_register,
    validate_filename,
)


class TestRenderRegister:
    def test_empty_phone(self, make_phone):
        phone = make_phone("5005550001")
        assert render_register(phone) == (
            "Phone{5005550001}\n"
            "[Outbound calls]\n"
            "\n"
            "[Inbound calls]\n"
            "\n"
        )

    def test_layout_with_records(self, make_phone, scheduler):
        a, b, c = make_phone("5005550001"), make_phone("5005550002"), make_phone("5005550003")
        a.call(b, True, 2)
        scheduler.fire_all()
        a.call(c, False, 0)
        b.call(a, False, 0)

        assert render_register(a) == (
            "Phone{5005550001}\n"
            "[Outbound calls]\n"
            "{5005550003, Rejected, Available, 2026-10-18 12:30:05, PT0S}\n"
            "{5005550002, Accepted, Available, 2026-10-18 12:30:05, PT2S}\n"
            "\n"
            "[Inbound calls]\n"
            "{5005550002, Rejected, Available, 2026-10-18 12:30:05, PT0S}\n"
            "\n"
        )

    def test_headers(self):
        assert OUTBOUND_HEADER == "[Outbound calls]"
        assert INBOUND_HEADER == "[Inbound calls]"


class TestRenderHistory:
    def test_empty(self):
        assert render_history("Outbound register", ()) == "Outbound register:\n(Empty)"

    def test_records(self, pair):
        a, b = pair
        a.call(b, False, 0)
        text = render_history("Inbound register", b.inbound_history())
        assert text.splitlines() == [
            "Inbound register:",
            "{5005550001, Rejected, Available, 2026-10-18 12:30:05, PT0S}",
        ]


class TestSaveRegister:
    def test_writes_file(self, pair, tmp_path):
        a, b = pair
        a.call(b, False, 0)
        path = save_register(a, "calls.txt", tmp_path)
        assert path == tmp_path / "calls.txt"
        assert path.read_text(encoding="utf-8") == render_register(a)

    def test_creates_directory(self, pair, tmp_path):
        a, _ = pair
        target = tmp_path / "nested" / "dir"
        path = save_register(a, "calls.log", target)
        assert path.exists()

    def test_defaults_to_settings_export_dir(self, pair, tmp_path, monkeypatch):
        monkeypatch.setattr("phonesim.export.settings.export_dir", str(tmp_path))
        a, _ = pair
        path = save_register(a, "default.txt")
        assert path == Path(tmp_path) / "default.txt"

    @pytest.mark.parametrize("name", ["calls", "calls.text", "../calls.txt", "a/b.txt", ""])
    def test_rejects_bad_filenames(self, pair, tmp_path, name):
        a, _ = pair
        with pytest.raises(InvalidFilename):
            save_register(a, name, tmp_path)

    @pytest.mark.parametrize("name", ["calls.txt", "my calls.csv", "reg.2026.log"])
    def test_accepts_filenames(self, name):
        assert validate_filename(name) == name

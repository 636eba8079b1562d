"""Text rendering of a phone's call register and saving it to disk."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Optional

from phonesim.config import settings
from phonesim.errors import InvalidFilename
from phonesim.models.record import CallRecord
from phonesim.phone import Phone

log = logging.getLogger("phonesim.export")

OUTBOUND_HEADER = "[Outbound calls]"
INBOUND_HEADER = "[Inbound calls]"

_FILENAME_PATTERN = re.compile(r"[\w\s.]+\.[a-zA-Z]{3}")


def render_register(phone: Phone) -> str:
    """Render the export block for ``phone``.

    Layout::

        Phone{5005550001}
        [Outbound calls]
        {5005550002, Accepted, Available, 2026-10-18 12:00:00, PT2S}

        [Inbound calls]

    Records appear newest first, as stored.
    """
    lines = [str(phone), OUTBOUND_HEADER]
    lines.extend(str(record) for record in phone.outbound_history())
    lines.append("")
    lines.append(INBOUND_HEADER)
    lines.extend(str(record) for record in phone.inbound_history())
    lines.append("")
    return "\n".join(lines) + "\n"


def render_history(title: str, records: Iterable[CallRecord]) -> str:
    """Render one register for on-screen display, ``(Empty)`` when empty."""
    lines = [f"{title}:"]
    rendered = [str(r) for r in records]
    lines.extend(rendered or ["(Empty)"])
    return "\n".join(lines)


def validate_filename(filename: str) -> str:
    if not _FILENAME_PATTERN.fullmatch(filename):
        raise InvalidFilename(f"invalid register filename {filename!r}")
    return filename


def save_register(phone: Phone, filename: str, directory: Optional[str | Path] = None) -> Path:
    """Write ``render_register(phone)`` to ``directory/filename``.

    ``directory`` defaults to ``settings.export_dir``.  Returns the path written.
    """
    validate_filename(filename)
    target_dir = Path(directory if directory is not None else settings.export_dir)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / filename
    path.write_text(render_register(phone), encoding="utf-8")
    log.info("Register of %s saved to %s", phone, path)
    return path

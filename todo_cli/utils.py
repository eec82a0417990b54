"""Utility helpers for timestamps and deadline parsing."""
from __future__ import annotations

import re
from datetime import datetime

DATE_FORMAT = "%Y-%m-%d"

_DATE_RE = re.compile(r"^([+-]?[0-9]{1,9})-([+-]?[0-9]{1,9})-([+-]?[0-9]{1,9})$")


def local_now() -> datetime:
    return datetime.now().astimezone()


def format_ts(value: datetime) -> str:
    return value.isoformat()


def parse_ts(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        # Naive timestamps are read as local time.
        parsed = parsed.astimezone()
    return parsed


def format_date(value: datetime) -> str:
    return value.strftime(DATE_FORMAT)


def parse_deadline(text: str) -> datetime | None:
    """Parse a ``YYYY-MM-DD`` string into midnight local time on that date.

    Trailing line terminators are ignored. Anything that is not a valid
    calendar date yields ``None`` rather than an error, so callers can treat
    a bad answer as "no deadline".
    """
    match = _DATE_RE.match(text.rstrip("\r\n"))
    if match is None:
        return None
    try:
        year, month, day = (int(part) for part in match.groups())
        return datetime(year, month, day).astimezone()
    except (ValueError, OverflowError):
        return None

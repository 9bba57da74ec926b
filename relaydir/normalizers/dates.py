"""Calendar-date normalization for loosely typed upstream values."""

from __future__ import annotations

import re
from datetime import date, datetime
from typing import Any, Callable, Optional

from dateutil import parser as dtparser

Clock = Callable[[], date]

DATE_PATTERN = re.compile(r"(\d{4})[-/](\d{1,2})[-/](\d{1,2})")
JA_DATE_PATTERN = re.compile(r"(\d{4})\s*年\s*(\d{1,2})\s*月\s*(\d{1,2})\s*日")

# Epoch values above this are milliseconds (JavaScript-style timestamps).
_EPOCH_MS_THRESHOLD = 10**11


def _local_date(value: datetime) -> date:
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.date()


def _from_epoch(value: float) -> Optional[date]:
    try:
        seconds = value / 1000 if abs(value) > _EPOCH_MS_THRESHOLD else value
        return datetime.fromtimestamp(seconds).date()
    except (OverflowError, OSError, ValueError):
        return None


def _from_pattern(text: str) -> Optional[date]:
    for pattern in (DATE_PATTERN, JA_DATE_PATTERN):
        match = pattern.search(text)
        if not match:
            continue
        year, month, day = (int(part) for part in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            continue
    return None


def looks_like_date(text: str) -> bool:
    """True when text carries an explicit year-month-day triple."""
    return _from_pattern(text) is not None


def parse_date(value: Any) -> Optional[date]:
    """Parse a date, datetime, epoch number or string; None if impossible."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, datetime):
        return _local_date(value)
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)):
        if value != value:  # NaN
            return None
        return _from_epoch(value)
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text:
        return None

    parsed = _from_pattern(text)
    if parsed:
        return parsed

    try:
        return _local_date(dtparser.parse(text))
    except (ValueError, OverflowError):
        return None


def format_date(value: date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def normalize_date(value: Any, today: Clock = date.today) -> str:
    """Return ``YYYY-MM-DD`` for value, or for today when it cannot be parsed."""
    parsed = parse_date(value)
    return format_date(parsed if parsed else today())

"""Timestamp formatting helpers for the history and log panels."""

from __future__ import annotations

import locale
import logging
from datetime import datetime
from typing import Optional, Union

logger = logging.getLogger(__name__)

INVALID_DATE = "Invalid Date"

Timestamp = Union[int, float, str]


def apply_user_locale() -> str:
    """
    Switch LC_TIME to the user's environment locale so %x and %X follow it.

    Process-wide; call once at startup. Keeps the current locale when the
    environment names one that is not installed. Returns the active LC_TIME.
    """
    try:
        return locale.setlocale(locale.LC_TIME, "")
    except locale.Error as e:
        logger.warning(f"Could not apply environment locale for dates: {e}")
        return locale.setlocale(locale.LC_TIME)


def to_local_datetime(timestamp: Timestamp) -> Optional[datetime]:
    """
    Convert an epoch-milliseconds number or ISO-8601 string to local time.

    Returns None when the value cannot be interpreted.
    """
    if isinstance(timestamp, bool):
        return None
    if isinstance(timestamp, (int, float)):
        try:
            return datetime.fromtimestamp(timestamp / 1000)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(timestamp, str):
        text = timestamp.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        if parsed.tzinfo is not None:
            return parsed.astimezone().replace(tzinfo=None)
        return parsed
    return None


def format_locale_string(timestamp: Timestamp) -> str:
    """Local date and time, e.g. "12/07/25, 22:19:35"."""
    dt = to_local_datetime(timestamp)
    if dt is None:
        return INVALID_DATE
    return dt.strftime("%x, %X")


def format_locale_time_string(timestamp: Timestamp) -> str:
    """Local time of day only."""
    dt = to_local_datetime(timestamp)
    if dt is None:
        return INVALID_DATE
    return dt.strftime("%X")

"""Parsing of the time notation used in schedule cells."""

import re

from .models import Time

# The venue never opens before 8:00, so smaller hours are afternoon or evening.
AFTERNOON_CUTOFF_HOUR = 8

_NUMBER = re.compile(r"[0-9]+")


def _parse_number(text: str, what: str, source: str) -> int:
    if not _NUMBER.fullmatch(text):
        raise ValueError(f"Cannot parse {what} in time: {source!r}")
    return int(text)


def normalize_hour(hour: int) -> int:
    """Resolve a bare 12-hour clock hour to 24-hour form."""
    if hour < AFTERNOON_CUTOFF_HOUR:
        return hour + 12
    return hour


def parse_time(time_str: str) -> Time:
    """Parse an ``H`` or ``H:M`` string into a normalized time.

    Args:
        time_str: Time string like "2", "9:00" or "11:30".

    Returns:
        Time with the hour resolved to 24-hour form. Values are not range
        checked; "25:00" comes back as hour 25.

    Raises:
        ValueError: If either part is not a plain decimal number.
    """
    hours, sep, minutes = time_str.strip().partition(":")
    hour = _parse_number(hours, "hour", time_str)
    minute = _parse_number(minutes, "minute", time_str) if sep else 0
    return Time(normalize_hour(hour), minute)

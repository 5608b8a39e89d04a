"""Data models for schedule events."""

import calendar
import hashlib
from dataclasses import dataclass
from typing import Optional

from .errors import ErrorReason, ParseError, ScheduleError

UID_VERSION = "v1"
_FIELD_SEPARATOR = "\x1f"


@dataclass(frozen=True)
class Time:
    """Wall-clock time of day as listed on the schedule page."""

    hour: int
    minute: int

    def is_valid(self) -> bool:
        return 0 <= self.hour <= 23 and 0 <= self.minute <= 59

    def __str__(self) -> str:
        return f"{self.hour:02d}:{self.minute:02d}"


class Event:
    """Base class for an event listed in one day cell."""

    day: int
    label: str

    def append(self, text: str) -> None:
        """Append annotation text to the label, separated by a single space."""
        self.label = f"{self.label} {text}"

    @property
    def uid(self) -> int:
        return event_uid(self)


@dataclass
class AllDayEvent(Event):
    """Event without time bounds, spanning the whole day."""

    day: int
    label: str


@dataclass
class TimedEvent(Event):
    """Event with explicit start and end times."""

    day: int
    start: Time
    end: Time
    label: str


def event_uid(event: Event) -> int:
    """Compute the content hash used as the event's UID.

    The hash is a 64-bit BLAKE2b digest over the version tag followed by the
    event kind, day, label and (for timed events) both time bounds. Equal
    fields always give the same value across runs and machines. Distinct
    events with equal fields collide, so the value is not unique.
    """
    parts = [UID_VERSION, type(event).__name__, str(event.day), event.label]
    if isinstance(event, TimedEvent):
        parts.extend([str(event.start), str(event.end)])
    digest = hashlib.blake2b(
        _FIELD_SEPARATOR.join(parts).encode("utf-8"), digest_size=8
    ).digest()
    return int.from_bytes(digest, "big")


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


class MonthResult:
    """Events and errors collected for one month of the schedule.

    A result is created once per month, filled during a single parse pass,
    and only read afterwards. Day coverage is tracked as a hit count per day
    so that the coverage check can tell missing days from duplicated ones.
    """

    def __init__(self, year: int, month: int) -> None:
        self.year = year
        self.month = month
        self.events: list[Event] = []
        self.errors: list[ScheduleError] = []
        self._day_hits: list[int] = [0] * days_in_month(year, month)

    def __repr__(self) -> str:
        return (
            f"MonthResult(year={self.year}, month={self.month}, "
            f"events={len(self.events)}, errors={len(self.errors)})"
        )

    @property
    def days_in_month(self) -> int:
        return len(self._day_hits)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def covered_days(self) -> list[int]:
        """Days touched by exactly one cell."""
        return [day for day, hits in enumerate(self._day_hits, start=1) if hits == 1]

    def add_event(self, event: Event) -> Event:
        self.events.append(event)
        return event

    def error(self, err: ScheduleError) -> None:
        self.errors.append(err)

    def mark_day(self, day: int) -> None:
        """Record that a cell for ``day`` was parsed."""
        self._day_hits[day - 1] += 1

    def check_coverage(self) -> None:
        """Record an error for every day not touched exactly once."""
        for day, hits in enumerate(self._day_hits, start=1):
            if hits == 0:
                self.error(ParseError(ErrorReason.DAY_NOT_COVERED, day, "no cell found for this day"))
            elif hits > 1:
                self.error(ParseError(
                    ErrorReason.DAY_COVERED_TWICE, day, f"{hits} cells found for this day"
                ))

    def last_event_since(self, index: int) -> Optional[Event]:
        """Return the newest event added at or after ``index``, if any."""
        if len(self.events) > index:
            return self.events[-1]
        return None

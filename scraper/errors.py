"""Errors recorded or raised while building the schedule calendar."""

from enum import Enum
from typing import Optional


class ErrorReason(str, Enum):
    """Why a piece of the schedule grid could not be interpreted."""

    UNEXPECTED_ELEMENT = "unexpected-element"
    UNEXPECTED_NODE = "unexpected-node"
    UNPARSEABLE_DAY_MARKER = "unparseable-day-marker"
    UNPARSEABLE_TIME = "unparseable-time"
    ORPHAN_ANNOTATION = "orphan-annotation"
    DAY_NOT_COVERED = "day-not-covered"
    DAY_COVERED_TWICE = "day-covered-twice"


class ScheduleError(Exception):
    """Base class for all schedule processing errors."""


class ParseError(ScheduleError):
    """Non-fatal content error found while parsing one month's grid.

    Attributes:
        reason: Tag describing the kind of problem.
        day: Day of month the problem relates to, if known.
        context: Text describing the offending node or cell.
    """

    def __init__(self, reason: ErrorReason, day: Optional[int], context: str = "") -> None:
        self.reason = reason
        self.day = day
        self.context = context
        super().__init__(self._describe())

    def _describe(self) -> str:
        where = f"day {self.day}" if self.day is not None else "unknown day"
        if self.context:
            return f"{self.reason.value} ({where}): {self.context}"
        return f"{self.reason.value} ({where})"


class NoPrecedingEventError(ScheduleError):
    """Raised when an annotation has no event in its cell to attach to."""


class FetchError(ScheduleError):
    """Raised when a month's schedule page could not be retrieved."""

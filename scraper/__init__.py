"""Scraper module for extracting events from the monthly schedule pages."""

from .errors import ErrorReason, FetchError, NoPrecedingEventError, ParseError, ScheduleError
from .fetcher import PageFetcher, page_url
from .models import AllDayEvent, Event, MonthResult, Time, TimedEvent, event_uid
from .months import collect_months, handle_month, month_window
from .parser import CalendarParser

__all__ = [
    "AllDayEvent",
    "CalendarParser",
    "ErrorReason",
    "Event",
    "FetchError",
    "MonthResult",
    "NoPrecedingEventError",
    "PageFetcher",
    "ParseError",
    "ScheduleError",
    "Time",
    "TimedEvent",
    "collect_months",
    "event_uid",
    "handle_month",
    "month_window",
    "page_url",
]

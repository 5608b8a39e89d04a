"""iCalendar transformer for schedule events."""

from datetime import date, datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from icalendar import Calendar, Event as ICalEvent

from scraper.fetcher import DEFAULT_BASE_URL, page_url
from scraper.models import AllDayEvent, Event, MonthResult, Time, TimedEvent
from .base import BaseTransformer


class ICalTransformer(BaseTransformer):
    """Transformer that converts parsed schedule months to iCalendar format."""

    TIMEZONE = ZoneInfo("Asia/Tokyo")
    UID_SUFFIX = "shinbukan-ics"
    PRODID = "-//Shinbukan-ICS//Shinbukan-ICS//"
    CALENDAR_NAME = "Shinbukan"

    def __init__(self, url_for: Optional[Callable[[int, int], str]] = None) -> None:
        """Initialize the iCalendar transformer.

        Args:
            url_for: Callable giving the public page URL for (year, month),
                referenced from every event. Defaults to the public site.
        """
        self._calendar: Optional[Calendar] = None
        self._url_for = url_for or (lambda year, month: page_url(DEFAULT_BASE_URL, year, month))

    def _to_utc(self, year: int, month: int, day: int, at: Time) -> datetime:
        local = datetime(year, month, day, at.hour, at.minute, tzinfo=self.TIMEZONE)
        return local.astimezone(timezone.utc)

    def to_vevent(self, event: Event, year: int, month: int, generated_at: datetime) -> ICalEvent:
        """Build the VEVENT component for one event.

        Args:
            event: Parsed schedule event.
            year: Year of the month the event belongs to.
            month: Month the event belongs to.
            generated_at: Timestamp used for DTSTAMP.

        Returns:
            iCalendar Event component.
        """
        if isinstance(event, TimedEvent):
            start = self._to_utc(year, month, event.day, event.start)
            end = self._to_utc(year, month, event.day, event.end)
        elif isinstance(event, AllDayEvent):
            start = end = date(year, month, event.day)
        else:
            raise TypeError(f"Unsupported event type: {type(event).__name__}")

        ical_event = ICalEvent()
        ical_event.add("uid", f"{event.uid}@{self.UID_SUFFIX}")
        ical_event.add("dtstamp", generated_at.astimezone(timezone.utc).replace(microsecond=0))
        ical_event.add("dtstart", start)
        ical_event.add("dtend", end)
        ical_event.add("summary", event.label)
        ical_event.add("url", self._url_for(year, month))
        return ical_event

    def transform(self, results: list[MonthResult], generated_at: datetime) -> Calendar:
        """Transform parsed months into a single iCalendar calendar.

        Events keep the order in which they were found on each page.

        Args:
            results: Parsed months, in output order.
            generated_at: Generation timestamp stamped on every record.

        Returns:
            iCalendar Calendar object.
        """
        self._calendar = Calendar()
        self._calendar.add("version", "2.0")
        self._calendar.add("prodid", self.PRODID)
        self._calendar.add("name", self.CALENDAR_NAME)
        self._calendar.add("x-wr-calname", self.CALENDAR_NAME)

        for result in results:
            for event in result.events:
                self._calendar.add_component(
                    self.to_vevent(event, result.year, result.month, generated_at)
                )

        return self._calendar

    def to_ical(self) -> bytes:
        """Serialize the calendar, keeping properties in insertion order.

        Raises:
            RuntimeError: If transform() hasn't been called yet.
        """
        if self._calendar is None:
            raise RuntimeError("No calendar data. Call transform() first.")
        return self._calendar.to_ical(sorted=False)

    def save(self, output_path: str) -> None:
        """Save the calendar to an .ics file.

        Args:
            output_path: Path to the output file.

        Raises:
            RuntimeError: If transform() hasn't been called yet.
        """
        data = self.to_ical()
        with open(output_path, "wb") as f:
            f.write(data)

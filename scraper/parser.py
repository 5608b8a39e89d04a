"""Parser for the monthly schedule grid pages."""

import logging
import re
from typing import Optional

from bs4 import BeautifulSoup, Tag
from bs4.element import NavigableString, PageElement, PreformattedString

from .errors import ErrorReason, NoPrecedingEventError, ParseError
from .models import AllDayEvent, Event, MonthResult, TimedEvent
from .times import parse_time

logger = logging.getLogger(__name__)

DAY_NUMBER = re.compile(r"[0-9]+")
TIME_RANGE_SEPARATOR = re.compile(r"[-~]")
DIGIT = re.compile(r"[0-9]")

CONTEXT_LIMIT = 80


def _describe(node: PageElement) -> str:
    text = str(node).strip()
    if len(text) > CONTEXT_LIMIT:
        text = text[:CONTEXT_LIMIT] + "..."
    return f"{type(node).__name__} {text!r}"


def _is_text(node: PageElement) -> bool:
    # Comments, CDATA, doctypes and declarations are strings too in bs4.
    return isinstance(node, NavigableString) and not isinstance(node, PreformattedString)


class _CellScan:
    """State of the scan over a single cell.

    Tracks where the cell's events begin in the month's event list so that
    annotations only ever attach to an event from the same cell.
    """

    def __init__(self, result: MonthResult, day: int) -> None:
        self.result = result
        self.day = day
        self._first_event = len(result.events)

    def last_event(self) -> Event:
        event = self.result.last_event_since(self._first_event)
        if event is None:
            raise NoPrecedingEventError(f"No event to annotate yet in day {self.day}")
        return event


class CalendarParser:
    """Parser extracting events from the day cells of a schedule page.

    The page holds one table whose cells each describe a single day: the
    day number as the first text node, followed by one line per event.
    Lines start with an optional time range like ``9:00-10:30``; red
    ``font`` elements carry remarks that belong to the preceding event.
    """

    CELL_SELECTOR = 'table[summary="日程"] td'
    TABLE_SELECTOR = 'table[summary="日程"]'

    def cells(self, html: str) -> list[Tag]:
        """Locate the day grid and return its cells in document order.

        Args:
            html: Decoded page source.

        Returns:
            List of ``td`` tags; empty if the schedule table is missing.
        """
        soup = BeautifulSoup(html, "lxml")
        if soup.select_one(self.TABLE_SELECTOR) is None:
            logger.warning("Schedule table not found in the page")
            return []
        return soup.select(self.CELL_SELECTOR)

    def parse(self, html: str, result: MonthResult) -> MonthResult:
        """Parse a whole month page into ``result``.

        Every cell is interpreted, then the day coverage is checked. Problems
        are recorded in ``result.errors`` and never stop the pass.

        Args:
            html: Decoded page source.
            result: Empty result for the page's year and month.

        Returns:
            The same result, filled in.
        """
        for cell in self.cells(html):
            day = self.parse_cell(cell, result)
            if day is not None:
                result.mark_day(day)
        result.check_coverage()

        logger.info(
            "Parsed %d events for %04d-%02d (%d errors)",
            len(result.events), result.year, result.month, len(result.errors),
        )
        return result

    def parse_cell(self, cell: Tag, result: MonthResult) -> Optional[int]:
        """Interpret one table cell.

        Args:
            cell: The ``td`` tag.
            result: Result receiving the cell's events and errors.

        Returns:
            Day number of the cell, or None if it is not a day cell.
        """
        children = list(cell.children)
        if not children:
            return None

        day = self._day_number(children[0], result)
        if day is None:
            return None

        scan = _CellScan(result, day)
        for node in children[1:]:
            if isinstance(node, Tag):
                self._visit_element(node, scan)
            elif _is_text(node):
                self._visit_text(str(node), scan)
            else:
                result.error(ParseError(ErrorReason.UNEXPECTED_NODE, day, _describe(node)))
        return day

    def _day_number(self, node: PageElement, result: MonthResult) -> Optional[int]:
        if not _is_text(node):
            return None

        text = node.strip()
        if not DAY_NUMBER.fullmatch(text):
            # Spacer cells hold blanks or non-breaking spaces
            return None

        day = int(text)
        if not 1 <= day <= result.days_in_month:
            result.error(ParseError(
                ErrorReason.UNPARSEABLE_DAY_MARKER, day,
                f"day marker {text!r} outside 1-{result.days_in_month}",
            ))
            return None
        return day

    def _visit_element(self, element: Tag, scan: _CellScan) -> None:
        size = (element.get("size") or "").strip()
        color = (element.get("color") or "").strip().lower()

        if element.name == "br":
            return
        if element.name == "font" and size == "-1":
            return
        if element.name == "font" and color == "red":
            self._annotate(element, scan)
            return

        scan.result.error(ParseError(ErrorReason.UNEXPECTED_ELEMENT, scan.day, _describe(element)))

    def _annotate(self, element: Tag, scan: _CellScan) -> None:
        text = " ".join(element.stripped_strings)
        if not text:
            return
        try:
            event = scan.last_event()
        except NoPrecedingEventError as exc:
            scan.result.error(ParseError(
                ErrorReason.ORPHAN_ANNOTATION, scan.day, f"{exc}: {text!r}"
            ))
            return
        event.append(text)

    def _visit_text(self, raw: str, scan: _CellScan) -> None:
        text = raw.strip()
        if not text:
            return

        head, sep, rest = text.partition(" ")
        bounds = TIME_RANGE_SEPARATOR.split(head, maxsplit=1) if sep else []
        if len(bounds) != 2:
            scan.result.add_event(AllDayEvent(scan.day, text))
            return
        if not DIGIT.search(head):
            # Hyphenated words like "Kick-off", not a time range
            logger.warning("Day %d: treating %r as an all-day event", scan.day, text)
            scan.result.add_event(AllDayEvent(scan.day, text))
            return

        try:
            start = parse_time(bounds[0])
            end = parse_time(bounds[1])
        except ValueError as exc:
            start = end = None
            reason = str(exc)
        else:
            reason = f"time out of range in {head!r}"

        if start is None or not (start.is_valid() and end.is_valid()):
            scan.result.error(ParseError(ErrorReason.UNPARSEABLE_TIME, scan.day, reason))
            scan.result.add_event(AllDayEvent(scan.day, text))
            return

        scan.result.add_event(TimedEvent(scan.day, start, end, rest))

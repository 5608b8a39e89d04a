"""Fan-out of the fetch and parse pass over several months."""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import date
from typing import Optional, Protocol

from .errors import FetchError
from .models import MonthResult
from .parser import CalendarParser

logger = logging.getLogger(__name__)


class Fetcher(Protocol):
    def fetch(self, year: int, month: int) -> str:
        ...


def add_months(year: int, month: int, count: int) -> tuple[int, int]:
    """Shift a (year, month) pair by ``count`` months, which may be negative."""
    index = year * 12 + (month - 1) + count
    return index // 12, index % 12 + 1


def default_start(today: date, months_back: int) -> tuple[int, int]:
    return add_months(today.year, today.month, -months_back)


def month_window(start: tuple[int, int], count: int) -> list[tuple[int, int]]:
    """List ``count`` consecutive (year, month) pairs beginning at ``start``."""
    year, month = start
    return [add_months(year, month, offset) for offset in range(count)]


def handle_month(fetcher: Fetcher, parser: CalendarParser, year: int, month: int) -> MonthResult:
    """Fetch and parse one month.

    A transport failure is recorded as the month's only error and leaves
    it without events; content problems are recorded by the parser.
    """
    result = MonthResult(year, month)
    try:
        html = fetcher.fetch(year, month)
    except FetchError as exc:
        logger.warning("Skipping %04d-%02d: %s", year, month, exc)
        result.error(exc)
        return result
    return parser.parse(html, result)


def collect_months(
    fetcher: Fetcher,
    months: list[tuple[int, int]],
    max_workers: int,
    parser: Optional[CalendarParser] = None,
) -> list[MonthResult]:
    """Process several months concurrently.

    Args:
        fetcher: Page source provider.
        months: (year, month) pairs to process.
        max_workers: Upper bound on months processed at the same time.
        parser: Parser to use; a default one is created when omitted.

    Returns:
        One result per month, in the order of ``months``.
    """
    parser = parser or CalendarParser()
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(handle_month, fetcher, parser, year, month)
            for year, month in months
        ]
        return [future.result() for future in futures]

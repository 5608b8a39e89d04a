"""Tests for the month fan-out."""

import threading
from datetime import date

import pytest

from scraper.errors import ErrorReason, FetchError
from scraper.months import add_months, collect_months, default_start, handle_month, month_window
from tests.pages import full_month_page


class FakeFetcher:
    """Serves pages from a dict; missing months fail like a dead server."""

    def __init__(self, pages):
        self.pages = pages
        self.calls = []
        self._lock = threading.Lock()

    def fetch(self, year, month):
        with self._lock:
            self.calls.append((year, month))
        try:
            return self.pages[(year, month)]
        except KeyError:
            raise FetchError(f"HTTP 404 for {year}-{month:02d}")


class TestMonthArithmetic:
    @pytest.mark.parametrize("year,month,count,expected", [
        (2024, 5, 0, (2024, 5)),
        (2024, 11, 3, (2025, 2)),
        (2024, 1, -2, (2023, 11)),
        (2024, 12, 1, (2025, 1)),
        (2024, 3, -15, (2022, 12)),
    ])
    def test_add_months(self, year, month, count, expected):
        assert add_months(year, month, count) == expected

    def test_default_start_goes_back(self):
        assert default_start(date(2024, 1, 31), 2) == (2023, 11)

    def test_month_window(self):
        assert month_window((2024, 11), 4) == [(2024, 11), (2024, 12), (2025, 1), (2025, 2)]


class TestHandleMonth:
    def test_parses_fetched_page(self, parser):
        fetcher = FakeFetcher({(2023, 2): full_month_page(28, {3: "<br>Holiday"})})
        result = handle_month(fetcher, parser, 2023, 2)

        assert result.errors == []
        assert [e.label for e in result.events] == ["Holiday"]

    def test_fetch_error_short_circuits(self, parser):
        result = handle_month(FakeFetcher({}), parser, 2023, 2)

        assert result.events == []
        assert len(result.errors) == 1
        assert isinstance(result.errors[0], FetchError)


class TestCollectMonths:
    def test_results_follow_month_order(self, parser):
        months = month_window((2023, 11), 4)
        pages = {
            (2023, 11): full_month_page(30, {1: "<br>November"}),
            (2023, 12): full_month_page(31, {1: "<br>December"}),
            (2024, 2): full_month_page(29, {1: "<br>February"}),
        }
        fetcher = FakeFetcher(pages)
        results = collect_months(fetcher, months, max_workers=3, parser=parser)

        assert [(r.year, r.month) for r in results] == months
        assert [[e.label for e in r.events] for r in results] == [
            ["November"], ["December"], [], ["February"],
        ]
        assert sorted(fetcher.calls) == months

    def test_errors_stay_in_their_month(self):
        pages = {
            (2024, 4): full_month_page(30),
            (2024, 5): full_month_page(30),
        }
        results = collect_months(FakeFetcher(pages), [(2024, 4), (2024, 5), (2024, 6)], max_workers=2)

        april, may, june = results
        assert april.errors == []
        assert [(e.reason, e.day) for e in may.errors] == [(ErrorReason.DAY_NOT_COVERED, 31)]
        assert len(june.errors) == 1
        assert isinstance(june.errors[0], FetchError)

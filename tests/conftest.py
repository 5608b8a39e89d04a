"""Pytest fixtures for schedule converter tests."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from scraper.models import MonthResult
from scraper.parser import CalendarParser

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def parser() -> CalendarParser:
    return CalendarParser()


@pytest.fixture
def may_2024() -> MonthResult:
    """Empty result for a 31-day month."""
    return MonthResult(2024, 5)


@pytest.fixture
def may_2024_html() -> str:
    """Schedule page for May 2024 as served by the site."""
    return (FIXTURES_DIR / "2024-05.html").read_text(encoding="utf-8")


@pytest.fixture
def generated_at() -> datetime:
    return datetime(2000, 1, 1, tzinfo=timezone.utc)

"""Tests for date parser with relative dates."""

import pytest
from datetime import date

from finkeep.utils.date_parser import parse_date, parse_month

TODAY = date(2026, 1, 31)


def test_parse_absolute_date():
    """Test parsing ISO dates."""
    assert parse_date("2024-01-15") == date(2024, 1, 15)


def test_parse_day_first_date():
    """Test slash dates are read day first."""
    assert parse_date("05/03/2026") == date(2026, 3, 5)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("today", date(2026, 1, 31)),
        ("Yesterday", date(2026, 1, 30)),
        ("tomorrow", date(2026, 2, 1)),
        ("this month", date(2026, 1, 1)),
        ("last month", date(2025, 12, 1)),
        ("next month", date(2026, 2, 1)),
    ],
)
def test_parse_relative_words(text, expected):
    assert parse_date(text, today=TODAY) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("+3 days", date(2026, 2, 3)),
        ("-1 week", date(2026, 1, 24)),
        # Month offsets clamp to the last day of the month
        ("+1 month", date(2026, 2, 28)),
        ("+2 years", date(2028, 1, 31)),
    ],
)
def test_parse_offsets(text, expected):
    assert parse_date(text, today=TODAY) == expected


@pytest.mark.parametrize("text", ["someday", "+3 fortnights", "32/13/2026"])
def test_parse_invalid_date(text):
    with pytest.raises(ValueError):
        parse_date(text, today=TODAY)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("2026-03", (3, 2026)),
        ("03/2026", (3, 2026)),
        ("this-month", (1, 2026)),
        ("last-month", (12, 2025)),
        ("next-month", (2, 2026)),
    ],
)
def test_parse_month(text, expected):
    assert parse_month(text, today=TODAY) == expected


@pytest.mark.parametrize("text", ["2026-13", "march", "2026"])
def test_parse_invalid_month(text):
    with pytest.raises(ValueError):
        parse_month(text, today=TODAY)

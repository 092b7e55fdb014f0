"""Date parsing utilities."""

from datetime import date, timedelta
from typing import Optional

from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from finkeep.utils.clock import utc_today


def parse_date(date_str: str, today: Optional[date] = None) -> date:
    """Parse a date string into a date object.

    Supports various formats including relative dates:
    - Absolute dates: "2024-01-15", "15/01/2024" (day first), "January 15, 2024"
    - Relative dates: "today", "yesterday", "tomorrow"
    - Month anchors: "this month", "last month", "next month" (first day)
    - Offsets: "+3 months", "-10 days"

    Args:
        date_str: Date string in various formats
        today: Reference date for relative forms, defaults to the UTC date

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = today or utc_today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
        "this month": today.replace(day=1),
        "last month": (today - relativedelta(months=1)).replace(day=1),
        "next month": (today + relativedelta(months=1)).replace(day=1),
    }
    if date_str in relative_dates:
        return relative_dates[date_str]

    # "+N unit" / "-N unit" offsets
    parts = date_str.split()
    if len(parts) == 2 and parts[0][:1] in "+-" and parts[0][1:].isdigit():
        count = int(parts[0])
        unit = parts[1].rstrip("s")
        if unit == "day":
            return today + timedelta(days=count)
        if unit == "week":
            return today + timedelta(weeks=count)
        if unit == "month":
            return today + relativedelta(months=count)
        if unit == "year":
            return today + relativedelta(years=count)
        raise ValueError(f"Could not parse date '{date_str}': unknown unit '{parts[1]}'")

    # ISO dates are year first; everything else is read day first
    try:
        if len(date_str) >= 4 and date_str[:4].isdigit():
            dt = date_parser.parse(date_str)
        else:
            dt = date_parser.parse(date_str, dayfirst=True)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")


def parse_month(month_str: str, today: Optional[date] = None) -> tuple[int, int]:
    """Parse a month reference into a ``(month, year)`` pair.

    Accepts "2024-03", "03/2024", "this-month", "last-month" and "next-month".

    Raises:
        ValueError: If the month cannot be parsed
    """
    month_str = month_str.strip().lower()
    today = today or utc_today()

    anchors = {
        "this-month": today,
        "last-month": today - relativedelta(months=1),
        "next-month": today + relativedelta(months=1),
    }
    if month_str in anchors:
        anchor = anchors[month_str]
        return anchor.month, anchor.year

    for sep, year_first in (("-", True), ("/", False)):
        if sep in month_str:
            left, _, right = month_str.partition(sep)
            year_part, month_part = (left, right) if year_first else (right, left)
            if year_part.isdigit() and month_part.isdigit():
                month, year = int(month_part), int(year_part)
                if 1 <= month <= 12:
                    return month, year

    raise ValueError(
        f"Could not parse month '{month_str}'. "
        "Use YYYY-MM, MM/YYYY, this-month, last-month or next-month"
    )

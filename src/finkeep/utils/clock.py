"""Clock helpers.

Timestamps are stored as naive UTC so that values read back from SQLite
compare directly with freshly computed ones.
"""

from datetime import datetime, date, UTC


def utc_now() -> datetime:
    """Return the current UTC time without tzinfo."""
    return datetime.now(UTC).replace(tzinfo=None)


def utc_today() -> date:
    """Return the current UTC calendar date."""
    return utc_now().date()

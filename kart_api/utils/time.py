"""Time window helpers used for per-day order queries."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone


def day_window_utc(day: date) -> tuple[datetime, datetime]:
    """Return the UTC boundaries ``[start, end)`` of a calendar day.

    Orders are stored with UTC timestamps, so per-day filtering must use UTC
    boundaries as well.
    """
    start = datetime.combine(day, time.min, tzinfo=timezone.utc)
    end = start + timedelta(days=1)
    return start, end

"""Clock and timezone helpers.

Every function takes the current instant and the local timezone explicitly so
results depend only on arguments.
"""

from __future__ import annotations

import calendar
from datetime import date, datetime, time, timezone, tzinfo


def to_local(timestamp: datetime, tz: tzinfo) -> datetime:
    """Convert a timestamp to local time. Naive timestamps are treated as UTC."""

    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(tz)


def local_date(timestamp: datetime, tz: tzinfo) -> date:
    return to_local(timestamp, tz).date()


def start_of_day(now: datetime, tz: tzinfo) -> datetime:
    """Local midnight of the day containing ``now``."""

    return datetime.combine(local_date(now, tz), time.min, tzinfo=tz)


def days_left(deadline_date: date, now: datetime, tz: tzinfo) -> int:
    """Calendar days from local today until ``deadline_date``; negative when overdue."""

    return (deadline_date - local_date(now, tz)).days


def month_bounds(day: date) -> tuple[date, date]:
    last = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=1), day.replace(day=last)

"""Daily required-vs-actual cumulative progress series for charting."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from typing import Optional

import numpy as np

from pace_engine.dates import local_date
from pace_engine.formatting import format_audiobook_time, format_pages, round_half_up
from pace_engine.ledger import ProgressLedger, reading_start_date
from pace_engine.pace import required_daily_pace
from pace_engine.schema import BookFormat, Deadline

logger = logging.getLogger(__name__)

DEFAULT_TREND_DAYS = 7

SUCCESS_COLOR = "#10b981"
WARNING_COLOR = "#f59e0b"
NEUTRAL_COLOR = "#9CA3AF"
PRIMARY_COLOR = "#0a7ea4"

ACTIVITY_POINT_RADIUS = 6
POINT_RADIUS = 2


@dataclass(frozen=True)
class DailyProgressPoint:
    date: str  # "M/DD"
    full_date: date
    required: float
    actual: float
    daily_actual: float
    has_activity: bool


@dataclass(frozen=True)
class ProgressStatus:
    difference: float
    is_ahead: bool
    display_text: str
    color: str


@dataclass(frozen=True)
class LineDataPoint:
    value: float
    label: str
    data_point_color: Optional[str] = None
    data_point_radius: Optional[int] = None


@dataclass(frozen=True)
class DailyChartData:
    actual_line_data: list[LineDataPoint]
    required_line_data: list[LineDataPoint]
    max_value: float
    status: ProgressStatus


def _label(day: date) -> str:
    return f"{day.month}/{day.day:02d}"


def calculate_daily_cumulative_progress(
    deadline: Deadline,
    now: datetime,
    tz: tzinfo,
    days: int = DEFAULT_TREND_DAYS,
    end_date: Optional[date] = None,
) -> list[DailyProgressPoint]:
    """Trailing window of daily points ending today (or ``end_date`` if earlier).

    Returns an empty list when the reading start or the required pace cannot
    be determined.
    """

    started = reading_start_date(deadline)
    pace = required_daily_pace(deadline, tz)
    if started is None or pace is None:
        return []

    start_day = local_date(started, tz)
    today = local_date(now, tz)
    last_day = end_date if end_date is not None and end_date < today else today

    window = [last_day - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    window = [d for d in window if d >= start_day and (end_date is None or d <= end_date)]
    if not window:
        return []

    ledger = ProgressLedger(deadline.progress)
    elapsed = np.array([(d - start_day).days + 1 for d in window], dtype=float)
    required = elapsed * pace
    actual = np.array([ledger.cumulative_as_of(d, tz) for d in window], dtype=float)

    first = window[0]
    previous = ledger.cumulative_as_of(first - timedelta(days=1), tz) if first > start_day else 0.0
    daily = np.clip(np.diff(actual, prepend=previous), 0, None)

    return [
        DailyProgressPoint(
            date=_label(d),
            full_date=d,
            required=float(required[i]),
            actual=float(actual[i]),
            daily_actual=float(daily[i]),
            has_activity=ledger.has_activity_on(d, tz),
        )
        for i, d in enumerate(window)
    ]


def calculate_progress_status(
    current_actual: float, current_required: float, book_format: BookFormat, is_completed: bool = False
) -> ProgressStatus:
    difference = current_actual - current_required
    is_ahead = difference > 0

    if is_completed:
        return ProgressStatus(difference, True, "Completed!", SUCCESS_COLOR)

    amount = abs(round_half_up(difference))
    formatted = format_audiobook_time(amount) if book_format == BookFormat.AUDIO else format_pages(amount)

    if difference > 0:
        text = f"+{formatted} ahead"
    elif difference < 0:
        text = f"{formatted} behind"
    else:
        text = "On track"

    # On track shares the warning color with behind.
    return ProgressStatus(difference, is_ahead, text, SUCCESS_COLOR if is_ahead else WARNING_COLOR)


def transform_to_daily_chart_data(
    actual_data: list[DailyProgressPoint],
    required_data: list[DailyProgressPoint],
    book_format: BookFormat,
    is_completed: bool = False,
) -> DailyChartData:
    if not actual_data or not required_data:
        return DailyChartData([], [], 0, ProgressStatus(0, False, "No data", NEUTRAL_COLOR))

    actual_line = [
        LineDataPoint(
            value=point.actual,
            label=point.date,
            data_point_color=PRIMARY_COLOR,
            data_point_radius=ACTIVITY_POINT_RADIUS if point.has_activity else POINT_RADIUS,
        )
        for point in actual_data
    ]
    required_line = [LineDataPoint(value=point.required, label=point.date) for point in required_data]

    max_value = float(
        max(
            np.max([p.actual for p in actual_data]),
            np.max([p.required for p in required_data]),
        )
    )
    status = calculate_progress_status(actual_data[-1].actual, required_data[-1].required, book_format, is_completed)
    return DailyChartData(actual_line, required_line, max_value, status)

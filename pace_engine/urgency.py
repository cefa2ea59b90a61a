"""Urgency classification and the per-deadline calculation result."""

from __future__ import annotations

import logging
from datetime import datetime, tzinfo

from pace_engine.dates import days_left as calendar_days_left
from pace_engine.formatting import format_pace_display, round_half_up, unit_for_format
from pace_engine.ledger import current_progress, latest_status, progress_as_of_start_of_day
from pace_engine.pace import (
    pace_estimate,
    pace_status_message,
    reading_estimate,
    required_pace,
    select_pace_sample,
)
from pace_engine.ranking import PaceRankingPolicy, pace_based_status
from pace_engine.schema import (
    Deadline,
    DeadlineCalculation,
    DeadlineStatus,
    PaceColor,
    PaceLevel,
    PaceSample,
    PaceStatus,
    UrgencyLevel,
)

logger = logging.getLogger(__name__)

ARCHIVED_STATUSES = {DeadlineStatus.COMPLETE, DeadlineStatus.PAUSED}
ARCHIVED_COLOR = "#10b981"

_PACE_TO_URGENCY = {
    PaceLevel.OVERDUE: UrgencyLevel.OVERDUE,
    PaceLevel.IMPOSSIBLE: UrgencyLevel.IMPOSSIBLE,
    PaceLevel.GOOD: UrgencyLevel.GOOD,
    PaceLevel.APPROACHING: UrgencyLevel.APPROACHING,
}

PACE_COLOR_HEX = {
    PaceColor.GREEN: "#7a5a8c",
    PaceColor.ORANGE: "#d4a46a",
    PaceColor.RED: "#c8696e",
}
DEFAULT_URGENCY_COLOR = "#b8a9c9"


def normalize_status(status: PaceStatus) -> PaceStatus:
    """Coerce raw policy output into the closed color/level variants."""

    color = PaceColor.parse(status.color)
    level = PaceLevel.parse(status.level)
    if level == PaceLevel.UNKNOWN or color == PaceColor.UNKNOWN:
        logger.debug("Unrecognized pace status %r/%r", status.color, status.level)
    return PaceStatus(color, level, status.message)


def map_pace_to_urgency(status: PaceStatus, days_left: int) -> UrgencyLevel:
    """Translate a policy level into the five-value urgency vocabulary.

    Levels without a direct counterpart (``urgent`` and ``unknown``) become
    ``urgent`` within a week of the deadline and ``good`` otherwise.
    """

    level = PaceLevel.parse(status.level)
    if level in _PACE_TO_URGENCY:
        return _PACE_TO_URGENCY[level]
    return UrgencyLevel.URGENT if days_left <= 7 else UrgencyLevel.GOOD


def map_pace_color_to_hex(color: PaceColor | str) -> str:
    return PACE_COLOR_HEX.get(PaceColor.parse(color), DEFAULT_URGENCY_COLOR)


def progress_percentage(current: float, total: float) -> int:
    if total <= 0:
        return 0
    return round_half_up(current / total * 100)


def calculate_deadline(
    deadline: Deadline,
    reading_sample: PaceSample,
    listening_sample: PaceSample,
    now: datetime,
    tz: tzinfo,
    policy: PaceRankingPolicy = pace_based_status,
) -> DeadlineCalculation:
    """Compute the full list/card result for one deadline."""

    current = current_progress(deadline)
    total = deadline.total_quantity
    remaining = total - current
    percentage = progress_percentage(current, total)
    status = latest_status(deadline)

    if status in ARCHIVED_STATUSES:
        message = "Completed!" if status == DeadlineStatus.COMPLETE else "Set aside"
        pace_status = PaceStatus(PaceColor.GREEN, PaceLevel.GOOD, message)
        return _build_result(
            deadline,
            now,
            tz,
            current=current,
            remaining=remaining,
            percentage=percentage,
            days_left=0,
            units_per_day=0,
            urgency_level=UrgencyLevel.GOOD,
            urgency_color=ARCHIVED_COLOR,
            status_message=message,
            user_pace=0,
            required=0,
            pace_status=pace_status,
        )

    days_left = calendar_days_left(deadline.deadline_date, now, tz)
    units_per_day = required_pace(total, progress_as_of_start_of_day(deadline, now, tz), days_left, deadline.format)

    sample = select_pace_sample(deadline.format, reading_sample, listening_sample)
    required = required_pace(total, current, days_left, deadline.format)
    pace_status = normalize_status(policy(sample.average_pace, required, days_left, percentage))
    message = pace_status_message(sample, required, pace_status, deadline.format)

    return _build_result(
        deadline,
        now,
        tz,
        current=current,
        remaining=remaining,
        percentage=percentage,
        days_left=days_left,
        units_per_day=units_per_day,
        urgency_level=map_pace_to_urgency(pace_status, days_left),
        urgency_color=map_pace_color_to_hex(pace_status.color),
        status_message=message,
        user_pace=sample.average_pace,
        required=required,
        pace_status=pace_status,
    )


def _build_result(
    deadline: Deadline,
    now: datetime,
    tz: tzinfo,
    *,
    current: float,
    remaining: float,
    percentage: int,
    days_left: int,
    units_per_day: float,
    urgency_level: UrgencyLevel,
    urgency_color: str,
    status_message: str,
    user_pace: float,
    required: float,
    pace_status: PaceStatus,
) -> DeadlineCalculation:
    book_format = deadline.format
    return DeadlineCalculation(
        current_progress=current,
        total_quantity=deadline.total_quantity,
        remaining=remaining,
        progress_percentage=percentage,
        days_left=days_left,
        units_per_day=units_per_day,
        urgency_level=urgency_level,
        urgency_color=urgency_color,
        status_message=status_message,
        pace_estimate=pace_estimate(book_format, deadline.deadline_date, remaining, now, tz),
        reading_estimate=reading_estimate(book_format, remaining),
        unit=unit_for_format(book_format),
        user_pace=user_pace,
        required_pace=required,
        pace_display=format_pace_display(user_pace, book_format),
        required_pace_display=format_pace_display(required, book_format),
        pace_status=pace_status.color,
        pace_message=status_message,
    )

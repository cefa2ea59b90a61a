"""Required-pace estimation and observed-pace selection."""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, tzinfo
from typing import Optional

from pace_engine.dates import days_left as calendar_days_left
from pace_engine.dates import local_date
from pace_engine.formatting import format_pace_display, round_half_up
from pace_engine.ledger import reading_start_date
from pace_engine.schema import BookFormat, Deadline, PaceLevel, PaceSample, PaceStatus

logger = logging.getLogger(__name__)

PAGES_PER_HOUR = 40


def required_pace(total: float, current: float, days_left: int, book_format: BookFormat) -> float:
    """Units per day needed to finish on time; the whole remainder once overdue.

    Units are native to the format (pages, or minutes for audio).
    """

    remaining = total - current
    if days_left <= 0:
        return remaining
    return math.ceil(remaining / days_left)


def required_daily_pace(deadline: Deadline, tz: tzinfo) -> Optional[float]:
    """Trend-view pace: total quantity spread over the reading-start to deadline span.

    Returns ``None`` when there is no reading start or the span is not positive.
    """

    started = reading_start_date(deadline)
    if started is None:
        logger.debug("Deadline %s: no reading start date", deadline.id)
        return None

    span = (deadline.deadline_date - local_date(started, tz)).days
    if span <= 0:
        logger.debug("Deadline %s: non-positive timeline span %s", deadline.id, span)
        return None
    return deadline.total_quantity / span


def select_pace_sample(book_format: BookFormat, reading: PaceSample, listening: PaceSample) -> PaceSample:
    return listening if book_format == BookFormat.AUDIO else reading


def pace_status_message(sample: PaceSample, required: float, status: PaceStatus, book_format: BookFormat) -> str:
    """Detailed message for a ranked deadline."""

    pace_display = format_pace_display(sample.average_pace, book_format).replace("/day", "")
    required_display = format_pace_display(required, book_format).replace("/day", "")
    fallback = sample.calculation_method == "default_fallback"

    if status.level == PaceLevel.OVERDUE:
        return "Return or renew"
    if status.level == PaceLevel.IMPOSSIBLE:
        if fallback:
            return f"Required: {required_display}/day"
        return f"Current: {pace_display} vs Required: {required_display}"
    if status.level == PaceLevel.URGENT:
        return "Tough timeline"
    if status.level == PaceLevel.GOOD:
        if fallback:
            return "On track (default pace)"
        return f"On track at {pace_display}/day"
    if status.level == PaceLevel.APPROACHING:
        difference = format_pace_display(required - sample.average_pace, book_format)
        return f"Read ~{difference} more"
    return "Good"


def reading_estimate(book_format: BookFormat, remaining: float) -> str:
    """Rough time needed to finish the remaining content."""

    if remaining <= 0:
        return ""
    if book_format == BookFormat.AUDIO:
        hours, minutes = divmod(round_half_up(remaining), 60)
        if hours > 0:
            suffix = f" and {minutes} minutes" if minutes > 0 else ""
            return f"About {hours} hour{'s' if hours > 1 else ''}{suffix} of listening time"
        return f"About {minutes} minutes of listening time"
    hours = math.ceil(remaining / PAGES_PER_HOUR)
    return f"About {hours} hours of reading time"


def pace_estimate(book_format: BookFormat, deadline_date: date, remaining: float, now: datetime, tz: tzinfo) -> str:
    """Daily amount needed to finish by ``deadline_date``."""

    if remaining <= 0:
        return ""

    left = calendar_days_left(deadline_date, now, tz)
    if left <= 0:
        return "This due date has already passed"

    per_day = math.ceil(remaining / left)
    if book_format == BookFormat.AUDIO:
        hours, minutes = divmod(per_day, 60)
        if hours > 0:
            text = f"{hours} hour{'s' if hours > 1 else ''}"
            if minutes > 0:
                text += f" {minutes} minutes"
        else:
            text = f"{minutes} minutes"
        return f"{text}/day"
    return f"{per_day} pages/day"

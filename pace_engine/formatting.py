"""Format-aware display strings for progress and pace."""

from __future__ import annotations

import math

from pace_engine.schema import BookFormat


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""

    return math.floor(value + 0.5)


def unit_for_format(book_format: BookFormat) -> str:
    return "minutes" if book_format == BookFormat.AUDIO else "pages"


def format_audiobook_time(minutes: float) -> str:
    """Render minutes as ``"2h 5m"``, ``"2h"`` or ``"45m"``."""

    if not minutes or minutes < 0:
        return "0m"
    minutes = round_half_up(minutes)
    hours, mins = divmod(minutes, 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def format_pages(count: float) -> str:
    count = round_half_up(count)
    return f"{count} {'page' if count == 1 else 'pages'}"


def format_progress_display(book_format: BookFormat, progress: float) -> str:
    if book_format == BookFormat.AUDIO:
        hours, minutes = divmod(round_half_up(progress), 60)
        return f"{hours}h {minutes}m" if hours > 0 else f"{minutes}m"
    return f"{_number(progress)}"


def format_pace_display(pace: float, book_format: BookFormat) -> str:
    if book_format == BookFormat.AUDIO:
        minutes = round_half_up(pace)
        hours, remaining = divmod(minutes, 60)
        if hours > 0:
            return f"{hours}h {remaining}m/day"
        return f"{minutes}m/day"
    return f"{round_half_up(pace)} pages/day"


def format_low_frequency(days_per_unit: int, unit_name: str) -> str:
    if days_per_unit == 7:
        return f"1 {unit_name}/week"
    if days_per_unit == 14:
        return f"1 {unit_name}/2 weeks"
    if days_per_unit == 21:
        return f"1 {unit_name}/3 weeks"
    if days_per_unit == 28:
        return f"1 {unit_name}/month"
    if days_per_unit > 7 and days_per_unit % 7 == 0:
        return f"1 {unit_name}/{days_per_unit // 7} weeks"
    return f"1 {unit_name} every {days_per_unit} days"


def format_units_per_day_for_display(units: float, book_format: BookFormat, remaining: float, days_left: int) -> str:
    """Card text for the daily target, handling nearly-finished and sub-1/day cases."""

    if book_format == BookFormat.AUDIO:
        if 0 < remaining <= 30:
            return f"Just {_time_display(remaining)} left"
    elif 0 < remaining <= 5:
        return f"Just {format_pages(remaining)} left"

    actual_per_day = remaining / days_left if days_left > 0 else units
    unit_name = "minute" if book_format == BookFormat.AUDIO else "page"

    if actual_per_day == 0:
        return f"0 {unit_for_format(book_format)}/day"
    if actual_per_day < 1 and days_left > 0:
        return format_low_frequency(round_half_up(1 / actual_per_day), unit_name)

    if book_format == BookFormat.AUDIO:
        hours, minutes = divmod(round_half_up(units), 60)
        if hours > 0:
            return f"{hours}h {minutes}m/day" if minutes > 0 else f"{hours}h/day"
        return f"{round_half_up(units)} minutes/day"
    return f"{round_half_up(units)} pages/day"


def _time_display(minutes: float) -> str:
    hours = math.floor(minutes / 60)
    mins = round_half_up(minutes % 60)
    if hours > 0:
        return f"{hours}h {mins}m" if mins > 0 else f"{hours}h"
    return f"{mins} minute{'s' if mins != 1 else ''}"


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"

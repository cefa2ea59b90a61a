"""Calendar aggregation: agenda items, marked dates and activity bars."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timezone, tzinfo
from typing import Callable, Iterable, Optional

from pace_engine.dates import local_date, month_bounds, to_local
from pace_engine.formatting import format_audiobook_time
from pace_engine.schema import (
    ActivityEvent,
    ActivityType,
    BookFormat,
    CustomDateDetails,
    Deadline,
    DeadlineCalculation,
    DeadlineCreatedDetails,
    NoteDetails,
    ProgressDetails,
    ReviewDetails,
    StatusDetails,
)

logger = logging.getLogger(__name__)

DeadlineCalculator = Callable[[Deadline], DeadlineCalculation]

# Most urgent first; the first match wins when several deadlines share a day.
URGENCY_PRIORITY = ("overdue", "urgent", "impossible", "approaching", "good")

ACTIVITY_COLOR = "#9CA3AF"
CALENDAR_OPACITY = "40"
SUBTLE_OPACITY = "20"
MAX_ACTIVITY_BARS = 6


@dataclass(frozen=True)
class EnrichedActivity:
    event: ActivityEvent
    calculation: Optional[DeadlineCalculation] = None


@dataclass(frozen=True)
class AgendaItem:
    name: str
    activity_type: ActivityType
    activity: EnrichedActivity
    deadline: Optional[Deadline] = None
    calculation: Optional[DeadlineCalculation] = None
    time_label: Optional[str] = None


@dataclass(frozen=True)
class ActivityBar:
    color: str
    is_deadline: bool


@dataclass(frozen=True)
class DateMarking:
    background_color: str
    text_color: Optional[str] = None
    urgency_level: Optional[str] = None
    bars: tuple[ActivityBar, ...] = ()


def urgency_priority_index(level) -> int:
    value = getattr(level, "value", level)
    try:
        return URGENCY_PRIORITY.index(value)
    except ValueError:
        return len(URGENCY_PRIORITY)


def get_month_date_range(day: date) -> dict[str, str]:
    """First and last calendar day of the month containing ``day``."""

    start, end = month_bounds(day)
    return {"start_date": start.isoformat(), "end_date": end.isoformat()}


def group_activities_by_date(events: Iterable[ActivityEvent], tz: tzinfo) -> dict[str, list[ActivityEvent]]:
    """Bucket events on the local calendar date of their timestamp."""

    grouped: dict[str, list[ActivityEvent]] = defaultdict(list)
    for event in events:
        grouped[local_date(event.timestamp, tz).isoformat()].append(event)
    return {key: grouped[key] for key in sorted(grouped)}


def sort_activities_by_time(activities: Iterable) -> list:
    """Deadline-due items first (by title), then everything else by timestamp.

    Accepts plain ``ActivityEvent``s or ``EnrichedActivity`` wrappers.
    """

    activities = list(activities)
    due = [a for a in activities if _event(a).activity_type == ActivityType.DEADLINE_DUE]
    others = [a for a in activities if _event(a).activity_type != ActivityType.DEADLINE_DUE]

    due.sort(key=lambda a: (_event(a).title.casefold(), _event(a).title))
    others.sort(key=lambda a: to_local(_event(a).timestamp, timezone.utc))
    return due + others


def enrich_deadline_activity(
    event: ActivityEvent, deadlines_by_id: dict[str, Deadline], calculate: DeadlineCalculator
) -> EnrichedActivity:
    if event.activity_type != ActivityType.DEADLINE_DUE:
        return EnrichedActivity(event)
    deadline = deadlines_by_id.get(event.deadline_id)
    if deadline is None:
        logger.debug("Activity references unknown deadline %s", event.deadline_id)
        return EnrichedActivity(event)
    return EnrichedActivity(event, calculate(deadline))


def transform_activities_to_agenda_items(
    events: Iterable[ActivityEvent],
    deadlines: Iterable[Deadline],
    calculate: DeadlineCalculator,
    tz: tzinfo,
) -> dict[str, list[AgendaItem]]:
    deadlines_by_id = {d.id: d for d in deadlines}
    result: dict[str, list[AgendaItem]] = {}

    for day, day_events in group_activities_by_date(events, tz).items():
        enriched = [enrich_deadline_activity(e, deadlines_by_id, calculate) for e in day_events]
        items = []
        for activity in sort_activities_by_time(enriched):
            event = activity.event
            if event.activity_type == ActivityType.DEADLINE_DUE:
                deadline = deadlines_by_id.get(event.deadline_id) if activity.calculation else None
                items.append(AgendaItem(event.title, event.activity_type, activity, deadline, activity.calculation))
            elif event.activity_type == ActivityType.CUSTOM_DATE:
                items.append(
                    AgendaItem(event.title, event.activity_type, activity, deadlines_by_id.get(event.deadline_id))
                )
            else:
                items.append(
                    AgendaItem(
                        event.title,
                        event.activity_type,
                        activity,
                        time_label=format_activity_time(event.timestamp, tz),
                    )
                )
        result[day] = items

    return result


def build_activity_bars(
    calculations: Iterable[DeadlineCalculation], has_other_activity: bool, max_bars: int = MAX_ACTIVITY_BARS
) -> tuple[ActivityBar, ...]:
    """One bar per deadline (most urgent first) plus one gray bar for other activity."""

    ranked = sorted(calculations, key=lambda c: urgency_priority_index(c.urgency_level))
    bars = [ActivityBar(c.urgency_color, True) for c in ranked]
    if has_other_activity:
        bars.append(ActivityBar(ACTIVITY_COLOR, False))
    return tuple(bars[:max_bars])


def calculate_marked_dates(
    events: Iterable[ActivityEvent],
    deadlines: Iterable[Deadline],
    calculate: DeadlineCalculator,
    tz: tzinfo,
    max_bars: int = MAX_ACTIVITY_BARS,
) -> dict[str, DateMarking]:
    """Month-grid markings keyed by ISO date. Dates without events are absent."""

    deadlines_by_id = {d.id: d for d in deadlines}
    marked: dict[str, DateMarking] = {}

    for day, day_events in group_activities_by_date(events, tz).items():
        ordered = sort_activities_by_time(day_events)
        due = [e for e in ordered if e.activity_type == ActivityType.DEADLINE_DUE]
        has_other = len(due) < len(ordered)

        calculations = []
        for event in due:
            deadline = deadlines_by_id.get(event.deadline_id)
            if deadline is None:
                logger.debug("Skipping marking for unknown deadline %s", event.deadline_id)
                continue
            calculations.append(calculate(deadline))

        bars = build_activity_bars(calculations, has_other, max_bars)
        if calculations:
            primary = min(calculations, key=lambda c: urgency_priority_index(c.urgency_level))
            marked[day] = DateMarking(
                background_color=primary.urgency_color + CALENDAR_OPACITY,
                text_color=primary.urgency_color,
                urgency_level=getattr(primary.urgency_level, "value", primary.urgency_level),
                bars=bars,
            )
        else:
            marked[day] = DateMarking(background_color=ACTIVITY_COLOR + SUBTLE_OPACITY, bars=bars)

    return marked


def format_activity_time(timestamp: datetime, tz: tzinfo) -> str:
    """Local wall-clock time such as ``"2:30 PM"``."""

    local = to_local(timestamp, tz)
    hour = local.hour % 12 or 12
    return f"{hour}:{local.minute:02d} {'AM' if local.hour < 12 else 'PM'}"


def describe_activity(event: ActivityEvent) -> str:
    """Short one-line description of what happened."""

    details = event.details

    if isinstance(details, ProgressDetails):
        if details.current_progress is None:
            return "Progress updated"
        previous = details.previous_progress or 0
        change = details.current_progress - previous
        if details.format == BookFormat.AUDIO:
            return (
                f"Read {format_audiobook_time(change)} "
                f"({format_audiobook_time(previous)} → {format_audiobook_time(details.current_progress)})"
            )
        return f"Read {_num(change)} pages ({_num(previous)} → {_num(details.current_progress)})"

    if isinstance(details, NoteDetails):
        if not details.note_text:
            return "Note added"
        text = details.note_text
        return f'"{text[:50] + "..." if len(text) > 50 else text}"'

    if isinstance(details, StatusDetails):
        if details.status and details.previous_status:
            return f"{_status_label(details.previous_status)} → {_status_label(details.status)}"
        if details.status:
            return f"Status changed to {_status_label(details.status)}"
        return "Status changed"

    if isinstance(details, ReviewDetails):
        return f"Posted to {details.platform_name}" if details.platform_name else "Review posted"

    if isinstance(details, DeadlineCreatedDetails):
        return "Deadline added"

    if isinstance(details, CustomDateDetails):
        return details.name or "Custom date"

    if event.activity_type == ActivityType.REVIEW_DUE:
        return "Review due"
    return "Due today"


def _event(activity) -> ActivityEvent:
    return activity.event if isinstance(activity, EnrichedActivity) else activity


def _status_label(status: str) -> str:
    return str(getattr(status, "value", status)).replace("_", " ").title()


def _num(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:g}"


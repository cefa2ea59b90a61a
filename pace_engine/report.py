"""Compose every engine step over one snapshot into a serializable report."""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from datetime import date, datetime, tzinfo
from enum import Enum
from functools import partial
from typing import Any, Optional

from pace_engine.activity_calendar import (
    calculate_marked_dates,
    describe_activity,
    get_month_date_range,
    transform_activities_to_agenda_items,
)
from pace_engine.config import EngineConfig
from pace_engine.dates import local_date
from pace_engine.formatting import format_progress_display, format_units_per_day_for_display
from pace_engine.ledger import is_finished, last_progress_date, latest_status, progress_for_today
from pace_engine.ranking import PaceRankingPolicy, pace_based_status
from pace_engine.sampling import calculate_user_listening_pace, calculate_user_pace
from pace_engine.schema import Snapshot
from pace_engine.trend import calculate_daily_cumulative_progress, transform_to_daily_chart_data
from pace_engine.urgency import calculate_deadline


def to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    return value


def build_report(
    snapshot: Snapshot,
    now: datetime,
    config: Optional[EngineConfig] = None,
    tz: Optional[tzinfo] = None,
    policy: PaceRankingPolicy = pace_based_status,
) -> dict[str, Any]:
    """Run the full engine for ``snapshot`` as of ``now``."""

    config = config or EngineConfig()
    tz = tz or config.tzinfo()
    deadlines = list(snapshot.deadlines)

    reading = calculate_user_pace(deadlines, tz, config.lookback_days)
    listening = calculate_user_listening_pace(deadlines, tz, config.lookback_days)
    calculate = partial(calculate_deadline, reading_sample=reading, listening_sample=listening, now=now, tz=tz, policy=policy)

    cards = []
    for deadline in deadlines:
        completed = is_finished(deadline)
        end_date = last_progress_date(deadline, tz) if completed else None
        points = calculate_daily_cumulative_progress(deadline, now, tz, config.trend_days, end_date)
        calculation = calculate(deadline)
        cards.append(
            {
                "id": deadline.id,
                "title": deadline.title,
                "status": latest_status(deadline),
                "progress_today": progress_for_today(deadline, now, tz),
                "progress_display": format_progress_display(deadline.format, calculation.current_progress),
                "daily_target_display": format_units_per_day_for_display(
                    calculation.units_per_day, deadline.format, calculation.remaining, calculation.days_left
                ),
                "calculation": calculation,
                "trend": points,
                "chart": transform_to_daily_chart_data(points, points, deadline.format, completed),
            }
        )

    agenda = transform_activities_to_agenda_items(snapshot.activities, deadlines, calculate, tz)
    timeline = {
        day: [
            {
                "name": item.name,
                "activity_type": item.activity_type,
                "time": item.time_label,
                "description": describe_activity(item.activity.event),
                "urgency_level": item.calculation.urgency_level if item.calculation else None,
            }
            for item in items
        ]
        for day, items in agenda.items()
    }

    report = {
        "generated_at": now,
        "timezone": str(tz),
        "month": get_month_date_range(local_date(now, tz)),
        "reading_pace": reading,
        "listening_pace": listening,
        "deadlines": cards,
        "agenda": timeline,
        "marked_dates": calculate_marked_dates(
            snapshot.activities, deadlines, calculate, tz, config.max_activity_bars
        ),
    }
    return to_jsonable(report)

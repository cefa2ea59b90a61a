"""Observed reading and listening pace from recent progress history."""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Iterable, Optional

from pace_engine.dates import local_date, to_local
from pace_engine.schema import BookFormat, Deadline, PaceSample

DEFAULT_LOOKBACK_DAYS = 21

FALLBACK_SAMPLE = PaceSample(average_pace=0.0, days_count=0, is_reliable=False, calculation_method="default_fallback")


def _utc(timestamp: datetime) -> datetime:
    return to_local(timestamp, timezone.utc)


def calculate_cutoff(deadlines: Iterable[Deadline], lookback_days: int = DEFAULT_LOOKBACK_DAYS) -> Optional[datetime]:
    """Most recent progress timestamp minus the lookback window."""

    latest = max((_utc(p.created_at) for d in deadlines for p in d.progress), default=None)
    if latest is None:
        return None
    return latest - timedelta(days=lookback_days)


def accumulate_daily_progress(deadline: Deadline, cutoff: datetime, tz: tzinfo, daily: dict[str, float]) -> None:
    """Add the deadline's per-day progress deltas on or after ``cutoff`` into ``daily``."""

    entries = sorted((p for p in deadline.progress if not p.ignore_in_calcs), key=lambda p: _utc(p.created_at))
    if not entries:
        return

    # An entry recorded together with the deadline is the starting point, not reading.
    baseline = 0.0
    if _utc(entries[0].created_at) == _utc(deadline.created_at):
        baseline = entries[0].current_progress
        entries = entries[1:]
    if not entries:
        return

    first = entries[0]
    if _utc(first.created_at) >= cutoff:
        amount = first.current_progress - baseline
        if amount > 0:
            key = local_date(first.created_at, tz).isoformat()
            daily[key] += amount

    for previous, current in zip(entries, entries[1:]):
        if _utc(current.created_at) < cutoff:
            continue
        key = local_date(current.created_at, tz).isoformat()
        daily[key] += current.current_progress - previous.current_progress


def recent_activity_days(
    deadlines: Iterable[Deadline], tz: tzinfo, lookback_days: int = DEFAULT_LOOKBACK_DAYS
) -> list[tuple[str, float]]:
    deadlines = list(deadlines)
    cutoff = calculate_cutoff(deadlines, lookback_days)
    if cutoff is None:
        return []

    daily: dict[str, float] = defaultdict(float)
    for deadline in deadlines:
        accumulate_daily_progress(deadline, cutoff, tz, daily)
    return sorted((day, round(amount, 2)) for day, amount in daily.items())


def _sample(days: list[tuple[str, float]]) -> PaceSample:
    if not days:
        return FALLBACK_SAMPLE

    total = sum(amount for _, amount in days)
    first = datetime.fromisoformat(days[0][0])
    last = datetime.fromisoformat(days[-1][0])
    span = max(1, (last - first).days + 1)
    return PaceSample(
        average_pace=total / span,
        days_count=len(days),
        is_reliable=True,
        calculation_method="recent_data",
    )


def calculate_user_pace(
    deadlines: Iterable[Deadline], tz: tzinfo, lookback_days: int = DEFAULT_LOOKBACK_DAYS
) -> PaceSample:
    """Reading pace in pages/day from physical and eBook deadlines only."""

    reading = [d for d in deadlines if d.format in (BookFormat.PHYSICAL, BookFormat.EBOOK)]
    return _sample(recent_activity_days(reading, tz, lookback_days))


def calculate_user_listening_pace(
    deadlines: Iterable[Deadline], tz: tzinfo, lookback_days: int = DEFAULT_LOOKBACK_DAYS
) -> PaceSample:
    """Listening pace in minutes/day from audio deadlines only."""

    listening = [d for d in deadlines if d.format == BookFormat.AUDIO]
    return _sample(recent_activity_days(listening, tz, lookback_days))

"""Progress ledger reading: current, as-of-date and today's progress."""

from __future__ import annotations

import logging
from datetime import date, datetime, timezone, tzinfo
from typing import Iterable, Optional

from pace_engine.dates import local_date, start_of_day, to_local
from pace_engine.schema import Deadline, DeadlineStatus, ProgressEntry

logger = logging.getLogger(__name__)


def _as_utc(timestamp: datetime) -> datetime:
    return to_local(timestamp, timezone.utc)


class ProgressLedger:
    """Read-only view over a deadline's progress log.

    ``latest_recorded`` answers "what is the value now" (last entry wins, even
    when it is a downward correction). ``cumulative_as_of`` answers "how far
    had the reader got by a given day" (maximum of surviving entries).
    """

    def __init__(self, entries: Iterable[ProgressEntry]):
        # Stable sort keeps log order for entries sharing a timestamp.
        self._entries = sorted(entries, key=lambda e: _as_utc(e.created_at))

    def __len__(self) -> int:
        return len(self._entries)

    def latest_recorded(self) -> float:
        if not self._entries:
            return 0
        return self._entries[-1].current_progress

    def cumulative_at(self, instant: datetime) -> float:
        """Maximum value among entries recorded at or before ``instant``."""

        cutoff = _as_utc(instant)
        return max((e.current_progress for e in self._entries if _as_utc(e.created_at) <= cutoff), default=0)

    def cumulative_as_of(self, day: date, tz: tzinfo) -> float:
        """Maximum non-ignored value among entries whose local date is on or before ``day``."""

        survivors = [
            e.current_progress
            for e in self._entries
            if not e.ignore_in_calcs and local_date(e.created_at, tz) <= day
        ]
        return max(survivors, default=0)

    def has_activity_on(self, day: date, tz: tzinfo) -> bool:
        return any(not e.ignore_in_calcs and local_date(e.created_at, tz) == day for e in self._entries)


def current_progress(deadline: Deadline) -> float:
    """Value of the chronologically last progress entry."""

    return ProgressLedger(deadline.progress).latest_recorded()


def progress_as_of_start_of_day(deadline: Deadline, now: datetime, tz: tzinfo) -> float:
    """Highest value recorded at or before local midnight today; 0 if none."""

    return ProgressLedger(deadline.progress).cumulative_at(start_of_day(now, tz))


def progress_for_today(deadline: Deadline, now: datetime, tz: tzinfo) -> float:
    """Progress made since local midnight, floored at zero."""

    current = current_progress(deadline)
    at_start = progress_as_of_start_of_day(deadline, now, tz)
    if current < at_start:
        logger.debug("Deadline %s: downward correction %s -> %s absorbed", deadline.id, at_start, current)
    return max(0, current - at_start)


def progress_as_of_date(deadline: Deadline, day: date, tz: tzinfo) -> float:
    return ProgressLedger(deadline.progress).cumulative_as_of(day, tz)


def has_daily_activity(deadline: Deadline, day: date, tz: tzinfo) -> bool:
    return ProgressLedger(deadline.progress).has_activity_on(day, tz)


def reading_start_date(deadline: Deadline) -> Optional[datetime]:
    """Earliest timestamp at which the deadline moved to ``reading``."""

    readings = [s.created_at for s in deadline.status if s.status == DeadlineStatus.READING]
    if not readings:
        return None
    return min(readings, key=_as_utc)


def latest_status(deadline: Deadline) -> DeadlineStatus:
    if not deadline.status:
        return DeadlineStatus.READING
    ordered = sorted(deadline.status, key=lambda s: _as_utc(s.created_at))
    return ordered[-1].status


TERMINAL_STATUSES = {DeadlineStatus.COMPLETE, DeadlineStatus.DID_NOT_FINISH, DeadlineStatus.TO_REVIEW}


def is_finished(deadline: Deadline) -> bool:
    """Whether reading has ended: completed, abandoned, or waiting for a review."""

    return latest_status(deadline) in TERMINAL_STATUSES


def last_progress_date(deadline: Deadline, tz: tzinfo) -> Optional[date]:
    """Local date of the most recent non-ignored progress entry."""

    counted = [e.created_at for e in deadline.progress if not e.ignore_in_calcs]
    if not counted:
        return None
    return local_date(max(counted, key=_as_utc), tz)

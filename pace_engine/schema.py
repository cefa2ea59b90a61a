"""Core data schema for deadlines, progress logs and calendar activity."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union


class BookFormat(str, Enum):
    PHYSICAL = "physical"
    EBOOK = "eBook"
    AUDIO = "audio"


class DeadlineStatus(str, Enum):
    PENDING = "pending"
    READING = "reading"
    PAUSED = "paused"
    TO_REVIEW = "to_review"
    COMPLETE = "complete"
    DID_NOT_FINISH = "did_not_finish"


class ActivityType(str, Enum):
    DEADLINE_DUE = "deadline_due"
    PROGRESS = "progress"
    STATUS = "status"
    NOTE = "note"
    REVIEW = "review"
    REVIEW_DUE = "review_due"
    DEADLINE_CREATED = "deadline_created"
    CUSTOM_DATE = "custom_date"


class PaceLevel(str, Enum):
    """Level reported by a pace-ranking policy.

    ``UNKNOWN`` stands in for any level a newer policy may emit.
    """

    GOOD = "good"
    APPROACHING = "approaching"
    URGENT = "urgent"
    OVERDUE = "overdue"
    IMPOSSIBLE = "impossible"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str) -> "PaceLevel":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class PaceColor(str, Enum):
    GREEN = "green"
    ORANGE = "orange"
    RED = "red"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: str) -> "PaceColor":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


class UrgencyLevel(str, Enum):
    OVERDUE = "overdue"
    URGENT = "urgent"
    GOOD = "good"
    APPROACHING = "approaching"
    IMPOSSIBLE = "impossible"


@dataclass(frozen=True)
class ProgressEntry:
    """One cumulative progress observation. Values are not guaranteed monotonic."""

    created_at: datetime
    current_progress: float
    ignore_in_calcs: bool = False
    time_spent_minutes: Optional[float] = None


@dataclass(frozen=True)
class StatusEntry:
    status: DeadlineStatus
    created_at: datetime


@dataclass(frozen=True)
class Deadline:
    """Snapshot of a reading/listening goal with its full history."""

    id: str
    title: str
    deadline_date: date
    total_quantity: float
    format: BookFormat
    created_at: datetime
    status: tuple[StatusEntry, ...] = ()
    progress: tuple[ProgressEntry, ...] = ()


# Activity details: one variant per ActivityType.


@dataclass(frozen=True)
class DeadlineDueDetails:
    pass


@dataclass(frozen=True)
class ProgressDetails:
    current_progress: Optional[float] = None
    previous_progress: Optional[float] = None
    format: BookFormat = BookFormat.PHYSICAL


@dataclass(frozen=True)
class StatusDetails:
    status: Optional[str] = None
    previous_status: Optional[str] = None


@dataclass(frozen=True)
class NoteDetails:
    note_text: Optional[str] = None


@dataclass(frozen=True)
class ReviewDetails:
    platform_name: Optional[str] = None


@dataclass(frozen=True)
class ReviewDueDetails:
    pass


@dataclass(frozen=True)
class DeadlineCreatedDetails:
    total_quantity: Optional[float] = None
    format: Optional[BookFormat] = None


@dataclass(frozen=True)
class CustomDateDetails:
    name: Optional[str] = None


ActivityDetails = Union[
    DeadlineDueDetails,
    ProgressDetails,
    StatusDetails,
    NoteDetails,
    ReviewDetails,
    ReviewDueDetails,
    DeadlineCreatedDetails,
    CustomDateDetails,
]

DETAILS_BY_TYPE: dict[ActivityType, type] = {
    ActivityType.DEADLINE_DUE: DeadlineDueDetails,
    ActivityType.PROGRESS: ProgressDetails,
    ActivityType.STATUS: StatusDetails,
    ActivityType.NOTE: NoteDetails,
    ActivityType.REVIEW: ReviewDetails,
    ActivityType.REVIEW_DUE: ReviewDueDetails,
    ActivityType.DEADLINE_CREATED: DeadlineCreatedDetails,
    ActivityType.CUSTOM_DATE: CustomDateDetails,
}


@dataclass(frozen=True)
class ActivityEvent:
    """A calendar-relevant occurrence tied to a deadline."""

    activity_date: str
    activity_type: ActivityType
    deadline_id: str
    title: str
    timestamp: datetime
    details: ActivityDetails = field(default_factory=DeadlineDueDetails)


@dataclass(frozen=True)
class PaceSample:
    """Historical observed pace, computed separately for reading and listening."""

    average_pace: float
    days_count: int
    is_reliable: bool
    calculation_method: str  # "recent_data" or "default_fallback"


@dataclass(frozen=True)
class PaceStatus:
    color: PaceColor
    level: PaceLevel
    message: str


@dataclass(frozen=True)
class DeadlineCalculation:
    """Per-deadline result used by list cards and calendar enrichment."""

    current_progress: float
    total_quantity: float
    remaining: float
    progress_percentage: int
    days_left: int
    units_per_day: float
    urgency_level: UrgencyLevel
    urgency_color: str
    status_message: str
    pace_estimate: str
    reading_estimate: str
    unit: str
    user_pace: float
    required_pace: float
    pace_display: str
    required_pace_display: str
    pace_status: PaceColor
    pace_message: str


@dataclass(frozen=True)
class Snapshot:
    deadlines: tuple[Deadline, ...] = ()
    activities: tuple[ActivityEvent, ...] = ()

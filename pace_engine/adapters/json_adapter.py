"""JSON adapter for deadline snapshots."""

from __future__ import annotations

import json
from datetime import date, datetime

from pace_engine.schema import (
    DETAILS_BY_TYPE,
    ActivityEvent,
    ActivityType,
    BookFormat,
    CustomDateDetails,
    Deadline,
    DeadlineCreatedDetails,
    DeadlineStatus,
    NoteDetails,
    ProgressDetails,
    ProgressEntry,
    ReviewDetails,
    Snapshot,
    StatusDetails,
    StatusEntry,
)

_REQUIRED_DEADLINE_FIELDS = {"id", "deadline_date", "total_quantity", "format", "created_at"}
_REQUIRED_ACTIVITY_FIELDS = {"activity_type", "deadline_id", "activity_timestamp"}


def _timestamp(value, where: str) -> datetime:
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"{where}: malformed timestamp") from exc


def _enum(enum_cls, value, where: str, field_name: str):
    try:
        return enum_cls(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"{where}: invalid {field_name} '{value}'") from exc


def _number(value, where: str, field_name: str) -> float:
    try:
        return float(value)
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"{where}: invalid {field_name}") from exc


def _optional_number(value, where: str, field_name: str):
    if value is None:
        return None
    return _number(value, where, field_name)


def _parse_deadline(item: dict, index: int) -> Deadline:
    where = f"Deadline {index}"
    missing = sorted(field for field in _REQUIRED_DEADLINE_FIELDS if item.get(field) in (None, ""))
    if missing:
        raise ValueError(f"{where}: missing required fields {missing}")

    try:
        deadline_date = date.fromisoformat(str(item["deadline_date"])[:10])
    except ValueError as exc:
        raise ValueError(f"{where}: malformed deadline_date") from exc

    status = tuple(
        StatusEntry(
            status=_enum(DeadlineStatus, entry.get("status"), where, "status"),
            created_at=_timestamp(entry.get("created_at"), where),
        )
        for entry in item.get("status") or []
    )
    progress = tuple(
        ProgressEntry(
            created_at=_timestamp(entry.get("created_at"), where),
            current_progress=_number(entry.get("current_progress"), where, "current_progress"),
            ignore_in_calcs=bool(entry.get("ignore_in_calcs", False)),
            time_spent_minutes=_optional_number(entry.get("time_spent_minutes"), where, "time_spent_minutes"),
        )
        for entry in item.get("progress") or []
    )

    return Deadline(
        id=str(item["id"]).strip(),
        title=str(item.get("title") or item.get("book_title") or "").strip(),
        deadline_date=deadline_date,
        total_quantity=_number(item["total_quantity"], where, "total_quantity"),
        format=_enum(BookFormat, item["format"], where, "format"),
        created_at=_timestamp(item["created_at"], where),
        status=status,
        progress=progress,
    )


def _parse_details(activity_type: ActivityType, metadata: dict, where: str):
    if activity_type == ActivityType.PROGRESS:
        book_format = metadata.get("format")
        return ProgressDetails(
            current_progress=_optional_number(metadata.get("current_progress"), where, "current_progress"),
            previous_progress=_optional_number(metadata.get("previous_progress"), where, "previous_progress"),
            format=_enum(BookFormat, book_format, where, "format") if book_format else BookFormat.PHYSICAL,
        )
    if activity_type == ActivityType.STATUS:
        return StatusDetails(status=metadata.get("status"), previous_status=metadata.get("previous_status"))
    if activity_type == ActivityType.NOTE:
        return NoteDetails(note_text=metadata.get("note_text"))
    if activity_type == ActivityType.REVIEW:
        return ReviewDetails(platform_name=metadata.get("platform_name"))
    if activity_type == ActivityType.DEADLINE_CREATED:
        book_format = metadata.get("format")
        return DeadlineCreatedDetails(
            total_quantity=_optional_number(metadata.get("total_quantity"), where, "total_quantity"),
            format=_enum(BookFormat, book_format, where, "format") if book_format else None,
        )
    if activity_type == ActivityType.CUSTOM_DATE:
        return CustomDateDetails(name=metadata.get("name"))
    return DETAILS_BY_TYPE[activity_type]()


def _parse_activity(item: dict, index: int) -> ActivityEvent:
    where = f"Activity {index}"
    missing = sorted(field for field in _REQUIRED_ACTIVITY_FIELDS if not item.get(field))
    if missing:
        raise ValueError(f"{where}: missing required fields {missing}")

    activity_type = _enum(ActivityType, item["activity_type"], where, "activity_type")
    timestamp = _timestamp(item["activity_timestamp"], where)
    metadata = item.get("metadata") or {}
    if not isinstance(metadata, dict):
        raise ValueError(f"{where}: metadata must be an object")

    return ActivityEvent(
        activity_date=str(item.get("activity_date") or timestamp.date().isoformat()),
        activity_type=activity_type,
        deadline_id=str(item["deadline_id"]).strip(),
        title=str(item.get("title") or item.get("book_title") or "").strip(),
        timestamp=timestamp,
        details=_parse_details(activity_type, metadata, where),
    )


def parse_payload(payload) -> Snapshot:
    """Build a snapshot from already-decoded JSON."""

    if not isinstance(payload, dict):
        raise ValueError("JSON payload must be an object with 'deadlines' and 'activities'")

    deadlines = payload.get("deadlines") or []
    activities = payload.get("activities") or []
    if not isinstance(deadlines, list) or not isinstance(activities, list):
        raise ValueError("'deadlines' and 'activities' must be lists")

    return Snapshot(
        deadlines=tuple(_parse_deadline(item, i) for i, item in enumerate(deadlines, start=1)),
        activities=tuple(_parse_activity(item, i) for i, item in enumerate(activities, start=1)),
    )


def parse(file_path: str) -> Snapshot:
    """Parse a JSON snapshot file."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)
    return parse_payload(payload)

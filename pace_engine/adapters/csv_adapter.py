"""CSV adapter for progress logs."""

from __future__ import annotations

import csv
from collections import defaultdict
from datetime import datetime

from pace_engine.schema import ProgressEntry

_REQUIRED_FIELDS = {"deadline_id", "timestamp", "current_progress"}
_TRUE_VALUES = {"1", "true", "yes", "y"}
_FALSE_VALUES = {"", "0", "false", "no", "n"}


def _parse_row(row: dict, row_number: int) -> tuple[str, ProgressEntry]:
    missing = sorted(field for field in _REQUIRED_FIELDS if not row.get(field))
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    try:
        timestamp = datetime.fromisoformat(row["timestamp"].strip().replace("Z", "+00:00"))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Row {row_number}: malformed timestamp") from exc

    try:
        current_progress = float(row["current_progress"])
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Row {row_number}: invalid current_progress") from exc

    ignore_raw = (row.get("ignore_in_calcs") or "").strip().lower()
    if ignore_raw not in _TRUE_VALUES | _FALSE_VALUES:
        raise ValueError(f"Row {row_number}: invalid ignore_in_calcs '{ignore_raw}'")

    spent_raw = row.get("time_spent_minutes")
    time_spent = None
    if spent_raw not in (None, ""):
        try:
            time_spent = float(spent_raw)
        except Exception as exc:  # noqa: BLE001
            raise ValueError(f"Row {row_number}: invalid time_spent_minutes") from exc

    entry = ProgressEntry(
        created_at=timestamp,
        current_progress=current_progress,
        ignore_in_calcs=ignore_raw in _TRUE_VALUES,
        time_spent_minutes=time_spent,
    )
    return row["deadline_id"].strip(), entry


def parse(file_path: str) -> dict[str, tuple[ProgressEntry, ...]]:
    """Parse a progress-log CSV into entries grouped by deadline id, in file order."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return {}

        grouped: dict[str, list[ProgressEntry]] = defaultdict(list)
        for row_number, row in enumerate(reader, start=2):
            deadline_id, entry = _parse_row(row, row_number)
            grouped[deadline_id].append(entry)
        return {deadline_id: tuple(entries) for deadline_id, entries in grouped.items()}

"""Run the pace engine over a JSON snapshot and print the report."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from pace_engine.adapters import csv_adapter, json_adapter
from pace_engine.config import load_config
from pace_engine.report import build_report
from pace_engine.schema import Snapshot


def _load_snapshot(path: Path, progress_path: Path | None) -> Snapshot:
    if path.suffix.lower() != ".json":
        raise ValueError("Unsupported input format, expected .json")
    snapshot = json_adapter.parse(str(path))
    if progress_path is None:
        return snapshot

    progress = csv_adapter.parse(str(progress_path))
    deadlines = tuple(
        replace(d, progress=d.progress + progress[d.id]) if d.id in progress else d
        for d in snapshot.deadlines
    )
    return Snapshot(deadlines=deadlines, activities=snapshot.activities)


def _parse_now(value: str | None) -> datetime:
    if value is None:
        return datetime.now(timezone.utc)
    now = datetime.fromisoformat(value.replace("Z", "+00:00"))
    return now if now.tzinfo else now.replace(tzinfo=timezone.utc)


def main() -> None:
    parser = argparse.ArgumentParser(description="Run pace-engine report")
    parser.add_argument("--data", required=True, help="Path to JSON snapshot file")
    parser.add_argument("--progress", help="Optional CSV progress log merged into the snapshot")
    parser.add_argument("--now", help="ISO timestamp to evaluate at (defaults to current time)")
    parser.add_argument("--tz", help="IANA timezone name (overrides PACE_ENGINE_TIMEZONE)")
    parser.add_argument("--env", help="Path to a .env file")
    parser.add_argument("--verbose", action="store_true", help="Log engine fallbacks")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    config = load_config(Path(args.env) if args.env else None)
    if args.tz:
        config.timezone = args.tz

    snapshot = _load_snapshot(Path(args.data), Path(args.progress) if args.progress else None)
    report = build_report(snapshot, now=_parse_now(args.now), config=config, tz=config.tzinfo())

    print(json.dumps(report, indent=2))

    outputs_dir = Path("outputs")
    outputs_dir.mkdir(parents=True, exist_ok=True)
    out_path = outputs_dir / "pace_report.json"
    out_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    print(f"Saved pace report to {out_path}")


if __name__ == "__main__":
    main()

"""Demo script for pace-engine."""

import sys
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from pace_engine.adapters.json_adapter import parse
from pace_engine.config import EngineConfig
from pace_engine.report import build_report


def main() -> None:
    snapshot = parse("examples/sample_snapshot.json")
    config = EngineConfig(timezone="America/New_York")
    now = datetime(2025, 1, 15, 9, 0, tzinfo=ZoneInfo(config.timezone))
    report = build_report(snapshot, now=now, config=config)

    print("Reading pace:", report["reading_pace"])
    print("Listening pace:", report["listening_pace"])
    for card in report["deadlines"]:
        calc = card["calculation"]
        print(f"{card['title']}: {calc['urgency_level']} ({calc['status_message']}), trend {card['chart']['status']['display_text']}")
    print("Marked dates:", sorted(report["marked_dates"]))


if __name__ == "__main__":
    main()

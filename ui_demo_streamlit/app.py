"""Streamlit demo UI for pace-engine."""

from __future__ import annotations

import json
from datetime import datetime, time
from typing import Any

from pace_engine.adapters import json_adapter
from pace_engine.config import EngineConfig
from pace_engine.report import build_report
from pace_engine.schema import Snapshot

SAMPLE_PATH = "examples/sample_snapshot.json"


def _parse_uploaded(uploaded_file) -> Snapshot:
    try:
        payload = json.loads(uploaded_file.getvalue().decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ValueError("Uploaded file is not valid JSON") from exc
    return json_adapter.parse_payload(payload)


def _build_summary(report: dict[str, Any]) -> dict[str, Any]:
    cards = report["deadlines"]
    levels = [card["calculation"]["urgency_level"] for card in cards]
    return {
        "total_deadlines": len(cards),
        "on_track": levels.count("good"),
        "at_risk": sum(1 for level in levels if level in ("approaching", "urgent")),
        "critical": sum(1 for level in levels if level in ("overdue", "impossible")),
        "marked_dates": len(report["marked_dates"]),
    }


def run_engine(snapshot: Snapshot, now: datetime, config: EngineConfig) -> dict[str, Any]:
    """Run the engine and attach a UI-friendly summary."""

    report = build_report(snapshot, now=now, config=config)
    report["summary"] = _build_summary(report)
    return report


def main() -> None:
    import streamlit as st

    st.set_page_config(page_title="Pace Engine Demo", layout="wide")
    st.title("Pace Engine — Streamlit Demo")

    with st.sidebar:
        st.header("Controls")
        uploaded = st.file_uploader("Upload snapshot", type=["json"])
        use_demo = st.checkbox("Load demo snapshot", value=True)
        timezone_name = st.text_input("Timezone", value="America/New_York")
        as_of_date = st.date_input("Evaluate as of", value=datetime(2025, 1, 15).date())
        as_of_time = st.time_input("Time of day", value=time(9, 0))
        trend_days = st.slider("Trend window (days)", min_value=3, max_value=30, value=7)
        run = st.button("Run engine", type="primary")

    if not run:
        st.info("Configure inputs in the sidebar and click **Run engine**.")
        return

    try:
        config = EngineConfig(timezone=timezone_name, trend_days=int(trend_days))
        now = datetime.combine(as_of_date, as_of_time, tzinfo=config.tzinfo())

        if use_demo:
            snapshot = json_adapter.parse(SAMPLE_PATH)
            data_source = f"demo snapshot ({SAMPLE_PATH})"
        elif uploaded is not None:
            snapshot = _parse_uploaded(uploaded)
            data_source = f"uploaded file ({uploaded.name})"
        else:
            st.error("Please upload a JSON snapshot or enable 'Load demo snapshot'.")
            return

        if not snapshot.deadlines:
            st.error("No deadlines were found in the selected input.")
            return

        result = run_engine(snapshot, now, config)

        st.success(f"Loaded {len(snapshot.deadlines)} deadlines from {data_source}.")

        st.subheader("A) Summary")
        summary = result["summary"]
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Deadlines", summary["total_deadlines"])
        c2.metric("On track", summary["on_track"])
        c3.metric("At risk", summary["at_risk"])
        c4.metric("Critical", summary["critical"])

        r1, r2 = st.columns(2)
        r1.write("**Reading pace**")
        r1.json(result["reading_pace"])
        r2.write("**Listening pace**")
        r2.json(result["listening_pace"])

        st.subheader("B) Deadlines")
        for card in result["deadlines"]:
            calc = card["calculation"]
            st.markdown(
                f"<span style='color:{calc['urgency_color']}'>●</span> **{card['title']}** "
                f"· {calc['urgency_level']} · {calc['status_message']}",
                unsafe_allow_html=True,
            )
            st.caption(
                f"{calc['current_progress']:g}/{calc['total_quantity']:g} {calc['unit']} "
                f"({calc['progress_percentage']}%) · {calc['days_left']} days left · "
                f"today +{card['progress_today']:g} · {calc['pace_estimate'] or 'done'}"
            )

            chart = card["chart"]
            if chart["actual_line_data"]:
                rows = [
                    {"day": actual["label"], "actual": actual["value"], "required": required["value"]}
                    for actual, required in zip(chart["actual_line_data"], chart["required_line_data"])
                ]
                st.line_chart(rows, x="day", y=["required", "actual"])
            st.write(chart["status"]["display_text"])

        st.subheader("C) Calendar")
        st.write(f"Month: {result['month']['start_date']} → {result['month']['end_date']}")
        st.table(
            [
                {
                    "date": day,
                    "background": marking["background_color"],
                    "urgency": marking["urgency_level"],
                    "bars": len(marking["bars"]),
                }
                for day, marking in result["marked_dates"].items()
            ]
        )

        st.subheader("D) Agenda")
        for day, items in result["agenda"].items():
            st.write(f"**{day}**")
            for item in items:
                st.write(f"- {item['time'] or 'All day'} · {item['name']} · {item['description']}")

    except ValueError as exc:
        st.error(f"Input error: {exc}")
    except Exception:
        st.error("Something went wrong while running the demo. Please verify the input format.")


if __name__ == "__main__":
    main()

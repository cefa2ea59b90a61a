from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from pace_engine.activity_calendar import (
    ACTIVITY_COLOR,
    EnrichedActivity,
    build_activity_bars,
    calculate_marked_dates,
    describe_activity,
    enrich_deadline_activity,
    format_activity_time,
    get_month_date_range,
    group_activities_by_date,
    sort_activities_by_time,
    transform_activities_to_agenda_items,
)
from pace_engine.schema import (
    ActivityEvent,
    ActivityType,
    BookFormat,
    Deadline,
    DeadlineCalculation,
    NoteDetails,
    PaceColor,
    ProgressDetails,
    StatusDetails,
    UrgencyLevel,
)

UTC = timezone.utc

URGENT_HEX = "#c8696e"
GOOD_HEX = "#7a5a8c"


def ts(value: str) -> datetime:
    return datetime.fromisoformat(value).replace(tzinfo=UTC)


def make_event(activity_type, title, when, deadline_id="d1", details=None):
    kwargs = {} if details is None else {"details": details}
    return ActivityEvent(
        activity_date=when[:10],
        activity_type=activity_type,
        deadline_id=deadline_id,
        title=title,
        timestamp=ts(when),
        **kwargs,
    )


def make_deadline(deadline_id, title="Book"):
    return Deadline(
        id=deadline_id,
        title=title,
        deadline_date=date(2025, 1, 20),
        total_quantity=300,
        format=BookFormat.PHYSICAL,
        created_at=ts("2025-01-01T00:00:00"),
    )


def make_calc(level, color):
    return DeadlineCalculation(
        current_progress=100,
        total_quantity=300,
        remaining=200,
        progress_percentage=33,
        days_left=5,
        units_per_day=40,
        urgency_level=level,
        urgency_color=color,
        status_message="",
        pace_estimate="40 pages/day",
        reading_estimate="About 5 hours of reading time",
        unit="pages",
        user_pace=20,
        required_pace=40,
        pace_display="20 pages/day",
        required_pace_display="40 pages/day",
        pace_status=PaceColor.RED,
        pace_message="",
    )


def calculator(levels):
    calls = []

    def calculate(deadline):
        calls.append(deadline.id)
        return levels[deadline.id]

    calculate.calls = calls
    return calculate


def test_sort_puts_deadlines_first_then_chronological():
    events = [
        make_event(ActivityType.NOTE, "Note", "2025-01-15T14:00:00"),
        make_event(ActivityType.DEADLINE_DUE, "Zebra", "2025-01-15T12:00:00"),
        make_event(ActivityType.PROGRESS, "Progress", "2025-01-15T10:00:00"),
        make_event(ActivityType.DEADLINE_DUE, "Apple", "2025-01-15T12:00:00"),
    ]
    ordered = sort_activities_by_time(events)
    assert [e.title for e in ordered] == ["Apple", "Zebra", "Progress", "Note"]


def test_sort_is_independent_of_input_order():
    events = [
        make_event(ActivityType.DEADLINE_DUE, "Zebra", "2025-01-15T12:00:00"),
        make_event(ActivityType.DEADLINE_DUE, "Apple", "2025-01-15T12:00:00"),
        make_event(ActivityType.NOTE, "Note", "2025-01-15T14:00:00"),
        make_event(ActivityType.PROGRESS, "Progress", "2025-01-15T10:00:00"),
    ]
    assert sort_activities_by_time(events) == sort_activities_by_time(list(reversed(events)))


def test_sort_accepts_enriched_activities():
    events = [
        EnrichedActivity(make_event(ActivityType.NOTE, "Note", "2025-01-15T14:00:00")),
        EnrichedActivity(make_event(ActivityType.DEADLINE_DUE, "Apple", "2025-01-15T12:00:00")),
    ]
    assert [a.event.title for a in sort_activities_by_time(events)] == ["Apple", "Note"]


def test_group_uses_local_date():
    event = make_event(ActivityType.NOTE, "Late note", "2025-01-16T02:00:00")
    assert list(group_activities_by_date([event], ZoneInfo("America/New_York"))) == ["2025-01-15"]
    assert list(group_activities_by_date([event], UTC)) == ["2025-01-16"]


def test_month_ranges():
    assert get_month_date_range(date(2024, 2, 15)) == {"start_date": "2024-02-01", "end_date": "2024-02-29"}
    assert get_month_date_range(date(2025, 2, 15)) == {"start_date": "2025-02-01", "end_date": "2025-02-28"}
    assert get_month_date_range(date(2024, 12, 31))["end_date"] == "2024-12-31"
    assert get_month_date_range(date(2025, 4, 1))["end_date"] == "2025-04-30"


def test_marked_dates_prefers_most_urgent_deadline():
    deadlines = [make_deadline("good"), make_deadline("urgent")]
    events = [
        make_event(ActivityType.DEADLINE_DUE, "Good Book", "2025-01-20T12:00:00", "good"),
        make_event(ActivityType.DEADLINE_DUE, "Urgent Book", "2025-01-20T12:00:00", "urgent"),
    ]
    calculate = calculator(
        {"good": make_calc(UrgencyLevel.GOOD, GOOD_HEX), "urgent": make_calc(UrgencyLevel.URGENT, URGENT_HEX)}
    )

    marking = calculate_marked_dates(events, deadlines, calculate, UTC)["2025-01-20"]

    assert marking.urgency_level == "urgent"
    assert marking.background_color == URGENT_HEX + "40"
    assert marking.text_color == URGENT_HEX
    assert [bar.color for bar in marking.bars] == [URGENT_HEX, GOOD_HEX]


def test_marked_dates_activity_only_day_is_subtle():
    events = [make_event(ActivityType.NOTE, "Note", "2025-01-12T19:00:00")]
    marked = calculate_marked_dates(events, [], calculator({}), UTC)

    marking = marked["2025-01-12"]
    assert marking.background_color == ACTIVITY_COLOR + "20"
    assert marking.text_color is None
    assert marking.urgency_level is None
    assert [(bar.color, bar.is_deadline) for bar in marking.bars] == [(ACTIVITY_COLOR, False)]
    assert list(marked) == ["2025-01-12"]


def test_marked_dates_dangling_deadline_is_skipped():
    events = [make_event(ActivityType.DEADLINE_DUE, "Ghost", "2025-01-20T12:00:00", "missing")]
    calculate = calculator({})

    marking = calculate_marked_dates(events, [], calculate, UTC)["2025-01-20"]

    assert calculate.calls == []
    assert marking.background_color == ACTIVITY_COLOR + "20"
    assert marking.bars == ()


def test_marked_dates_deadline_and_other_activity():
    deadlines = [make_deadline("d1")]
    events = [
        make_event(ActivityType.DEADLINE_DUE, "Book", "2025-01-20T12:00:00"),
        make_event(ActivityType.PROGRESS, "Book", "2025-01-20T08:00:00"),
    ]
    marking = calculate_marked_dates(events, deadlines, calculator({"d1": make_calc(UrgencyLevel.GOOD, GOOD_HEX)}), UTC)[
        "2025-01-20"
    ]
    assert [(bar.color, bar.is_deadline) for bar in marking.bars] == [(GOOD_HEX, True), (ACTIVITY_COLOR, False)]


def test_activity_bars_are_capped():
    calculations = [make_calc(UrgencyLevel.GOOD, GOOD_HEX) for _ in range(7)]
    bars = build_activity_bars(calculations, has_other_activity=True)
    assert len(bars) == 6
    assert all(bar.is_deadline for bar in bars)


def test_enrich_only_deadline_due_events():
    deadlines = {"d1": make_deadline("d1")}
    calculate = calculator({"d1": make_calc(UrgencyLevel.GOOD, GOOD_HEX)})

    note = enrich_deadline_activity(make_event(ActivityType.NOTE, "Book", "2025-01-12T10:00:00"), deadlines, calculate)
    due = enrich_deadline_activity(make_event(ActivityType.DEADLINE_DUE, "Book", "2025-01-20T12:00:00"), deadlines, calculate)
    dangling = enrich_deadline_activity(
        make_event(ActivityType.DEADLINE_DUE, "Ghost", "2025-01-20T12:00:00", "missing"), deadlines, calculate
    )

    assert note.calculation is None
    assert due.calculation.urgency_level == UrgencyLevel.GOOD
    assert dangling.calculation is None
    assert calculate.calls == ["d1"]


def test_agenda_items_order_and_time_labels():
    deadlines = [make_deadline("d1", "Book")]
    events = [
        make_event(ActivityType.NOTE, "Book", "2025-01-20T14:30:00"),
        make_event(ActivityType.DEADLINE_DUE, "Book", "2025-01-20T12:00:00"),
        make_event(ActivityType.DEADLINE_DUE, "Ghost", "2025-01-20T12:00:00", "missing"),
    ]
    calculate = calculator({"d1": make_calc(UrgencyLevel.GOOD, GOOD_HEX)})

    items = transform_activities_to_agenda_items(events, deadlines, calculate, UTC)["2025-01-20"]

    assert [item.name for item in items] == ["Book", "Ghost", "Book"]
    assert items[0].calculation is not None and items[0].deadline.id == "d1"
    assert items[1].calculation is None and items[1].deadline is None
    assert items[0].time_label is None
    assert items[2].time_label == "2:30 PM"


def test_format_activity_time():
    assert format_activity_time(ts("2025-01-20T00:05:00"), UTC) == "12:05 AM"
    assert format_activity_time(ts("2025-01-20T12:00:00"), UTC) == "12:00 PM"
    assert format_activity_time(ts("2025-01-20T14:30:00"), ZoneInfo("America/New_York")) == "9:30 AM"


def test_describe_activity():
    progress = make_event(
        ActivityType.PROGRESS, "Book", "2025-01-20T10:00:00", details=ProgressDetails(150, 120, BookFormat.PHYSICAL)
    )
    audio = make_event(ActivityType.PROGRESS, "Book", "2025-01-20T10:00:00", details=ProgressDetails(200, 90, BookFormat.AUDIO))
    status = make_event(ActivityType.STATUS, "Book", "2025-01-20T10:00:00", details=StatusDetails("complete", "reading"))
    note = make_event(ActivityType.NOTE, "Book", "2025-01-20T10:00:00", details=NoteDetails("x" * 60))
    due = make_event(ActivityType.DEADLINE_DUE, "Book", "2025-01-20T10:00:00")

    assert describe_activity(progress) == "Read 30 pages (120 → 150)"
    assert describe_activity(audio) == "Read 1h 50m (1h 30m → 3h 20m)"
    assert describe_activity(status) == "Reading → Complete"
    assert describe_activity(note) == '"' + "x" * 50 + '..."'
    assert describe_activity(due) == "Due today"

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from pace_engine.pace import (
    pace_estimate,
    pace_status_message,
    reading_estimate,
    required_daily_pace,
    required_pace,
    select_pace_sample,
)
from pace_engine.schema import (
    BookFormat,
    Deadline,
    DeadlineStatus,
    PaceColor,
    PaceLevel,
    PaceSample,
    PaceStatus,
    StatusEntry,
)

UTC = timezone.utc


def make_deadline(deadline_date, total=310, reading_at="2025-01-01T00:00:00+00:00", book_format=BookFormat.PHYSICAL):
    status = ()
    if reading_at is not None:
        status = (StatusEntry(DeadlineStatus.READING, datetime.fromisoformat(reading_at)),)
    return Deadline(
        id="d1",
        title="Pace Book",
        deadline_date=deadline_date,
        total_quantity=total,
        format=book_format,
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
        status=status,
    )


def sample(pace, method="recent_data"):
    return PaceSample(average_pace=pace, days_count=5, is_reliable=method == "recent_data", calculation_method=method)


def test_required_pace_rounds_up():
    assert required_pace(300, 100, 3, BookFormat.PHYSICAL) == 67


def test_required_pace_due_today_or_overdue_is_whole_remainder():
    assert required_pace(300, 100, 0, BookFormat.PHYSICAL) == 200
    assert required_pace(300, 100, -4, BookFormat.EBOOK) == 200


def test_required_pace_audio_stays_in_minutes():
    assert required_pace(600, 0, 10, BookFormat.AUDIO) == 60


def test_required_daily_pace_spreads_total_over_local_span():
    # Reading starts at midnight UTC, which is the evening of Dec 31 in New York.
    deadline = make_deadline(date(2025, 1, 31))
    assert required_daily_pace(deadline, ZoneInfo("America/New_York")) == 10


def test_required_daily_pace_utc_span():
    deadline = make_deadline(date(2025, 1, 31), total=300)
    assert required_daily_pace(deadline, UTC) == 10


def test_required_daily_pace_absent_when_deadline_not_after_start():
    assert required_daily_pace(make_deadline(date(2025, 1, 1)), UTC) is None
    assert required_daily_pace(make_deadline(date(2024, 12, 20)), UTC) is None


def test_required_daily_pace_absent_without_reading_start():
    assert required_daily_pace(make_deadline(date(2025, 1, 31), reading_at=None), UTC) is None


def test_select_pace_sample_by_format():
    reading, listening = sample(20), sample(45)
    assert select_pace_sample(BookFormat.AUDIO, reading, listening) is listening
    assert select_pace_sample(BookFormat.EBOOK, reading, listening) is reading


def test_pace_status_message_on_track():
    status = PaceStatus(PaceColor.GREEN, PaceLevel.GOOD, "")
    assert pace_status_message(sample(25), 20, status, BookFormat.PHYSICAL) == "On track at 25 pages/day"
    assert pace_status_message(sample(25, "default_fallback"), 20, status, BookFormat.PHYSICAL) == "On track (default pace)"


def test_pace_status_message_behind_and_impossible():
    approaching = PaceStatus(PaceColor.ORANGE, PaceLevel.APPROACHING, "")
    impossible = PaceStatus(PaceColor.RED, PaceLevel.IMPOSSIBLE, "")
    assert pace_status_message(sample(15), 20, approaching, BookFormat.PHYSICAL) == "Read ~5 pages/day more"
    assert pace_status_message(sample(5), 20, impossible, BookFormat.PHYSICAL) == "Current: 5 pages vs Required: 20 pages"
    assert pace_status_message(sample(0, "default_fallback"), 20, impossible, BookFormat.PHYSICAL) == "Required: 20 pages/day"


def test_pace_status_message_overdue():
    status = PaceStatus(PaceColor.RED, PaceLevel.OVERDUE, "")
    assert pace_status_message(sample(25), 20, status, BookFormat.PHYSICAL) == "Return or renew"


def test_reading_estimate():
    assert reading_estimate(BookFormat.PHYSICAL, 80) == "About 2 hours of reading time"
    assert reading_estimate(BookFormat.AUDIO, 150) == "About 2 hours and 30 minutes of listening time"
    assert reading_estimate(BookFormat.AUDIO, 45) == "About 45 minutes of listening time"
    assert reading_estimate(BookFormat.PHYSICAL, 0) == ""


def test_pace_estimate():
    now = datetime(2025, 1, 21, 12, 0, tzinfo=UTC)
    assert pace_estimate(BookFormat.PHYSICAL, date(2025, 1, 31), 100, now, UTC) == "10 pages/day"
    assert pace_estimate(BookFormat.AUDIO, date(2025, 1, 26), 300, now, UTC) == "1 hour/day"
    assert pace_estimate(BookFormat.AUDIO, date(2025, 1, 26), 325, now, UTC) == "1 hour 5 minutes/day"
    assert pace_estimate(BookFormat.PHYSICAL, date(2025, 1, 20), 100, now, UTC) == "This due date has already passed"
    assert pace_estimate(BookFormat.PHYSICAL, date(2025, 1, 31), 0, now, UTC) == ""

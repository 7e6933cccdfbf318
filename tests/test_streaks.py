from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from src.learning.streaks import (
    HISTORY_LIMIT_DAYS,
    StreakRecord,
    StreakState,
    compute_current_streak,
    day_id,
    record_practice,
    refresh_streak,
    split_duration,
    streak_stats,
    streak_status,
    time_until_midnight,
)


def test_practicing_after_two_consecutive_days_gives_three() -> None:
    record = StreakRecord.from_days({"2024-01-01", "2024-01-02"}, current_streak=2, longest_streak=2)

    updated = record_practice(record, "2024-01-03")

    assert updated.current_streak == 3
    assert updated.longest_streak == 3
    assert "2024-01-03" in updated.streak_history


def test_gap_breaks_the_streak_but_keeps_longest() -> None:
    record = StreakRecord.from_days({"2024-01-01"}, current_streak=1, longest_streak=6)

    refreshed = refresh_streak(record, "2024-01-05")

    assert refreshed.current_streak == 0
    assert refreshed.longest_streak == 6
    assert refreshed.streak_history == record.streak_history


def test_practicing_after_a_gap_starts_over_at_one() -> None:
    record = StreakRecord.from_days({"2024-01-01"}, current_streak=1, longest_streak=6)

    updated = record_practice(record, "2024-01-05")

    assert updated.current_streak == 1
    assert updated.longest_streak == 6


@pytest.mark.parametrize(
    "history",
    [set(), {"2024-01-01"}, {"2024-01-02", "2024-01-03"}, {"2023-12-31", "garbage"}],
)
def test_recording_the_same_day_twice_is_idempotent(history: set[str]) -> None:
    record = StreakRecord.from_days(history, longest_streak=4)

    once = record_practice(record, "2024-01-03")
    twice = record_practice(once, "2024-01-03")

    assert twice == once


def test_yesterday_keeps_the_streak_alive_before_today_is_practiced() -> None:
    history = {"2024-01-01", "2024-01-02", "2024-01-03"}

    assert compute_current_streak(history, "2024-01-04") == 3
    assert compute_current_streak(history, "2024-01-03") == 3
    assert compute_current_streak(history, "2024-01-05") == 0


def test_walk_stops_at_the_first_gap() -> None:
    history = {"2024-01-01", "2024-01-02", "2024-01-04", "2024-01-05"}

    assert compute_current_streak(history, "2024-01-05") == 2


def test_streak_walk_crosses_month_and_year_boundaries() -> None:
    history = {"2023-12-30", "2023-12-31", "2024-01-01"}

    assert compute_current_streak(history, "2024-01-01") == 3


def test_malformed_days_are_never_counted() -> None:
    history = {"2024-1-2", "20240103", "2024-01-04"}

    assert compute_current_streak(history, "2024-01-04") == 1
    assert compute_current_streak(history, "not-a-day") == 0


def test_malformed_today_leaves_record_unchanged() -> None:
    record = StreakRecord.from_days({"2024-01-01"}, current_streak=1, longest_streak=1)

    assert record_practice(record, "01/02/2024") is record


def test_history_is_trimmed_to_the_most_recent_year() -> None:
    start = datetime(2022, 1, 1)
    days = {(start + timedelta(days=offset)).date().isoformat() for offset in range(400)}
    record = StreakRecord.from_days(days)

    today = (start + timedelta(days=400)).date().isoformat()
    updated = record_practice(record, today)

    assert len(updated.streak_history) == HISTORY_LIMIT_DAYS
    assert today in updated.streak_history
    assert "2022-01-01" not in updated.streak_history


def test_streak_status_states() -> None:
    assert streak_status(StreakRecord(), "2024-01-05").state is StreakState.NO_STREAK

    active = streak_status(StreakRecord.from_days({"2024-01-04"}), "2024-01-05")
    assert active.state is StreakState.ACTIVE
    assert active.current_streak == 1
    assert active.practiced_today is False

    broken = streak_status(StreakRecord.from_days({"2024-01-01"}), "2024-01-05")
    assert broken.state is StreakState.BROKEN
    assert broken.current_streak == 0


def test_streak_stats_summarises_history() -> None:
    days = {"2024-01-01", "2024-01-02", "2024-01-08", "2024-01-14", "2024-01-15"}
    record = StreakRecord.from_days(days, current_streak=2, longest_streak=3)

    stats = streak_stats(record, "2024-01-15")

    assert stats.total_practice_days == 5
    assert stats.average_per_week == 2.5
    assert stats.current_streak == 2
    assert stats.longest_streak == 3
    assert stats.last_practice_date == "2024-01-15"
    assert stats.status is StreakState.ACTIVE


def test_day_id_uses_the_learner_timezone() -> None:
    moment = datetime(2024, 1, 10, 2, 0, tzinfo=timezone.utc)

    assert day_id(moment) == "2024-01-10"
    assert day_id(moment, ZoneInfo("America/New_York")) == "2024-01-09"


def test_time_until_midnight_in_utc() -> None:
    moment = datetime(2024, 1, 10, 21, 30, 15, tzinfo=timezone.utc)

    remaining = time_until_midnight(moment)

    assert remaining == timedelta(hours=2, minutes=29, seconds=45)


def test_time_until_midnight_across_dst_change() -> None:
    berlin = ZoneInfo("Europe/Berlin")
    # Clocks move forward at 02:00 on 2024-03-31, so the day is 23 hours long.
    moment = datetime(2024, 3, 31, 0, 0, tzinfo=berlin)

    assert time_until_midnight(moment, berlin) == timedelta(hours=23)


def test_split_duration() -> None:
    countdown = split_duration(timedelta(hours=5, minutes=7, seconds=9, milliseconds=800))

    assert (countdown.hours, countdown.minutes, countdown.seconds) == (5, 7, 9)

    negative = split_duration(timedelta(minutes=-90))
    assert (negative.hours, negative.minutes, negative.seconds) == (-1, -30, 0)

"""Calendar-day practice streaks and the midnight countdown."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import FrozenSet, Iterable, Optional

from src.learning.clock import ensure_aware


LOGGER = logging.getLogger(__name__)

HISTORY_LIMIT_DAYS = 365


class StreakState(enum.Enum):
    NO_STREAK = "no_streak"
    ACTIVE = "active"
    BROKEN = "broken"


@dataclass(frozen=True, slots=True)
class StreakRecord:
    """Persisted practice history for one learner."""

    streak_history: FrozenSet[str] = field(default_factory=frozenset)
    current_streak: int = 0
    longest_streak: int = 0

    @classmethod
    def from_days(
        cls,
        days: Iterable[str],
        current_streak: int = 0,
        longest_streak: int = 0,
    ) -> "StreakRecord":
        return cls(frozenset(days), current_streak, longest_streak)

    @property
    def last_practice_date(self) -> Optional[str]:
        parsed = [day for day in self.streak_history if _parse_day(day) is not None]
        return max(parsed) if parsed else None


@dataclass(frozen=True, slots=True)
class StreakStatus:
    state: StreakState
    current_streak: int
    practiced_today: bool


@dataclass(frozen=True, slots=True)
class StreakStats:
    current_streak: int
    longest_streak: int
    total_practice_days: int
    average_per_week: float
    last_practice_date: Optional[str]
    status: StreakState


@dataclass(frozen=True, slots=True)
class Countdown:
    hours: int
    minutes: int
    seconds: int


def _parse_day(value: str) -> Optional[date]:
    try:
        parsed = date.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    # Only the canonical form counts; membership is tested by exact string.
    if parsed.isoformat() != value:
        return None
    return parsed


def day_id(now: datetime, tz: tzinfo = timezone.utc) -> str:
    """Calendar day of ``now`` in the learner's timezone, as ``YYYY-MM-DD``."""
    return ensure_aware(now).astimezone(tz).date().isoformat()


def compute_current_streak(history: Iterable[str], today: str) -> int:
    """Count consecutive practiced days ending today, or yesterday if today is still open.

    Days are matched as exact ``YYYY-MM-DD`` strings; anything else in the
    history never matches and so never extends a streak.
    """
    anchor = _parse_day(today)
    if anchor is None:
        return 0

    days = set(history)
    if anchor.isoformat() not in days:
        anchor -= timedelta(days=1)
        if anchor.isoformat() not in days:
            return 0

    streak = 0
    cursor = anchor
    while cursor.isoformat() in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def _trim_history(days: Iterable[str]) -> FrozenSet[str]:
    valid = sorted(day for day in days if _parse_day(day) is not None)
    return frozenset(valid[-HISTORY_LIMIT_DAYS:])


def record_practice(record: StreakRecord, today: str) -> StreakRecord:
    """Mark ``today`` as practiced; recording the same day twice changes nothing."""
    if _parse_day(today) is None:
        LOGGER.warning("Ignoring practice on malformed day %r.", today)
        return record

    history = _trim_history(record.streak_history | {today})
    current = compute_current_streak(history, today)
    return StreakRecord(
        streak_history=history,
        current_streak=current,
        longest_streak=max(record.longest_streak, current),
    )


def refresh_streak(record: StreakRecord, today: str) -> StreakRecord:
    """Recompute the current streak for ``today`` without recording practice."""
    current = compute_current_streak(record.streak_history, today)
    return StreakRecord(
        streak_history=record.streak_history,
        current_streak=current,
        longest_streak=max(record.longest_streak, current),
    )


def streak_status(record: StreakRecord, today: str) -> StreakStatus:
    practiced_today = today in record.streak_history
    current = compute_current_streak(record.streak_history, today)
    if current > 0:
        state = StreakState.ACTIVE
    elif record.last_practice_date is None:
        state = StreakState.NO_STREAK
    else:
        state = StreakState.BROKEN
    return StreakStatus(state=state, current_streak=current, practiced_today=practiced_today)


def streak_stats(record: StreakRecord, today: str) -> StreakStats:
    """Summary figures for the streak dashboard."""
    status = streak_status(record, today)
    practiced = sorted(day for day in record.streak_history if _parse_day(day) is not None)
    total = len(practiced)

    weeks_active = 1
    today_date = _parse_day(today)
    if practiced and today_date is not None:
        first = _parse_day(practiced[0])
        weeks_active = max(1, (today_date - first).days // 7)

    return StreakStats(
        current_streak=status.current_streak,
        longest_streak=max(record.longest_streak, status.current_streak),
        total_practice_days=total,
        average_per_week=round(total / weeks_active, 1),
        last_practice_date=practiced[-1] if practiced else None,
        status=status.state,
    )


def time_until_midnight(now: datetime, tz: tzinfo = timezone.utc) -> timedelta:
    """Time left before the learner's calendar day rolls over."""
    local_now = ensure_aware(now).astimezone(tz)
    midnight = datetime.combine(local_now.date() + timedelta(days=1), time.min, tzinfo=tz)
    # Subtract in UTC so a DST change before midnight is accounted for.
    return midnight.astimezone(timezone.utc) - local_now.astimezone(timezone.utc)


def split_duration(delta: timedelta) -> Countdown:
    """Break a duration into whole hours, minutes and seconds, keeping its sign."""
    total = int(delta.total_seconds())
    sign = -1 if total < 0 else 1
    total = abs(total)
    hours, remainder = divmod(total, 3600)
    minutes, seconds = divmod(remainder, 60)
    return Countdown(hours=sign * hours, minutes=sign * minutes, seconds=sign * seconds)

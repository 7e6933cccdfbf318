"""Spaced-repetition core: scheduling, daily selection, streaks and experience."""

from .cards import CardState, card_from_mapping
from .experience import UserProgress, level_from_xp, progress_within_level, xp_for_answer
from .ladder import MAX_STAGE, delay_for_stage
from .selection import DEFAULT_CONFIG, DailySession, SessionConfig, select_daily_session
from .session import ReviewSession
from .srs import schedule_review
from .streaks import StreakRecord, record_practice, time_until_midnight

__all__ = [
    "CardState",
    "card_from_mapping",
    "UserProgress",
    "level_from_xp",
    "progress_within_level",
    "xp_for_answer",
    "MAX_STAGE",
    "delay_for_stage",
    "DEFAULT_CONFIG",
    "DailySession",
    "SessionConfig",
    "select_daily_session",
    "ReviewSession",
    "schedule_review",
    "StreakRecord",
    "record_practice",
    "time_until_midnight",
]

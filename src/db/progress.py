"""Learner records: experience, practice streaks and daily answer totals."""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.learning.experience import DailyStats, UserProgress
from src.learning.streaks import StreakRecord

from . import DailyStudyStats, Learner, PracticeStreak


async def upsert_learner(
    session: AsyncSession,
    learner_id: int,
    display_name: Optional[str] = None,
) -> Learner:
    """Create a learner or refresh their display name."""
    learner = await session.get(Learner, learner_id)

    if learner is None:
        now = datetime.now(timezone.utc)
        learner = Learner(
            learner_id=learner_id,
            display_name=display_name,
            xp=0,
            created_at=now,
            updated_at=now,
        )
        session.add(learner)
        return learner

    if display_name is not None and learner.display_name != display_name:
        learner.display_name = display_name
        learner.updated_at = datetime.now(timezone.utc)
        await session.flush()

    return learner


async def load_user_progress(session: AsyncSession, learner_id: int) -> UserProgress:
    """Return the learner's cumulative experience, zero for unknown learners."""
    learner = await session.get(Learner, learner_id)
    if learner is None:
        return UserProgress()
    return UserProgress(xp=learner.xp)


async def save_user_progress(
    session: AsyncSession, learner_id: int, progress: UserProgress
) -> None:
    learner = await upsert_learner(session, learner_id)
    # Experience only ever grows; a stale in-memory value must not roll it back.
    if progress.xp > (learner.xp or 0):
        learner.xp = progress.xp
        learner.updated_at = datetime.now(timezone.utc)
    await session.flush()


async def load_streak_record(session: AsyncSession, learner_id: int) -> StreakRecord:
    """Return the learner's streak record, empty if they have never practiced."""
    row = await session.get(PracticeStreak, learner_id)
    if row is None:
        return StreakRecord()
    return StreakRecord.from_days(
        row.history or [],
        current_streak=row.current_streak,
        longest_streak=row.longest_streak,
    )


async def save_streak_record(
    session: AsyncSession, learner_id: int, record: StreakRecord
) -> None:
    row = await session.get(PracticeStreak, learner_id)
    history = sorted(record.streak_history)
    now = datetime.now(timezone.utc)

    if row is None:
        await upsert_learner(session, learner_id)
        row = PracticeStreak(
            learner_id=learner_id,
            history=history,
            current_streak=record.current_streak,
            longest_streak=record.longest_streak,
            updated_at=now,
        )
        session.add(row)
    else:
        row.history = history
        row.current_streak = record.current_streak
        row.longest_streak = record.longest_streak
        row.updated_at = now
    await session.flush()


async def load_daily_stats(session: AsyncSession, learner_id: int, day: str) -> DailyStats:
    """Return the learner's answer totals for ``day``, zero if they have not studied."""
    row = await session.get(DailyStudyStats, (learner_id, day))
    if row is None:
        return DailyStats(day=day)
    return DailyStats(day=day, correct=row.correct_count, incorrect=row.incorrect_count)


async def add_daily_stats(
    session: AsyncSession,
    learner_id: int,
    day: str,
    *,
    correct: int = 0,
    incorrect: int = 0,
) -> DailyStats:
    """Add answers to the learner's totals for ``day``."""
    row = await session.get(DailyStudyStats, (learner_id, day))
    now = datetime.now(timezone.utc)

    if row is None:
        await upsert_learner(session, learner_id)
        # No relationship to Learner, so the learner row must exist first.
        await session.flush()
        row = DailyStudyStats(
            learner_id=learner_id,
            day=day,
            correct_count=0,
            incorrect_count=0,
            updated_at=now,
        )
        session.add(row)

    totals = DailyStats(day=day, correct=row.correct_count, incorrect=row.incorrect_count).add(
        correct=correct, incorrect=incorrect
    )
    row.correct_count = totals.correct
    row.incorrect_count = totals.incorrect
    row.updated_at = now
    await session.flush()
    return totals

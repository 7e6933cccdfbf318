"""Coordinates study sessions between the scheduling core and the database."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta, timezone, tzinfo
from typing import Dict, Optional, Set, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.db.cards import load_card_states, save_card_state
from src.db.progress import (
    add_daily_stats,
    load_daily_stats,
    load_streak_record,
    load_user_progress,
    save_streak_record,
    save_user_progress,
)
from src.learning.cards import CardState
from src.learning.clock import Clock, utc_now
from src.learning.experience import DailyStats, SessionSummary, UserProgress
from src.learning.selection import DEFAULT_CONFIG, SessionConfig
from src.learning.session import AnswerOutcome, ReviewSession
from src.learning.streaks import (
    StreakRecord,
    StreakStats,
    day_id,
    record_practice,
    refresh_streak,
    streak_stats,
    time_until_midnight,
)


LOGGER = logging.getLogger(__name__)


class PersistenceUnavailable(RuntimeError):
    """Raised when study data cannot be loaded from the database."""


@dataclass(slots=True)
class SaveResult:
    """Outcome of a write; failures keep the computed state for a later retry."""

    ok: bool
    error: Optional[str] = None
    retryable: bool = False

    @classmethod
    def success(cls) -> "SaveResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, error: str, retryable: bool = True) -> "SaveResult":
        return cls(ok=False, error=error, retryable=retryable)


@dataclass(slots=True)
class AnswerResult:
    outcome: AnswerOutcome
    save: SaveResult


@dataclass(slots=True)
class CompletionResult:
    """Session outcome; ``streak`` is ``None`` while the streak write is still pending."""

    summary: SessionSummary
    streak: Optional[StreakRecord]
    progress: UserProgress
    save: SaveResult


@dataclass(slots=True)
class _PendingCompletion:
    days: Set[str] = field(default_factory=set)
    progress: UserProgress = field(default_factory=UserProgress)
    # Answers still to be added to each day's totals.
    answers: Dict[str, DailyStats] = field(default_factory=dict)


@dataclass(slots=True)
class StudyOverview:
    streak: StreakStats
    today: DailyStats


class StudyWorkflow:
    """Runs one learner's study sessions against a persistent store."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        learner_id: int,
        config: SessionConfig = DEFAULT_CONFIG,
        clock: Clock = utc_now,
        tz: tzinfo = timezone.utc,
    ) -> None:
        self._session_factory = session_factory
        self._learner_id = learner_id
        self._config = config
        self._clock = clock
        self._tz = tz
        self._pending_cards: Dict[str, CardState] = {}
        self._pending_completion: Optional[_PendingCompletion] = None

    @property
    def has_pending_writes(self) -> bool:
        return bool(self._pending_cards) or self._pending_completion is not None

    def today(self) -> str:
        return day_id(self._clock(), self._tz)

    def countdown(self) -> timedelta:
        """Time left to keep today's streak alive."""
        return time_until_midnight(self._clock(), self._tz)

    async def start(self) -> ReviewSession:
        """Load the learner's cards and select today's batch."""
        try:
            async with self._session_factory() as session:
                cards = await load_card_states(session, self._learner_id)
                progress = await load_user_progress(session, self._learner_id)
        except SQLAlchemyError as exc:
            LOGGER.exception("Could not load study data for learner %s.", self._learner_id)
            raise PersistenceUnavailable("Study data is temporarily unavailable.") from exc

        # Writes that failed earlier are newer than what the database returned.
        cards = [self._pending_cards.get(card.id, card) for card in cards]
        if self._pending_completion is not None and self._pending_completion.progress.xp > progress.xp:
            progress = self._pending_completion.progress

        study = ReviewSession.start(cards, progress, now=self._clock(), config=self._config)
        LOGGER.info(
            "Selected %d cards for learner %s out of %d.",
            len(study.deck),
            self._learner_id,
            len(cards),
        )
        return study

    async def answer(self, study: ReviewSession, was_correct: bool) -> AnswerResult:
        """Apply a committed answer and persist the updated card."""
        outcome = study.answer(was_correct, self._clock())
        save = await self._save_card(outcome.after)
        return AnswerResult(outcome=outcome, save=save)

    async def complete(self, study: ReviewSession) -> CompletionResult:
        """Record today's practice, daily totals and the session's experience."""
        self._queue_session(study)
        streak, save = await self._flush_completion()
        return CompletionResult(
            summary=study.summary(),
            streak=streak,
            progress=study.progress,
            save=save,
        )

    async def abandon(self, study: ReviewSession) -> SaveResult:
        """Keep what a stopped session earned; unanswered cards stay untouched."""
        if not study.stats.answered and self._pending_completion is None:
            return SaveResult.success()
        self._queue_session(study)
        _, save = await self._flush_completion()
        return save

    async def retry_pending(self) -> SaveResult:
        """Retry every write that previously failed."""
        for card in list(self._pending_cards.values()):
            result = await self._save_card(card)
            if not result.ok:
                return result
        _, result = await self._flush_completion()
        return result

    async def streak_overview(self) -> StudyOverview:
        """Streak figures and today's answer totals for the dashboard."""
        today = self.today()
        async with self._session_factory() as session:
            record = await load_streak_record(session, self._learner_id)
            daily = await load_daily_stats(session, self._learner_id, today)

        unsaved = self._pending_completion.answers.get(today) if self._pending_completion else None
        if unsaved is not None:
            daily = daily.add(correct=unsaved.correct, incorrect=unsaved.incorrect)
        return StudyOverview(streak=streak_stats(record, today), today=daily)

    def _queue_session(self, study: ReviewSession) -> None:
        pending = self._pending_completion or _PendingCompletion()
        today = self.today()
        correct, incorrect = study.take_unrecorded()
        if correct or incorrect:
            pending.days.add(today)
            totals = pending.answers.get(today, DailyStats(day=today))
            pending.answers[today] = totals.add(correct=correct, incorrect=incorrect)
        if study.progress.xp > pending.progress.xp:
            pending.progress = study.progress
        self._pending_completion = pending

    async def _save_card(self, card: CardState) -> SaveResult:
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await save_card_state(session, self._learner_id, card)
        except LookupError as exc:
            LOGGER.warning("Dropping progress for unknown card %s: %s", card.id, exc)
            self._pending_cards.pop(card.id, None)
            return SaveResult.failure(str(exc), retryable=False)
        except SQLAlchemyError:
            LOGGER.exception("Saving card %s for learner %s failed.", card.id, self._learner_id)
            self._pending_cards[card.id] = card
            return SaveResult.failure("Card progress could not be saved.")

        self._pending_cards.pop(card.id, None)
        return SaveResult.success()

    async def _flush_completion(self) -> Tuple[Optional[StreakRecord], SaveResult]:
        pending = self._pending_completion
        if pending is None:
            return None, SaveResult.success()

        today = self.today()
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    streak = await load_streak_record(session, self._learner_id)
                    for day in sorted(pending.days):
                        streak = record_practice(streak, day)
                    streak = refresh_streak(streak, today)
                    await save_streak_record(session, self._learner_id, streak)
                    await save_user_progress(session, self._learner_id, pending.progress)
                    for day, answers in pending.answers.items():
                        await add_daily_stats(
                            session,
                            self._learner_id,
                            day,
                            correct=answers.correct,
                            incorrect=answers.incorrect,
                        )
        except SQLAlchemyError:
            LOGGER.exception("Saving session results for learner %s failed.", self._learner_id)
            return None, SaveResult.failure("Streak, daily totals and experience could not be saved.")

        self._pending_completion = None
        return streak, SaveResult.success()

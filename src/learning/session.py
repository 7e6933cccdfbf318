"""In-memory state of a single study sitting."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from src.learning.cards import CardState
from src.learning.experience import SessionStats, SessionSummary, UserProgress, xp_for_answer
from src.learning.selection import DEFAULT_CONFIG, DailySession, SessionConfig, select_daily_session
from src.learning.srs import schedule_review


@dataclass(frozen=True, slots=True)
class AnswerOutcome:
    """Result of one committed answer."""

    before: CardState
    after: CardState
    was_correct: bool
    xp_earned: int
    progress: UserProgress
    stats: SessionStats


@dataclass(slots=True)
class ReviewSession:
    """Walks a learner through today's deck one card at a time.

    Nothing is scheduled until ``answer`` is called, so abandoning the session
    leaves every unanswered card exactly as it was selected.
    """

    deck: List[CardState]
    progress: UserProgress = field(default_factory=UserProgress)
    stats: SessionStats = field(default_factory=SessionStats)
    position: int = 0
    history: List[AnswerOutcome] = field(default_factory=list)
    recorded: SessionStats = field(default_factory=SessionStats)

    @classmethod
    def start(
        cls,
        cards: List[CardState],
        progress: UserProgress,
        *,
        now: datetime,
        config: SessionConfig = DEFAULT_CONFIG,
    ) -> "ReviewSession":
        selection: DailySession = select_daily_session(cards, config, now=now)
        return cls(deck=selection.deck, progress=progress)

    @property
    def current_card(self) -> Optional[CardState]:
        if self.position >= len(self.deck):
            return None
        return self.deck[self.position]

    @property
    def is_finished(self) -> bool:
        return self.position >= len(self.deck)

    @property
    def remaining(self) -> int:
        return max(0, len(self.deck) - self.position)

    @property
    def wrong_cards(self) -> List[CardState]:
        return [outcome.after for outcome in self.history if not outcome.was_correct]

    def answer(self, was_correct: bool, now: datetime) -> AnswerOutcome:
        """Schedule the current card and advance to the next one."""
        card = self.current_card
        if card is None:
            raise RuntimeError("The study session has no cards left to answer.")

        updated = schedule_review(card, was_correct, now)
        xp = xp_for_answer(was_correct, updated.interval_index)

        self.deck[self.position] = updated
        self.position += 1
        self.progress = self.progress.add_xp(xp)
        self.stats = self.stats.record_answer(was_correct, xp)

        outcome = AnswerOutcome(
            before=card,
            after=updated,
            was_correct=was_correct,
            xp_earned=xp,
            progress=self.progress,
            stats=self.stats,
        )
        self.history.append(outcome)
        return outcome

    def take_unrecorded(self) -> tuple[int, int]:
        """Correct and incorrect answers not yet handed over for the daily totals."""
        correct = self.stats.correct - self.recorded.correct
        incorrect = self.stats.incorrect - self.recorded.incorrect
        self.recorded = self.stats
        return correct, incorrect

    def summary(self) -> SessionSummary:
        return SessionSummary(
            total=len(self.deck),
            correct=self.stats.correct,
            incorrect=self.stats.incorrect,
            accuracy=self.stats.accuracy,
            xp=self.stats.total_xp,
            level=self.progress.level,
        )

"""Experience points, levels and per-session answer statistics."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Iterable

from src.learning.cards import CardState
from src.learning.ladder import clamp_stage


BASE_XP = 10
STAGE_BONUS_XP = 5
XP_PER_LEVEL_UNIT = 100


def xp_for_answer(was_correct: bool, interval_index_after: int) -> int:
    """Points for one answer; wrong answers earn nothing but never cost anything."""
    if not was_correct:
        return 0
    return BASE_XP + clamp_stage(interval_index_after) * STAGE_BONUS_XP


def level_from_xp(xp: int) -> int:
    """Level ``L`` covers ``[100 * (L - 1) ** 2, 100 * L ** 2)``."""
    return math.isqrt(max(0, xp) // XP_PER_LEVEL_UNIT) + 1


def xp_for_level(level: int) -> int:
    """Experience at which ``level`` starts."""
    return XP_PER_LEVEL_UNIT * (max(1, level) - 1) ** 2


@dataclass(frozen=True, slots=True)
class LevelProgress:
    current: int
    needed: int
    percent: float


def progress_within_level(xp: int) -> LevelProgress:
    """Display values for the progress bar inside the learner's current level."""
    xp = max(0, xp)
    level = level_from_xp(xp)
    floor = xp_for_level(level)
    needed = xp_for_level(level + 1) - floor
    current = xp - floor
    return LevelProgress(current=current, needed=needed, percent=round(current / needed * 100, 1))


@dataclass(frozen=True, slots=True)
class UserProgress:
    """Cumulative experience for a learner; the level is always derived."""

    xp: int = 0

    @property
    def level(self) -> int:
        return level_from_xp(self.xp)

    def add_xp(self, points: int) -> "UserProgress":
        if points <= 0:
            return self
        return UserProgress(xp=self.xp + points)


@dataclass(frozen=True, slots=True)
class SessionStats:
    """Counters for the active study session."""

    correct: int = 0
    incorrect: int = 0
    total_xp: int = 0
    streak: int = 0
    best_streak: int = 0

    @property
    def answered(self) -> int:
        return self.correct + self.incorrect

    @property
    def accuracy(self) -> int:
        if not self.answered:
            return 0
        return round(self.correct / self.answered * 100)

    def record_answer(self, was_correct: bool, xp: int) -> "SessionStats":
        if not was_correct:
            return replace(self, incorrect=self.incorrect + 1, streak=0)
        streak = self.streak + 1
        return replace(
            self,
            correct=self.correct + 1,
            total_xp=self.total_xp + max(0, xp),
            streak=streak,
            best_streak=max(self.best_streak, streak),
        )


@dataclass(frozen=True, slots=True)
class SessionSummary:
    total: int
    correct: int
    incorrect: int
    accuracy: int
    xp: int
    level: int


@dataclass(frozen=True, slots=True)
class DailyStats:
    """Answers a learner gave on one calendar day, across all sessions."""

    day: str
    correct: int = 0
    incorrect: int = 0

    @property
    def cards(self) -> int:
        return self.correct + self.incorrect

    @property
    def accuracy(self) -> int:
        if not self.cards:
            return 0
        return round(self.correct / self.cards * 100)

    def add(self, correct: int = 0, incorrect: int = 0) -> "DailyStats":
        return replace(
            self,
            correct=self.correct + max(0, correct),
            incorrect=self.incorrect + max(0, incorrect),
        )


def calculate_accuracy(cards: Iterable[CardState]) -> int:
    """Rounded percentage of correct answers across all card counters."""
    correct = 0
    incorrect = 0
    for card in cards:
        correct += card.correct_count
        incorrect += card.incorrect_count
    total = correct + incorrect
    return round(correct / total * 100) if total else 0

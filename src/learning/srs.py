"""Spaced-repetition scheduling on the fixed interval ladder."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from src.learning.cards import CardState
from src.learning.clock import ensure_aware
from src.learning.ladder import MAX_STAGE, delay_for_stage


def next_stage(current: int, was_correct: bool) -> int:
    """Promote one stage on success, demote one stage on failure."""
    if was_correct:
        return min(current + 1, MAX_STAGE)
    return max(current - 1, 0)


def schedule_review(card: CardState, was_correct: bool, now: datetime) -> CardState:
    """Return the card's state after a committed answer at ``now``.

    A wrong answer drops the card a single stage rather than back to the
    start of the ladder. The input card is left untouched.
    """
    now = ensure_aware(now)
    stage = next_stage(card.interval_index, was_correct)

    return replace(
        card,
        interval_index=stage,
        next_review=now + delay_for_stage(stage),
        correct_count=card.correct_count + (1 if was_correct else 0),
        incorrect_count=card.incorrect_count + (0 if was_correct else 1),
        is_encountered=True,
        updated_at=now,
    )

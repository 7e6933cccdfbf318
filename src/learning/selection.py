"""Daily study batch selection."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List

from src.learning.cards import CardState
from src.learning.clock import ensure_aware


_NEVER_SCHEDULED = datetime.min.replace(tzinfo=timezone.utc)


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Per-day caps for a learner's study session."""

    max_reviews_per_day: int = 50
    max_new_per_day: int = 10


DEFAULT_CONFIG = SessionConfig()


@dataclass(slots=True)
class DailySession:
    """Cards chosen for today, split into due reviews and new cards."""

    reviews: List[CardState] = field(default_factory=list)
    news: List[CardState] = field(default_factory=list)

    @property
    def deck(self) -> List[CardState]:
        """Reviews first so overdue material is always seen before new cards."""
        return [*self.reviews, *self.news]

    @property
    def is_empty(self) -> bool:
        return not self.reviews and not self.news

    def __len__(self) -> int:
        return len(self.reviews) + len(self.news)


def _review_sort_key(card: CardState) -> datetime:
    return card.next_review if card.next_review is not None else _NEVER_SCHEDULED


def select_daily_session(
    cards: Iterable[CardState],
    config: SessionConfig = DEFAULT_CONFIG,
    *,
    now: datetime,
) -> DailySession:
    """Pick today's reviews and new cards without touching any card state.

    New cards are recognised by ``is_encountered`` alone, so a card that was
    shown but never answered stays in the new bucket.
    """
    now = ensure_aware(now)
    max_reviews = max(0, config.max_reviews_per_day)
    max_new = max(0, config.max_new_per_day)

    due: List[CardState] = []
    fresh: List[CardState] = []
    for card in cards:
        if not card.is_encountered:
            fresh.append(card)
        elif card.is_due(now):
            due.append(card)

    # sorted() is stable, so equally overdue cards keep collection order.
    due = sorted(due, key=_review_sort_key)

    return DailySession(reviews=due[:max_reviews], news=fresh[:max_new])


def count_new_cards(cards: Iterable[CardState], config: SessionConfig = DEFAULT_CONFIG) -> int:
    """Number of unseen cards today's session would introduce."""
    unseen = sum(1 for card in cards if not card.is_encountered)
    return min(unseen, max(0, config.max_new_per_day))

"""Flashcard learning state and the adapter that normalises incoming card shapes."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from src.learning.clock import ensure_aware
from src.learning.ladder import clamp_stage


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CardState:
    """Learning progress for a single flashcard owned by one learner."""

    id: str
    question: str
    answer: str
    interval_index: int = 0
    next_review: Optional[datetime] = None
    correct_count: int = 0
    incorrect_count: int = 0
    is_encountered: bool = False
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        # Corrupted records are clamped back into range instead of rejected.
        object.__setattr__(self, "interval_index", clamp_stage(self.interval_index))
        object.__setattr__(self, "correct_count", max(0, int(self.correct_count)))
        object.__setattr__(self, "incorrect_count", max(0, int(self.incorrect_count)))
        for name in ("next_review", "created_at", "updated_at"):
            value = getattr(self, name)
            if value is not None:
                object.__setattr__(self, name, ensure_aware(value))

    @property
    def answered_count(self) -> int:
        return self.correct_count + self.incorrect_count

    def is_due(self, now: datetime) -> bool:
        """Whether an encountered card should be reviewed at ``now``."""
        if not self.is_encountered:
            return False
        if self.next_review is None:
            return True
        return self.next_review <= ensure_aware(now)


_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id", "card_id", "cardId", "flashcard_id", "flashcardId", "_id"),
    "question": ("question", "q", "front"),
    "answer": ("answer", "a", "back"),
    "interval_index": ("interval_index", "intervalIndex", "stage"),
    "next_review": ("next_review", "nextReview", "next_review_at"),
    "correct_count": ("correct_count", "correctCount"),
    "incorrect_count": ("incorrect_count", "incorrectCount"),
    "is_encountered": ("is_encountered", "isEncountered"),
    "created_at": ("created_at", "createdAt"),
    "updated_at": ("updated_at", "updatedAt"),
}


def _pick(data: Mapping[str, Any], field: str) -> Any:
    for key in _ALIASES[field]:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = f"{text[:-1]}+00:00"
        try:
            return ensure_aware(datetime.fromisoformat(text))
        except ValueError:
            LOGGER.warning("Ignoring malformed card timestamp %r.", value)
            return None
    LOGGER.warning("Ignoring card timestamp of unsupported type %s.", type(value).__name__)
    return None


def _parse_int(value: Any) -> int:
    if value is None:
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        LOGGER.warning("Ignoring non-integer card counter %r.", value)
        return 0


def _parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return bool(value)


def card_from_mapping(data: Mapping[str, Any]) -> CardState:
    """Build a ``CardState`` from any of the card shapes seen at the system boundary.

    Accepts camelCase API payloads, snake_case records and the short
    ``q``/``a`` aliases. Missing progress fields fall back to a new card.
    """
    raw_id = _pick(data, "id")
    question = _pick(data, "question")
    answer = _pick(data, "answer")

    return CardState(
        id=str(raw_id) if raw_id is not None else "",
        question=str(question).strip() if question is not None else "",
        answer=str(answer).strip() if answer is not None else "",
        interval_index=_parse_int(_pick(data, "interval_index")),
        next_review=_parse_timestamp(_pick(data, "next_review")),
        correct_count=_parse_int(_pick(data, "correct_count")),
        incorrect_count=_parse_int(_pick(data, "incorrect_count")),
        is_encountered=_parse_bool(_pick(data, "is_encountered")),
        created_at=_parse_timestamp(_pick(data, "created_at")),
        updated_at=_parse_timestamp(_pick(data, "updated_at")),
    )

"""Helpers for working with card progress persistence."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.learning.cards import CardState

from . import Card


def _to_state(record: Card) -> CardState:
    return CardState(
        id=record.external_id,
        question=record.question,
        answer=record.answer,
        interval_index=record.interval_index,
        next_review=record.next_review_at,
        correct_count=record.correct_count,
        incorrect_count=record.incorrect_count,
        is_encountered=record.is_encountered,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


async def create_card(
    session: AsyncSession,
    learner_id: int,
    question: str,
    answer: str,
    external_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> CardState:
    """Author a new card for a learner; it starts unencountered at stage 0."""
    if now is None:
        now = datetime.now(timezone.utc)

    record = Card(
        learner_id=learner_id,
        external_id=external_id or uuid.uuid4().hex,
        question=question.strip(),
        answer=answer.strip(),
        interval_index=0,
        next_review_at=None,
        correct_count=0,
        incorrect_count=0,
        is_encountered=False,
        created_at=now,
        updated_at=now,
    )
    session.add(record)
    await session.flush()
    return _to_state(record)


async def load_card_states(session: AsyncSession, learner_id: int) -> list[CardState]:
    """Return every card the learner owns, in authoring order, including unseen ones."""
    stmt = select(Card).where(Card.learner_id == learner_id).order_by(Card.id)
    result = await session.execute(stmt)
    return [_to_state(record) for record in result.scalars().all()]


async def _get_card(session: AsyncSession, learner_id: int, card_id: str) -> Optional[Card]:
    stmt = select(Card).where(Card.learner_id == learner_id, Card.external_id == card_id)
    result = await session.execute(stmt)
    return result.scalars().first()


async def save_card_state(session: AsyncSession, learner_id: int, card: CardState) -> None:
    """Persist the scheduler's view of a card.

    Only progress fields are written; question and answer belong to deck
    authoring. Raises ``LookupError`` when the card does not exist.
    """
    record = await _get_card(session, learner_id, card.id)
    if record is None:
        raise LookupError(f"Card {card.id!r} not found for learner {learner_id}.")

    record.interval_index = card.interval_index
    record.next_review_at = card.next_review
    record.correct_count = card.correct_count
    record.incorrect_count = card.incorrect_count
    record.is_encountered = card.is_encountered
    if card.updated_at is not None:
        record.updated_at = card.updated_at
    await session.flush()

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timedelta

from src.learning.cards import CardState
from src.learning.selection import (
    DEFAULT_CONFIG,
    SessionConfig,
    count_new_cards,
    select_daily_session,
)


def _new(card_id: str) -> CardState:
    return CardState(id=card_id, question=f"q{card_id}", answer=f"a{card_id}")


def _seen(card_id: str, next_review: datetime, stage: int = 1) -> CardState:
    return CardState(
        id=card_id,
        question=f"q{card_id}",
        answer=f"a{card_id}",
        interval_index=stage,
        next_review=next_review,
        correct_count=1,
        is_encountered=True,
    )


def test_empty_collection_yields_empty_session(now: datetime) -> None:
    session = select_daily_session([], now=now)

    assert session.reviews == []
    assert session.news == []
    assert session.is_empty
    assert session.deck == []


def test_reviews_are_sorted_most_overdue_first(now: datetime) -> None:
    cards = [
        _seen("recent", now - timedelta(hours=1)),
        _seen("future", now + timedelta(days=2)),
        _seen("oldest", now - timedelta(days=9)),
        _seen("exactly-now", now),
    ]

    session = select_daily_session(cards, now=now)

    assert [card.id for card in session.reviews] == ["oldest", "recent", "exactly-now"]
    assert session.news == []


def test_new_cards_keep_collection_order(now: datetime) -> None:
    cards = [_new("b"), _seen("x", now - timedelta(days=1)), _new("a"), _new("c")]

    session = select_daily_session(cards, now=now)

    assert [card.id for card in session.news] == ["b", "a", "c"]
    assert [card.id for card in session.deck] == ["x", "b", "a", "c"]


def test_caps_are_respected_for_large_collections(now: datetime) -> None:
    cards = [_seen(f"r{i}", now - timedelta(minutes=i)) for i in range(80)]
    cards += [_new(f"n{i}") for i in range(40)]
    config = SessionConfig(max_reviews_per_day=25, max_new_per_day=5)

    session = select_daily_session(cards, config, now=now)

    assert len(session.reviews) == 25
    assert len(session.news) == 5
    assert session.reviews[0].id == "r79"
    assert [card.id for card in session.news] == ["n0", "n1", "n2", "n3", "n4"]


def test_default_config_caps(now: datetime) -> None:
    cards = [_new(str(i)) for i in range(30)]

    session = select_daily_session(cards, now=now)

    assert DEFAULT_CONFIG.max_new_per_day == 10
    assert DEFAULT_CONFIG.max_reviews_per_day == 50
    assert len(session.news) == 10


def test_negative_caps_select_nothing(now: datetime) -> None:
    cards = [_new("a"), _seen("b", now - timedelta(days=1))]

    session = select_daily_session(cards, SessionConfig(-1, -5), now=now)

    assert session.is_empty


def test_selection_does_not_mark_cards_encountered(now: datetime) -> None:
    cards = [_new("a"), _new("b"), _seen("c", now - timedelta(days=3))]
    before = [replace(card) for card in cards]

    session = select_daily_session(cards, now=now)

    assert cards == before
    assert all(card.is_encountered is False for card in session.news)


def test_unencountered_card_goes_to_news_even_with_a_past_due_date(now: datetime) -> None:
    shown_not_answered = CardState(
        id="partial",
        question="q",
        answer="a",
        next_review=now - timedelta(days=1),
        is_encountered=False,
    )

    session = select_daily_session([shown_not_answered], now=now)

    assert session.reviews == []
    assert [card.id for card in session.news] == ["partial"]


def test_encountered_card_without_due_date_is_reviewed_first(now: datetime) -> None:
    broken = CardState(id="broken", question="q", answer="a", is_encountered=True)
    cards = [_seen("due", now - timedelta(days=30)), broken]

    session = select_daily_session(cards, now=now)

    assert [card.id for card in session.reviews] == ["broken", "due"]


def test_count_new_cards_respects_daily_cap() -> None:
    cards = [_new(str(i)) for i in range(4)]

    assert count_new_cards(cards) == 4
    assert count_new_cards(cards, SessionConfig(max_new_per_day=2)) == 2
    assert count_new_cards([]) == 0

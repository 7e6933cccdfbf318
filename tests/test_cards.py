from __future__ import annotations

from datetime import datetime, timezone

from src.learning.cards import CardState, card_from_mapping


def test_camel_case_payload_is_normalised() -> None:
    card = card_from_mapping(
        {
            "id": 17,
            "question": " Capital of France? ",
            "answer": "Paris",
            "intervalIndex": 3,
            "nextReview": "2024-01-12T00:00:00.000Z",
            "correctCount": 4,
            "incorrectCount": 1,
            "isEncountered": True,
            "updatedAt": "2024-01-09T10:00:00Z",
        }
    )

    assert card.id == "17"
    assert card.question == "Capital of France?"
    assert card.interval_index == 3
    assert card.next_review == datetime(2024, 1, 12, tzinfo=timezone.utc)
    assert card.correct_count == 4
    assert card.incorrect_count == 1
    assert card.is_encountered is True
    assert card.updated_at == datetime(2024, 1, 9, 10, tzinfo=timezone.utc)


def test_short_aliases_become_a_new_card() -> None:
    card = card_from_mapping({"id": "x", "q": "hola", "a": "hello"})

    assert card == CardState(id="x", question="hola", answer="hello")
    assert card.is_encountered is False
    assert card.next_review is None


def test_corrupted_progress_is_clamped() -> None:
    card = card_from_mapping(
        {
            "id": "x",
            "question": "q",
            "answer": "a",
            "intervalIndex": -2,
            "correctCount": "lots",
            "incorrectCount": -1,
            "nextReview": "yesterday",
            "isEncountered": "true",
        }
    )

    assert card.interval_index == 0
    assert card.correct_count == 0
    assert card.incorrect_count == 0
    assert card.next_review is None
    assert card.is_encountered is True


def test_explicit_false_encounter_flag_is_kept() -> None:
    card = card_from_mapping({"id": "x", "question": "q", "answer": "a", "isEncountered": False})

    assert card.is_encountered is False


def test_naive_datetimes_are_read_as_utc() -> None:
    card = CardState(id="x", question="q", answer="a", next_review=datetime(2024, 5, 1, 8, 0))

    assert card.next_review.tzinfo is timezone.utc

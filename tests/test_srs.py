from __future__ import annotations

from datetime import datetime, timedelta, timezone

from src.learning.cards import CardState
from src.learning.ladder import MAX_STAGE, delay_for_stage
from src.learning.srs import schedule_review


def _card(**overrides) -> CardState:
    values = dict(id="c1", question="2 + 2?", answer="4")
    values.update(overrides)
    return CardState(**values)


def test_correct_answer_on_new_card_advances_one_stage(now: datetime) -> None:
    updated = schedule_review(_card(), True, now)

    assert updated.interval_index == 1
    assert updated.next_review == now + delay_for_stage(1)
    assert updated.correct_count == 1
    assert updated.incorrect_count == 0
    assert updated.is_encountered is True
    assert updated.updated_at == now


def test_incorrect_answer_demotes_a_single_stage(now: datetime) -> None:
    card = _card(interval_index=3, incorrect_count=2, is_encountered=True)

    updated = schedule_review(card, False, now)

    assert updated.interval_index == 2
    assert updated.incorrect_count == 3
    assert updated.next_review == now + delay_for_stage(2)


def test_schedule_does_not_mutate_the_input(now: datetime) -> None:
    card = _card(interval_index=2)

    schedule_review(card, True, now)

    assert card.interval_index == 2
    assert card.correct_count == 0
    assert card.is_encountered is False


def test_repeated_correct_answers_never_pass_the_top_stage(now: datetime) -> None:
    card = _card()
    stages = []
    for day in range(12):
        card = schedule_review(card, True, now + timedelta(days=day))
        stages.append(card.interval_index)

    assert stages == sorted(stages)
    assert stages[-1] == MAX_STAGE
    assert card.correct_count == 12


def test_repeated_incorrect_answers_stop_at_stage_zero(now: datetime) -> None:
    card = _card(interval_index=2, is_encountered=True)
    for _ in range(5):
        card = schedule_review(card, False, now)
        assert card.interval_index >= 0

    assert card.interval_index == 0
    assert card.next_review == now + delay_for_stage(0)
    assert card.correct_count + card.incorrect_count == 5


def test_corrupted_stage_is_clamped_before_scheduling(now: datetime) -> None:
    negative = _card(interval_index=-4)
    too_high = _card(interval_index=42)

    assert negative.interval_index == 0
    assert schedule_review(too_high, True, now).interval_index == MAX_STAGE
    assert schedule_review(negative, False, now).interval_index == 0


def test_naive_now_is_treated_as_utc() -> None:
    naive = datetime(2024, 3, 1, 12, 0)

    updated = schedule_review(_card(), True, naive)

    assert updated.updated_at == naive.replace(tzinfo=timezone.utc)

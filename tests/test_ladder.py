from datetime import timedelta

import pytest

from src.learning.ladder import INTERVALS, MAX_STAGE, clamp_stage, delay_for_stage


def test_ladder_has_eight_increasing_stages() -> None:
    assert MAX_STAGE == 7
    assert list(INTERVALS) == sorted(INTERVALS)
    assert delay_for_stage(0) == timedelta(days=1)
    assert delay_for_stage(MAX_STAGE) == timedelta(days=240)


@pytest.mark.parametrize(
    ("stage", "expected"),
    [(-10, 0), (-1, 0), (0, 0), (4, 4), (7, 7), (8, 7), (1000, 7)],
)
def test_clamp_stage_keeps_cards_on_the_ladder(stage: int, expected: int) -> None:
    assert clamp_stage(stage) == expected


def test_out_of_range_delay_uses_nearest_stage() -> None:
    assert delay_for_stage(-3) == delay_for_stage(0)
    assert delay_for_stage(99) == delay_for_stage(MAX_STAGE)

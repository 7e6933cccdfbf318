"""Fixed review-delay ladder used by the scheduler."""

from __future__ import annotations

from datetime import timedelta


INTERVAL_DAYS = (1, 3, 7, 14, 30, 60, 120, 240)
INTERVALS: tuple[timedelta, ...] = tuple(timedelta(days=days) for days in INTERVAL_DAYS)
MAX_STAGE = len(INTERVALS) - 1


def clamp_stage(stage: int) -> int:
    """Force a stage index back onto the ladder."""
    return max(0, min(MAX_STAGE, int(stage)))


def delay_for_stage(stage: int) -> timedelta:
    """Return the review delay for a ladder stage, clamping out-of-range stages."""
    return INTERVALS[clamp_stage(stage)]

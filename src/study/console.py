"""Terminal front end for running a study session."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from src.learning.experience import progress_within_level
from src.learning.ladder import INTERVAL_DAYS
from src.learning.streaks import split_duration

from .workflow import CompletionResult, PersistenceUnavailable, StudyWorkflow


LOGGER = logging.getLogger(__name__)

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

_YES = {"y", "yes", "1", "+"}
_NO = {"n", "no", "0", "-"}
_QUIT = {"q", "quit", "exit"}


def _describe_interval(stage: int) -> str:
    days = INTERVAL_DAYS[stage]
    if days == 1:
        return "tomorrow"
    return f"in {days} days"


async def _prompt(input_fn: InputFn, message: str) -> str:
    # input() blocks, so keep it off the event loop.
    return (await asyncio.to_thread(input_fn, message)).strip().lower()


async def _ask_recall(input_fn: InputFn, output_fn: OutputFn) -> Optional[bool]:
    while True:
        reply = await _prompt(input_fn, "Did you remember it? [y/n/q] ")
        if reply in _YES:
            return True
        if reply in _NO:
            return False
        if reply in _QUIT:
            return None
        output_fn("Please answer y, n or q.")


def format_completion(result: CompletionResult) -> str:
    summary = result.summary
    level = progress_within_level(result.progress.xp)
    lines = [
        "Session complete.",
        f"Correct: {summary.correct}  Incorrect: {summary.incorrect}  Accuracy: {summary.accuracy}%",
        f"XP earned: {summary.xp}  Level: {summary.level} ({level.current}/{level.needed}, {level.percent}%)",
    ]
    if result.streak is not None:
        lines.append(
            f"Day streak: {result.streak.current_streak} (longest {result.streak.longest_streak})"
        )
    if not result.save.ok:
        lines.append(f"Warning: {result.save.error}")
    return "\n".join(lines)


async def run_console_session(
    workflow: StudyWorkflow,
    input_fn: InputFn = input,
    output_fn: OutputFn = print,
) -> Optional[CompletionResult]:
    """Study today's cards interactively; quitting early keeps what was already answered."""
    try:
        study = await workflow.start()
    except PersistenceUnavailable as exc:
        output_fn(str(exc))
        return None

    if not study.deck:
        left = split_duration(workflow.countdown())
        output_fn("No cards are due right now. Nice work!")
        output_fn(f"New day starts in {left.hours:02d}:{left.minutes:02d}:{left.seconds:02d}.")
        return None

    output_fn(f"{len(study.deck)} cards to study today.")
    while not study.is_finished:
        card = study.current_card
        output_fn("")
        output_fn(f"[{study.position + 1}/{len(study.deck)}] {card.question}")
        await _prompt(input_fn, "Press Enter to show the answer... ")
        output_fn(f"Answer: {card.answer}")

        recalled = await _ask_recall(input_fn, output_fn)
        if recalled is None:
            LOGGER.info("Session abandoned with %d cards left.", study.remaining)
            saved = await workflow.abandon(study)
            if saved.ok:
                output_fn("Session stopped. Answered cards and earned XP are saved.")
            else:
                output_fn(f"Session stopped. Warning: {saved.error}")
            return None

        result = await workflow.answer(study, recalled)
        earned = result.outcome.xp_earned
        output_fn(
            f"{'Correct' if recalled else 'Not quite'} (+{earned} XP). "
            f"Next review {_describe_interval(result.outcome.after.interval_index)}."
        )
        if not result.save.ok:
            output_fn(f"Warning: {result.save.error}")

    if workflow.has_pending_writes:
        retry = await workflow.retry_pending()
        if not retry.ok:
            LOGGER.warning("Some card updates are still unsaved: %s", retry.error)

    completion = await workflow.complete(study)
    output_fn("")
    output_fn(format_completion(completion))
    return completion

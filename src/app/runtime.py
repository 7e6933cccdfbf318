"""Bootstrap logic for running a study session."""

from __future__ import annotations

import asyncio
import logging

from src.app.settings import AppSettings
from src.db import get_engine, get_session_factory, run_migrations_if_needed
from src.db.progress import upsert_learner
from src.study import StudyWorkflow, run_console_session


LOGGER = logging.getLogger(__name__)


def _configure_logging(log_level: str) -> None:
    """Set up project-wide logging configuration."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        level=log_level,
    )


async def _study(settings: AppSettings) -> None:
    session_factory = get_session_factory()
    async with session_factory() as session:
        async with session.begin():
            await upsert_learner(session, settings.learner_id, settings.learner_name)

    workflow = StudyWorkflow(
        session_factory,
        settings.learner_id,
        config=settings.session_config,
        tz=settings.tzinfo,
    )
    try:
        await run_console_session(workflow)
    finally:
        await get_engine().dispose()


def run_study(settings: AppSettings) -> None:
    """Run one interactive study session using the provided settings."""
    _configure_logging(settings.log_level)
    print(f"{settings.app_name} is running in {settings.app_env} mode.")

    try:
        run_migrations_if_needed()
    except Exception:
        LOGGER.exception("Database migrations failed. Aborting startup.")
        raise

    LOGGER.info("Starting study session for learner %s.", settings.learner_id)
    asyncio.run(_study(settings))

"""Configuration helpers for the Study Sync runtime."""

from __future__ import annotations

import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from src.learning.selection import DEFAULT_CONFIG, SessionConfig


DEFAULT_TIMEZONE = "UTC"


def _int_from_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer.") from exc


@dataclass(frozen=True)
class AppSettings:
    """Strongly typed application settings loaded from environment variables."""

    app_name: str
    app_env: str
    log_level: str
    learner_id: int
    learner_name: str | None
    max_reviews_per_day: int
    max_new_per_day: int
    timezone: str

    @property
    def session_config(self) -> SessionConfig:
        return SessionConfig(
            max_reviews_per_day=self.max_reviews_per_day,
            max_new_per_day=self.max_new_per_day,
        )

    @property
    def tzinfo(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    @classmethod
    def from_env(cls) -> AppSettings:
        """Construct settings directly from environment variables."""
        app_name = os.getenv("APP_NAME", "Study Sync")
        app_env = os.getenv("APP_ENV", "development")
        log_level = os.getenv("LOG_LEVEL", "INFO")
        learner_name = os.getenv("LEARNER_NAME") or None

        raw_learner_id = os.getenv("LEARNER_ID")
        if not raw_learner_id:
            raise RuntimeError("LEARNER_ID environment variable is required to start a study session.")
        try:
            learner_id = int(raw_learner_id)
        except ValueError as exc:
            raise RuntimeError("LEARNER_ID must be an integer.") from exc

        max_reviews_per_day = _int_from_env("MAX_REVIEWS_PER_DAY", DEFAULT_CONFIG.max_reviews_per_day)
        max_new_per_day = _int_from_env("MAX_NEW_PER_DAY", DEFAULT_CONFIG.max_new_per_day)
        if max_reviews_per_day < 0 or max_new_per_day < 0:
            raise RuntimeError("MAX_REVIEWS_PER_DAY and MAX_NEW_PER_DAY must not be negative.")

        timezone_name = os.getenv("STUDY_TIMEZONE", DEFAULT_TIMEZONE)
        try:
            ZoneInfo(timezone_name)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise RuntimeError(f"STUDY_TIMEZONE {timezone_name!r} is not a known timezone.") from exc

        return cls(
            app_name=app_name,
            app_env=app_env,
            log_level=log_level,
            learner_id=learner_id,
            learner_name=learner_name,
            max_reviews_per_day=max_reviews_per_day,
            max_new_per_day=max_new_per_day,
            timezone=timezone_name,
        )

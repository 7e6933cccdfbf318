"""Application bootstrap helpers for the Study Sync scheduler."""

from .runtime import run_study
from .settings import AppSettings

__all__ = ["run_study", "AppSettings"]

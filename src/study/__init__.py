"""Study session components for the Study Sync scheduler."""

from .console import run_console_session
from .workflow import SaveResult, StudyWorkflow

__all__ = ["run_console_session", "SaveResult", "StudyWorkflow"]

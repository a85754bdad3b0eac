"""Progress state: session lifecycle, scoring, persistence and views."""

from .merger import apply_submission, create_submission, replay
from .session import SessionManager, SessionState
from .sync import ProgressSynchronizer
from .view import DifficultyStats, ProgressView, StatusFilter

__all__ = [
    "apply_submission",
    "create_submission",
    "replay",
    "SessionManager",
    "SessionState",
    "ProgressSynchronizer",
    "DifficultyStats",
    "ProgressView",
    "StatusFilter",
]

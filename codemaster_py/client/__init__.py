"""Client module for the progress store and judging oracle."""

from .judge import JudgeClient
from .store import StoreClient
from .models import (
    Difficulty,
    Problem,
    ProgressRecord,
    Submission,
    TestCase,
    TestCaseResult,
    TestStatus,
    Verdict,
    VerdictStatus,
)

__all__ = [
    "JudgeClient",
    "StoreClient",
    "Difficulty",
    "Problem",
    "ProgressRecord",
    "Submission",
    "TestCase",
    "TestCaseResult",
    "TestStatus",
    "Verdict",
    "VerdictStatus",
]

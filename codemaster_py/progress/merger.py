"""Folding judged submissions into a progress record."""

import time
import uuid
from dataclasses import replace
from typing import Iterable, Optional

from ..client.models import ProgressRecord, Submission, Verdict


def create_submission(
    problem_id: str, code: str, verdict: Verdict, timestamp: Optional[int] = None
) -> Submission:
    """Build a new submission with a fresh id and a millisecond timestamp."""
    if timestamp is None:
        timestamp = int(time.time() * 1000)
    return Submission(
        id=uuid.uuid4().hex,
        problem_id=problem_id,
        code=code,
        timestamp=timestamp,
        verdict=verdict,
    )


def is_first_success(record: ProgressRecord, submission: Submission) -> bool:
    return submission.verdict.accepted and not record.is_solved(submission.problem_id)


def apply_submission(record: ProgressRecord, submission: Submission) -> ProgressRecord:
    """
    Return the record that results from submission.

    The submission is always prepended to the history. Only the first
    accepted submission of a problem adds its score and marks the problem
    solved, so re-applying a submission never counts twice.
    """
    if is_first_success(record, submission):
        return replace(
            record,
            points=record.points + submission.verdict.score,
            solved_problem_ids=record.solved_problem_ids + (submission.problem_id,),
            submissions=(submission,) + record.submissions,
        )
    return replace(record, submissions=(submission,) + record.submissions)


def replay(record: ProgressRecord, submissions: Iterable[Submission]) -> ProgressRecord:
    """Apply submissions in the order given (oldest first)."""
    for submission in submissions:
        record = apply_submission(record, submission)
    return record

"""Client for the external judging oracle."""

import logging
from dataclasses import replace
from typing import Any, Dict, Optional

import requests

from .models import Problem, Verdict, VerdictStatus
from ..errors import JudgeFailure


logger = logging.getLogger(__name__)

DEGRADED_FEEDBACK = (
    "An error occurred while connecting to the judging system. "
    "Please try again later."
)


def degraded_verdict() -> Verdict:
    """The verdict reported when the oracle could not judge a submission."""
    return Verdict(
        status=VerdictStatus.COMPILE_ERROR,
        score=0,
        feedback=DEGRADED_FEEDBACK,
        suggestions=(),
        optimized_code=None,
        test_results=(),
        degraded=True,
    )


class JudgeClient:
    """
    Sends one (problem, source) pair to the oracle per call.
    No retries; every failure becomes a degraded verdict.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    @staticmethod
    def build_request(problem: Problem, source: str) -> Dict[str, Any]:
        return {
            "problemId": problem.id,
            "title": problem.title,
            "description": problem.description,
            "constraints": list(problem.constraints),
            "testCases": [t.to_dict() for t in problem.test_cases],
            "code": source,
        }

    def evaluate(self, problem: Problem, source: str) -> Verdict:
        """Judge source against problem. Never raises."""
        try:
            return self._evaluate(problem, source)
        except JudgeFailure as e:
            logger.warning("Judge failure for %s: %s", problem.id, e)
            return degraded_verdict()
        except Exception:
            logger.exception("Unexpected judge failure for %s", problem.id)
            return degraded_verdict()

    def _evaluate(self, problem: Problem, source: str) -> Verdict:
        try:
            response = self.session.post(
                self.url,
                json=self.build_request(problem, source),
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise JudgeFailure(f"oracle unreachable: {e}") from e
        except ValueError as e:
            raise JudgeFailure("oracle returned invalid JSON") from e

        try:
            verdict = Verdict.from_dict(data)
        except (ValueError, TypeError, OverflowError) as e:
            raise JudgeFailure(f"malformed verdict: {e}") from e

        return self._check_against(problem, verdict)

    @staticmethod
    def _check_against(problem: Problem, verdict: Verdict) -> Verdict:
        """
        Reject results for test cases the problem does not have, scrub
        everything but pass/fail from hidden cases and round the score
        to a whole number within 0..100.
        """
        results = []
        for result in verdict.test_results:
            test = problem.test_case(result.test_case_id)
            if test is None:
                raise JudgeFailure(
                    f"verdict references unknown test case {result.test_case_id!r}"
                )
            if test.hidden:
                result = replace(result, actual_output="", message=None)
            results.append(result)

        score = int(round(min(max(verdict.score, 0), 100)))
        # An oracle cannot mark its own verdict as degraded
        return replace(
            verdict, score=score, test_results=tuple(results), degraded=False
        )

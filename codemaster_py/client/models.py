"""Data models for problems, verdicts and user progress.

Every model converts to and from the JSON documents exchanged with the
progress store and the judging oracle. Wire keys are camelCase.
"""

import copy
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


logger = logging.getLogger(__name__)


class Difficulty(str, Enum):
    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"


class VerdictStatus(str, Enum):
    ACCEPTED = "Accepted"
    WRONG_ANSWER = "Wrong Answer"
    TIME_LIMIT_EXCEEDED = "Time Limit Exceeded"
    COMPILE_ERROR = "Compilation Error"


class TestStatus(str, Enum):
    __test__ = False

    PASSED = "Passed"
    FAILED = "Failed"


def _finite_number(value: Any) -> Optional[float]:
    """Return value as float if it is a finite real number, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    if not math.isfinite(number):
        return None
    return number


def _plain_number(value: float) -> Union[int, float]:
    """Integral values as int, fractional ones unchanged."""
    return int(value) if value.is_integer() else value


def _require_str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string")
    return value


@dataclass(frozen=True)
class TestCase:
    """A single input/expected-output pair of a problem."""

    __test__ = False

    id: str
    input: str
    expected_output: str
    hidden: bool = False
    explanation: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TestCase":
        return cls(
            id=_require_str(data, "id"),
            input=_require_str(data, "input"),
            expected_output=_require_str(data, "output"),
            hidden=bool(data.get("hidden", False)),
            explanation=data.get("explanation"),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "input": self.input,
            "output": self.expected_output,
            "hidden": self.hidden,
        }
        if self.explanation:
            data["explanation"] = self.explanation
        return data


@dataclass(frozen=True)
class Problem:
    """Represents a problem of the practice catalog."""

    id: str
    title: str
    difficulty: Difficulty
    category: str
    description: str
    starter_code: str
    constraints: Tuple[str, ...] = ()
    test_cases: Tuple[TestCase, ...] = ()

    @property
    def public_tests(self) -> Tuple[TestCase, ...]:
        return tuple(t for t in self.test_cases if not t.hidden)

    def test_case(self, test_case_id: str) -> Optional[TestCase]:
        for test in self.test_cases:
            if test.id == test_case_id:
                return test
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Problem":
        try:
            difficulty = Difficulty(data.get("difficulty"))
        except ValueError:
            raise ValueError(f"unknown difficulty: {data.get('difficulty')!r}")

        test_cases = tuple(TestCase.from_dict(t) for t in data.get("testCases", []))
        ids = [t.id for t in test_cases]
        if len(ids) != len(set(ids)):
            raise ValueError(f"duplicate test case ids in problem {data.get('id')!r}")

        return cls(
            id=_require_str(data, "id"),
            title=_require_str(data, "title"),
            difficulty=difficulty,
            category=data.get("category", ""),
            description=data.get("description", ""),
            starter_code=data.get("initialCode", ""),
            constraints=tuple(data.get("constraints", [])),
            test_cases=test_cases,
        )


@dataclass(frozen=True)
class TestCaseResult:
    """Outcome of running a submission against one test case."""

    __test__ = False

    test_case_id: str
    status: TestStatus
    actual_output: str = ""
    execution_time: float = 0.0
    message: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status is TestStatus.PASSED

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TestCaseResult":
        if not isinstance(data, dict):
            raise ValueError("test result must be an object")
        try:
            status = TestStatus(data.get("status"))
        except ValueError:
            raise ValueError(f"unknown test status: {data.get('status')!r}")

        execution_time = _finite_number(data.get("executionTime", 0))
        if execution_time is None or execution_time < 0:
            raise ValueError("'executionTime' must be a non-negative number")

        message = data.get("message")
        return cls(
            test_case_id=_require_str(data, "testCaseId"),
            status=status,
            actual_output=str(data.get("actualOutput") or ""),
            execution_time=execution_time,
            message=str(message) if message is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "testCaseId": self.test_case_id,
            "status": self.status.value,
            "actualOutput": self.actual_output,
            "executionTime": self.execution_time,
            "message": self.message,
        }


@dataclass(frozen=True)
class Verdict:
    """
    Structured outcome of judging one submission.
    A degraded verdict stands in for a judge that could not be reached.
    """

    status: VerdictStatus
    score: Union[int, float]
    feedback: str = ""
    suggestions: Tuple[str, ...] = ()
    optimized_code: Optional[str] = None
    test_results: Tuple[TestCaseResult, ...] = ()
    degraded: bool = False

    @property
    def accepted(self) -> bool:
        return self.status is VerdictStatus.ACCEPTED

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Verdict":
        """Parse a verdict document, raising ValueError on any structural defect."""
        if not isinstance(data, dict):
            raise ValueError("verdict must be an object")

        try:
            status = VerdictStatus(data.get("status"))
        except ValueError:
            raise ValueError(f"unknown verdict status: {data.get('status')!r}")

        score = _finite_number(data.get("score"))
        if score is None:
            raise ValueError("'score' must be a finite number")

        suggestions = data.get("suggestions", [])
        if not isinstance(suggestions, list) or not all(
            isinstance(s, str) for s in suggestions
        ):
            raise ValueError("'suggestions' must be a list of strings")

        raw_results = data.get("testResults", [])
        if not isinstance(raw_results, list):
            raise ValueError("'testResults' must be a list")
        results = tuple(TestCaseResult.from_dict(r) for r in raw_results)
        ids = [r.test_case_id for r in results]
        if len(ids) != len(set(ids)):
            raise ValueError("duplicate test case ids in verdict")

        optimized = data.get("optimizedCode")
        return cls(
            status=status,
            score=_plain_number(score),
            feedback=str(data.get("feedback") or ""),
            suggestions=tuple(suggestions),
            optimized_code=optimized if isinstance(optimized, str) and optimized else None,
            test_results=results,
            degraded=bool(data.get("degraded", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "score": self.score,
            "feedback": self.feedback,
            "suggestions": list(self.suggestions),
            "optimizedCode": self.optimized_code or "",
            "testResults": [r.to_dict() for r in self.test_results],
            "degraded": self.degraded,
        }


@dataclass(frozen=True)
class Submission:
    """A judged solution; never modified once created."""

    id: str
    problem_id: str
    code: str
    timestamp: int
    verdict: Verdict
    # Document this submission was loaded from, written back unchanged
    source: Optional[Dict[str, Any]] = field(default=None, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Submission":
        if not isinstance(data, dict):
            raise ValueError("submission must be an object")
        timestamp = _finite_number(data.get("timestamp"))
        if timestamp is None:
            raise ValueError("'timestamp' must be a number")
        return cls(
            id=_require_str(data, "id"),
            problem_id=_require_str(data, "problemId"),
            code=_require_str(data, "code"),
            timestamp=int(timestamp),
            verdict=Verdict.from_dict(data.get("result")),
            source=copy.deepcopy(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        if self.source is not None:
            return copy.deepcopy(self.source)
        return {
            "id": self.id,
            "problemId": self.problem_id,
            "code": self.code,
            "timestamp": self.timestamp,
            "result": self.verdict.to_dict(),
        }


@dataclass(frozen=True)
class ProgressRecord:
    """
    Authoritative per-user progress.
    Submissions are kept newest-first; solved ids keep the order they were solved in.

    Stored history entries that cannot be read are kept in `unreadable`
    as (position counted from the oldest entry, raw entry) pairs and are
    written back in place. New submissions are only ever prepended, so
    that position stays valid.
    """

    username: str
    points: Union[int, float] = 0
    solved_problem_ids: Tuple[str, ...] = ()
    submissions: Tuple[Submission, ...] = field(default_factory=tuple)
    unreadable: Tuple[Tuple[int, Any], ...] = field(
        default_factory=tuple, compare=False, repr=False
    )

    @classmethod
    def new(cls, username: str) -> "ProgressRecord":
        return cls(username=username)

    def is_solved(self, problem_id: str) -> bool:
        return problem_id in self.solved_problem_ids

    def submissions_for(self, problem_id: str) -> Tuple[Submission, ...]:
        return tuple(s for s in self.submissions if s.problem_id == problem_id)

    @classmethod
    def from_dict(cls, data: Any) -> "ProgressRecord":
        """
        Load a stored record.
        Individual fields are coerced the same way the relay coerces writes:
        non-string solved ids are dropped and a negative or non-finite points
        value becomes 0. Submission entries that cannot be parsed are kept
        aside untouched.
        """
        if not isinstance(data, dict):
            raise ValueError("progress record must be an object")
        username = data.get("username")
        if not isinstance(username, str) or not username.strip():
            raise ValueError("progress record has no username")

        raw_solved = data.get("solvedProblemIds")
        solved = []
        if isinstance(raw_solved, list):
            for problem_id in raw_solved:
                if isinstance(problem_id, str) and problem_id not in solved:
                    solved.append(problem_id)

        points = _finite_number(data.get("points"))
        points = _plain_number(points) if points is not None and points > 0 else 0

        submissions = []
        unreadable = []
        raw_submissions = data.get("submissions")
        if isinstance(raw_submissions, list):
            total = len(raw_submissions)
            for index, entry in enumerate(raw_submissions):
                try:
                    submissions.append(Submission.from_dict(entry))
                except (ValueError, TypeError) as e:
                    logger.warning("Unreadable submission for %s kept as is: %s", username, e)
                    unreadable.append((total - 1 - index, copy.deepcopy(entry)))

        return cls(
            username=username,
            points=points,
            solved_problem_ids=tuple(solved),
            submissions=tuple(submissions),
            unreadable=tuple(unreadable),
        )

    def to_dict(self) -> Dict[str, Any]:
        total = len(self.submissions) + len(self.unreadable)
        entries: List[Any] = [None] * total
        taken = set()
        for from_oldest, raw in self.unreadable:
            index = total - 1 - from_oldest
            entries[index] = copy.deepcopy(raw)
            taken.add(index)
        readable = iter(self.submissions)
        for index in range(total):
            if index not in taken:
                entries[index] = next(readable).to_dict()
        return {
            "username": self.username,
            "points": self.points,
            "solvedProblemIds": list(self.solved_problem_ids),
            "submissions": entries,
        }

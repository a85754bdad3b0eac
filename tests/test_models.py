from dataclasses import replace

import pytest

from codemaster_py.client.models import (
    Difficulty,
    Problem,
    ProgressRecord,
    Submission,
    TestCaseResult,
    TestStatus,
    Verdict,
    VerdictStatus,
)


def submission_doc(**overrides):
    doc = {
        "id": "abc",
        "problemId": "two-sum",
        "code": "x",
        "timestamp": 1700000000000,
        "result": {
            "status": "Wrong Answer",
            "score": 0,
            "feedback": "Off by one",
            "suggestions": [],
            "optimizedCode": "",
        },
    }
    doc.update(overrides)
    return doc


def test_record_document_round_trip():
    record = ProgressRecord(
        username="alice",
        points=40,
        solved_problem_ids=("two-sum",),
        submissions=(
            Submission(
                id="s1",
                problem_id="two-sum",
                code="code",
                timestamp=1,
                verdict=Verdict(
                    status=VerdictStatus.ACCEPTED,
                    score=40,
                    feedback="ok",
                    suggestions=("none",),
                    optimized_code="better",
                    test_results=(
                        TestCaseResult("1", TestStatus.PASSED, "[0,1]", 1.5, None),
                    ),
                ),
            ),
        ),
    )

    assert ProgressRecord.from_dict(record.to_dict()) == record


def test_wire_format_uses_original_keys():
    doc = ProgressRecord.from_dict(
        {"username": "alice", "submissions": [submission_doc()]}
    ).to_dict()

    assert set(doc) == {"username", "points", "solvedProblemIds", "submissions"}
    assert doc["submissions"][0]["result"]["status"] == "Wrong Answer"
    assert doc["submissions"][0]["problemId"] == "two-sum"


def test_stored_record_is_coerced():
    record = ProgressRecord.from_dict(
        {
            "username": "alice",
            "points": "lots",
            "solvedProblemIds": ["two-sum", 3, None, "two-sum", "palindrome-number"],
            "submissions": "none",
        }
    )

    assert record.points == 0
    assert record.solved_problem_ids == ("two-sum", "palindrome-number")
    assert record.submissions == ()


def test_float_points_from_store_are_integral():
    assert ProgressRecord.from_dict({"username": "alice", "points": 40.0}).points == 40


def test_unreadable_submissions_are_kept_aside():
    record = ProgressRecord.from_dict(
        {
            "username": "alice",
            "submissions": [submission_doc(), "junk", submission_doc(result={"status": "?"})],
        }
    )

    assert [s.id for s in record.submissions] == ["abc"]
    assert [raw for _, raw in record.unreadable] == ["junk", submission_doc(result={"status": "?"})]


def test_stored_history_is_written_back_unchanged():
    doc = {
        "username": "alice",
        "points": 85.5,
        "solvedProblemIds": ["two-sum"],
        "submissions": [
            submission_doc(id="new", result={"status": "Accepted", "score": 85.5, "suggestions": [None]}),
            submission_doc(id="mid", extra="kept"),
            "junk",
            submission_doc(id="old", result={"status": "Accepted", "score": 85.5, "feedback": None}),
        ],
    }

    record = ProgressRecord.from_dict(doc)

    assert record.points == 85.5
    assert [s.id for s in record.submissions] == ["mid", "old"]
    assert record.submissions[1].verdict.score == 85.5
    assert record.to_dict() == doc


def test_unreadable_entries_keep_their_place_after_new_submissions():
    doc = {"username": "alice", "submissions": [submission_doc(id="b"), "junk", submission_doc(id="a")]}
    record = ProgressRecord.from_dict(doc)
    newer = Submission.from_dict(submission_doc(id="c"))

    updated = replace(record, submissions=(newer,) + record.submissions)

    assert [
        s if isinstance(s, str) else s["id"] for s in updated.to_dict()["submissions"]
    ] == ["c", "b", "junk", "a"]


def test_huge_numbers_do_not_overflow():
    record = ProgressRecord.from_dict(
        {"username": "alice", "points": 10 ** 400, "submissions": [submission_doc(timestamp=10 ** 400)]}
    )

    assert record.points == 0
    assert record.submissions == ()
    with pytest.raises(ValueError):
        Verdict.from_dict({"status": "Accepted", "score": 10 ** 400})


@pytest.mark.parametrize("doc", [None, [], "alice", {"points": 1}, {"username": "  "}])
def test_record_without_identity_is_malformed(doc):
    with pytest.raises(ValueError):
        ProgressRecord.from_dict(doc)


def test_verdict_rejects_non_list_suggestions():
    with pytest.raises(ValueError):
        Verdict.from_dict({"status": "Accepted", "score": 1, "suggestions": "be better"})


def test_verdict_rejects_boolean_score():
    with pytest.raises(ValueError):
        Verdict.from_dict({"status": "Accepted", "score": True})


def test_problem_from_catalog_document():
    problem = Problem.from_dict(
        {
            "id": "fizz",
            "title": "Fizz Buzz",
            "difficulty": "Easy",
            "category": "Math",
            "description": "Print numbers",
            "constraints": ["1 <= n <= 100"],
            "initialCode": "function fizz(n) {}",
            "testCases": [
                {"id": "1", "input": "3", "output": "Fizz"},
                {"id": "2", "input": "5", "output": "Buzz", "hidden": True},
            ],
        }
    )

    assert problem.difficulty is Difficulty.EASY
    assert [t.id for t in problem.public_tests] == ["1"]
    assert problem.test_case("2").hidden
    assert problem.test_case("9") is None


def test_problem_rejects_unknown_difficulty():
    with pytest.raises(ValueError):
        Problem.from_dict({"id": "x", "title": "X", "difficulty": "Brutal"})


def test_problem_rejects_duplicate_test_ids():
    with pytest.raises(ValueError):
        Problem.from_dict(
            {
                "id": "x",
                "title": "X",
                "difficulty": "Hard",
                "testCases": [
                    {"id": "1", "input": "", "output": ""},
                    {"id": "1", "input": "", "output": ""},
                ],
            }
        )

import json

import pytest

from codemaster_py.catalog import PROBLEMS, find_problem, load_catalog
from codemaster_py.errors import ProblemNotFound


def test_builtin_catalog_is_consistent():
    ids = [p.id for p in PROBLEMS]
    assert len(ids) == len(set(ids))
    for problem in PROBLEMS:
        assert problem.public_tests
        test_ids = [t.id for t in problem.test_cases]
        assert len(test_ids) == len(set(test_ids))


def test_load_catalog_defaults_to_builtin():
    assert load_catalog() is PROBLEMS


def test_load_catalog_from_file(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps(
            [
                {
                    "id": "sum",
                    "title": "Sum",
                    "difficulty": "Hard",
                    "testCases": [{"id": "1", "input": "1 2", "output": "3"}],
                }
            ]
        ),
        encoding="utf-8",
    )

    catalog = load_catalog(path)

    assert [p.id for p in catalog] == ["sum"]
    assert find_problem(catalog, "sum").title == "Sum"


def test_load_catalog_rejects_duplicate_ids(tmp_path):
    path = tmp_path / "catalog.json"
    entry = {"id": "sum", "title": "Sum", "difficulty": "Easy"}
    path.write_text(json.dumps([entry, entry]), encoding="utf-8")

    with pytest.raises(ValueError):
        load_catalog(path)


def test_find_problem_unknown_id():
    with pytest.raises(ProblemNotFound):
        find_problem(PROBLEMS, "three-sum")

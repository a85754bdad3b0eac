import asyncio

from codemaster_py.client.models import Difficulty, ProgressRecord
from codemaster_py.progress.merger import create_submission
from codemaster_py.progress.view import (
    DifficultyStats,
    ProgressView,
    StatusFilter,
    difficulty_stats,
    filter_problems,
)

from conftest import accepted, make_practice


def ids(problems):
    return [p.id for p in problems]


def test_difficulty_stats(catalog):
    stats = difficulty_stats(catalog, frozenset({"two-sum", "reverse-linked-list"}))

    assert stats[Difficulty.EASY] == DifficultyStats(solved=1, total=2)
    assert stats[Difficulty.MEDIUM] == DifficultyStats(solved=1, total=1)
    assert stats[Difficulty.HARD] == DifficultyStats(solved=0, total=0)


def test_stats_are_memoized(catalog):
    solved = frozenset({"two-sum"})

    assert difficulty_stats(catalog, solved) is difficulty_stats(catalog, solved)


def test_search_is_case_insensitive_substring(catalog):
    assert ids(filter_problems(catalog, frozenset(), "  NUMBER ")) == ["palindrome-number"]
    assert ids(filter_problems(catalog, frozenset(), "")) == ids(catalog)


def test_status_filter(catalog):
    solved = frozenset({"palindrome-number"})

    assert ids(filter_problems(catalog, solved, status=StatusFilter.SOLVED)) == [
        "palindrome-number"
    ]
    assert ids(filter_problems(catalog, solved, status=StatusFilter.UNSOLVED)) == [
        "two-sum",
        "reverse-linked-list",
    ]


def test_filters_combine(catalog):
    solved = frozenset({"two-sum"})

    result = filter_problems(
        catalog, solved, "s", StatusFilter.UNSOLVED, Difficulty.MEDIUM
    )

    assert ids(result) == ["reverse-linked-list"]
    assert filter_problems(catalog, solved, "two", StatusFilter.UNSOLVED) == ()


def test_view_without_record(catalog):
    view = ProgressView(catalog)
    view.update(None)

    assert view.stats[Difficulty.EASY].solved == 0
    assert ids(view.problems) == ids(catalog)


def test_view_follows_session(store):
    practice = make_practice(store)

    async def scenario():
        await practice.session.boot()
        await practice.session.login("alice")
        practice.session.apply(create_submission("two-sum", "x", accepted()))

    asyncio.run(scenario())

    practice.view.status = StatusFilter.SOLVED
    assert ids(practice.view.problems) == ["two-sum"]
    assert practice.view.stats[Difficulty.EASY].solved == 1


def test_view_ignores_unknown_solved_ids(catalog):
    view = ProgressView(catalog)
    view.update(ProgressRecord(username="a", solved_problem_ids=("retired-problem",)))

    assert sum(s.solved for s in view.stats.values()) == 0

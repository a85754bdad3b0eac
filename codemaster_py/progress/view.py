"""Read-only projections of progress over the catalog."""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional, Tuple

from ..client.models import Difficulty, Problem, ProgressRecord


class StatusFilter(str, Enum):
    ALL = "all"
    SOLVED = "solved"
    UNSOLVED = "unsolved"


@dataclass(frozen=True)
class DifficultyStats:
    solved: int
    total: int


@lru_cache(maxsize=16)
def difficulty_stats(
    catalog: Tuple[Problem, ...], solved: FrozenSet[str]
) -> Mapping[Difficulty, DifficultyStats]:
    """Solved and total problem counts for every difficulty."""
    stats = {}
    for difficulty in Difficulty:
        problems = [p for p in catalog if p.difficulty is difficulty]
        stats[difficulty] = DifficultyStats(
            solved=sum(1 for p in problems if p.id in solved),
            total=len(problems),
        )
    return MappingProxyType(stats)


@lru_cache(maxsize=64)
def filter_problems(
    catalog: Tuple[Problem, ...],
    solved: FrozenSet[str],
    search: str = "",
    status: StatusFilter = StatusFilter.ALL,
    difficulty: Optional[Difficulty] = None,
) -> Tuple[Problem, ...]:
    """Problems matching every given filter, in catalog order."""
    needle = search.strip().lower()
    matches = []
    for problem in catalog:
        if needle and needle not in problem.title.lower():
            continue
        if status is StatusFilter.SOLVED and problem.id not in solved:
            continue
        if status is StatusFilter.UNSOLVED and problem.id in solved:
            continue
        if difficulty is not None and problem.difficulty is not difficulty:
            continue
        matches.append(problem)
    return tuple(matches)


class ProgressView:
    """
    View model over the catalog and the active record's solved set.
    Subscribe update() to the session to keep it current.
    """

    def __init__(self, catalog: Tuple[Problem, ...]):
        self.catalog = tuple(catalog)
        self.search = ""
        self.status = StatusFilter.ALL
        self.difficulty: Optional[Difficulty] = None
        self._solved: FrozenSet[str] = frozenset()

    def update(self, record: Optional[ProgressRecord]) -> None:
        self._solved = frozenset(record.solved_problem_ids) if record else frozenset()

    def is_solved(self, problem_id: str) -> bool:
        return problem_id in self._solved

    @property
    def stats(self) -> Mapping[Difficulty, DifficultyStats]:
        return difficulty_stats(self.catalog, self._solved)

    @property
    def problems(self) -> Tuple[Problem, ...]:
        return filter_problems(
            self.catalog, self._solved, self.search, self.status, self.difficulty
        )

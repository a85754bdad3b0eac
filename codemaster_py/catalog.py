"""The static problem catalog."""

import json
from pathlib import Path
from typing import Optional, Tuple

from .client.models import Difficulty, Problem, TestCase
from .errors import ProblemNotFound

Catalog = Tuple[Problem, ...]


PROBLEMS: Catalog = (
    Problem(
        id="two-sum",
        title="Two Sum",
        difficulty=Difficulty.EASY,
        category="Array",
        description=(
            "Given an array of integers `nums` and an integer `target`, return the "
            "indices of the two numbers that add up to `target`. You may assume each "
            "input has exactly one solution, and you may not use the same element twice."
        ),
        constraints=(
            "2 <= nums.length <= 10^4",
            "-10^9 <= nums[i] <= 10^9",
            "-10^9 <= target <= 10^9",
        ),
        starter_code="function twoSum(nums, target) {\n  // Write your code here\n  \n}",
        test_cases=(
            TestCase(
                id="1",
                input="nums = [2,7,11,15], target = 9",
                expected_output="[0,1]",
                explanation="Because nums[0] + nums[1] == 9, we return [0, 1].",
            ),
            TestCase(id="2", input="nums = [3,2,4], target = 6", expected_output="[1,2]", hidden=True),
            TestCase(id="3", input="nums = [3,3], target = 6", expected_output="[0,1]", hidden=True),
        ),
    ),
    Problem(
        id="palindrome-number",
        title="Palindrome Number",
        difficulty=Difficulty.EASY,
        category="Math",
        description=(
            "Check whether an integer `x` is a palindrome. An integer is a palindrome "
            "when it reads the same forward and backward."
        ),
        constraints=("-2^31 <= x <= 2^31 - 1",),
        starter_code="function isPalindrome(x) {\n  // Write your code here\n  \n}",
        test_cases=(
            TestCase(
                id="1",
                input="x = 121",
                expected_output="true",
                explanation="121 reads as 121 from left to right and from right to left.",
            ),
            TestCase(
                id="2",
                input="x = -121",
                expected_output="false",
                explanation="From left to right it reads -121, from right to left 121-.",
            ),
            TestCase(id="3", input="x = 10", expected_output="false", hidden=True),
            TestCase(id="4", input="x = 0", expected_output="true", hidden=True),
        ),
    ),
    Problem(
        id="reverse-linked-list",
        title="Reverse Linked List",
        difficulty=Difficulty.MEDIUM,
        category="Linked List",
        description=(
            "Given the head of a singly linked list, reverse the list and return "
            "the reversed list."
        ),
        constraints=(
            "The number of nodes in the list is in the range [0, 5000]",
            "-5000 <= Node.val <= 5000",
        ),
        starter_code=(
            "/**\n"
            " * Definition for singly-linked list.\n"
            " * function ListNode(val, next) {\n"
            " *     this.val = (val===undefined ? 0 : val)\n"
            " *     this.next = (next===undefined ? null : next)\n"
            " * }\n"
            " */\n"
            "/**\n"
            " * @param {ListNode} head\n"
            " * @return {ListNode}\n"
            " */\n"
            "function reverseList(head) {\n  \n}"
        ),
        test_cases=(
            TestCase(id="1", input="head = [1,2,3,4,5]", expected_output="[5,4,3,2,1]"),
            TestCase(id="2", input="head = [1,2]", expected_output="[2,1]", hidden=True),
            TestCase(id="3", input="head = []", expected_output="[]", hidden=True),
        ),
    ),
)


def load_catalog(path: Optional[Path] = None) -> Catalog:
    """
    Load a catalog from a JSON list of problems.
    Falls back to the built-in catalog when no path is given.
    """
    if path is None:
        return PROBLEMS

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: catalog must be a JSON list of problems")

    problems = tuple(Problem.from_dict(p) for p in data)
    ids = [p.id for p in problems]
    if len(ids) != len(set(ids)):
        raise ValueError(f"{path}: duplicate problem ids in catalog")
    return problems


def find_problem(catalog: Catalog, problem_id: str) -> Problem:
    for problem in catalog:
        if problem.id == problem_id:
            return problem
    raise ProblemNotFound(f"No problem with id '{problem_id}'")

from pathlib import Path

import pytest
from click.testing import CliRunner

from codemaster_py import cli as cli_module
from codemaster_py.cli import cli
from codemaster_py.client.models import (
    ProgressRecord,
    TestCaseResult,
    TestStatus,
    Verdict,
    VerdictStatus,
)
from codemaster_py.config import LocalConfig
from codemaster_py.utils import terminal

from conftest import FakeJudge, MemoryRemembered, MemoryStore, accepted, make_practice, rejected


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setattr(terminal.console, "width", 200)
    store = MemoryStore()
    remembered = MemoryRemembered()
    judge = FakeJudge(rejected(), accepted(40))
    monkeypatch.setattr(
        cli_module,
        "_practice",
        lambda: make_practice(store, judge=judge, remembered=remembered, delay=10),
    )
    return store, remembered, judge


def invoke(*args, input=None):
    runner = CliRunner()
    with runner.isolated_filesystem():
        with open("two-sum.js", "w", encoding="utf-8") as f:
            f.write("function twoSum() {}")
        return runner.invoke(cli, list(args), input=input)


def test_login_creates_user(env):
    store, remembered, _ = env

    result = invoke("login", "alice")

    assert result.exit_code == 0
    assert "Successfully logged in as alice" in result.output
    assert remembered.get() == "alice"
    assert "alice" in store.documents


def test_commands_require_login(env):
    result = invoke("info")

    assert result.exit_code == 0
    assert "Not logged in" in result.output


def test_login_failure_exits_nonzero(env):
    store, _, _ = env
    store.fail_get = True

    result = invoke("login", "alice")

    assert result.exit_code == 1
    assert "Cannot connect" in result.output


def test_submit_scores_and_syncs(env):
    store, remembered, judge = env
    store.documents["alice"] = ProgressRecord.new("alice").to_dict()
    remembered.set("alice")

    first = invoke("submit", "two-sum.js")
    second = invoke("submit", "two-sum.js")

    assert first.exit_code == 0
    assert "Wrong Answer" in first.output
    assert second.exit_code == 0
    assert "+40 points" in second.output
    assert store.documents["alice"]["points"] == 40
    assert len(store.documents["alice"]["submissions"]) == 2
    assert judge.calls[0] == ("two-sum", "function twoSum() {}")


def test_submit_unknown_problem(env):
    _, remembered, _ = env
    env[0].documents["alice"] = ProgressRecord.new("alice").to_dict()
    remembered.set("alice")

    result = invoke("submit", "two-sum.js", "-p", "three-sum")

    assert result.exit_code == 1
    assert "three-sum" in result.output


def test_problems_filters(env):
    result = invoke("problems", "--difficulty", "medium")

    assert result.exit_code == 0
    assert "reverse-linked-list" in result.output
    assert "two-sum" not in result.output


def test_logout_keeps_store(env):
    store, remembered, _ = env
    store.documents["alice"] = ProgressRecord.new("alice").to_dict()
    remembered.set("alice")

    result = invoke("logout", input="y\n")

    assert result.exit_code == 0
    assert remembered.get() is None
    assert "alice" in store.documents


def test_submit_prints_feedback_with_brackets_verbatim(env):
    store, remembered, judge = env
    store.documents["alice"] = ProgressRecord.new("alice").to_dict()
    remembered.set("alice")
    judge.verdicts = [
        Verdict(
            status=VerdictStatus.ACCEPTED,
            score=40,
            feedback="Close the [/i] tag and prefer arr[i] over [bold]",
            suggestions=("Use a [red] map",),
            test_results=(
                TestCaseResult("1", TestStatus.PASSED, "[0,1]", 1.0, "[/]"),
            ),
        )
    ]

    result = invoke("submit", "two-sum.js")

    assert result.exit_code == 0, result.output
    assert "Close the [/i] tag and prefer arr[i] over [bold]" in result.output
    assert "Use a [red] map" in result.output
    assert store.documents["alice"]["points"] == 40


def test_configure_saves_directory_settings(env, monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    runner = CliRunner()
    with runner.isolated_filesystem():
        with open("catalog.json", "w", encoding="utf-8") as f:
            f.write("[]")

        result = runner.invoke(
            cli, ["configure", "--catalog", "catalog.json", "--default-problem", "two-sum"]
        )
        local = LocalConfig.load(Path.cwd() / ".codemaster_py.local")

    assert result.exit_code == 0, result.output
    assert "Directory settings saved" in result.output
    assert "Default problem: two-sum" in result.output
    assert local.default_problem == "two-sum"
    assert local.catalog.endswith("catalog.json")
    assert not (tmp_path / ".codemaster_py.global").exists()


def test_error_messages_are_printed_verbatim(env):
    store, remembered, _ = env
    store.documents["alice"] = ProgressRecord.new("alice").to_dict()
    remembered.set("alice")

    result = invoke("submit", "two-sum.js", "-p", "[/oops]")

    assert result.exit_code == 1
    assert "No problem with id '[/oops]'" in result.output

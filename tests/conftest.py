import threading
import time

import pytest

from codemaster_py.catalog import PROBLEMS
from codemaster_py.client.models import (
    ProgressRecord,
    TestCaseResult,
    TestStatus,
    Verdict,
    VerdictStatus,
)
from codemaster_py.errors import StoreError
from codemaster_py.practice import Practice


class MemoryStore:
    """Progress store that keeps JSON documents in a dict and echoes writes."""

    def __init__(self, write_delay: float = 0.0):
        self.documents = {}
        self.writes = []
        self.fail_get = False
        self.fail_put = False
        self.write_delay = write_delay
        self.active_writes = 0
        self.max_active_writes = 0
        self._lock = threading.Lock()

    def get_user(self, username):
        if self.fail_get:
            raise StoreError("store unreachable")
        data = self.documents.get(username)
        return ProgressRecord.from_dict(data) if data is not None else None

    def save_user(self, record):
        with self._lock:
            self.active_writes += 1
            self.max_active_writes = max(self.max_active_writes, self.active_writes)
        try:
            if self.write_delay:
                time.sleep(self.write_delay)
            if self.fail_put:
                raise StoreError("HTTP 503 Service Unavailable")
            self.writes.append(record)
            self.documents[record.username] = record.to_dict()
        finally:
            with self._lock:
                self.active_writes -= 1


class FakeJudge:
    """Returns queued verdicts in order; the last one repeats."""

    def __init__(self, *verdicts):
        self.verdicts = list(verdicts) or [accepted(40)]
        self.calls = []

    def evaluate(self, problem, source):
        self.calls.append((problem.id, source))
        if len(self.verdicts) > 1:
            return self.verdicts.pop(0)
        return self.verdicts[0]


class BlockingJudge:
    """Judge that waits for release() before answering."""

    def __init__(self, verdict=None):
        self.verdict = verdict or accepted(40)
        self.released = threading.Event()

    def release(self):
        self.released.set()

    def evaluate(self, problem, source):
        self.released.wait(5)
        return self.verdict


class MemoryRemembered:
    def __init__(self, username=None):
        self.username = username

    def get(self):
        return self.username

    def set(self, username):
        self.username = username

    def clear(self):
        self.username = None


def accepted(score=40, results=()):
    return Verdict(status=VerdictStatus.ACCEPTED, score=score, test_results=tuple(results))


def rejected(status=VerdictStatus.WRONG_ANSWER):
    return Verdict(
        status=status,
        score=0,
        test_results=(TestCaseResult(test_case_id="1", status=TestStatus.FAILED),),
    )


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def remembered():
    return MemoryRemembered()


@pytest.fixture
def catalog():
    return PROBLEMS


def make_practice(store, judge=None, remembered=None, delay=0.05):
    return Practice.create(
        store,
        judge or FakeJudge(),
        remembered if remembered is not None else MemoryRemembered(),
        catalog=PROBLEMS,
        sync_delay=delay,
    )

"""Session lifecycle: restoring, logging in and out, and submitting."""

import asyncio
import logging
from enum import Enum
from typing import Callable, List, Optional

from .merger import apply_submission, create_submission
from ..client.models import Problem, ProgressRecord, Submission
from ..errors import (
    AuthFailure,
    CodeMasterError,
    NotAuthenticated,
    StoreError,
    SubmissionInProgress,
)


logger = logging.getLogger(__name__)

RecordListener = Callable[[Optional[ProgressRecord]], None]


class SessionState(str, Enum):
    BOOTING = "booting"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class SessionManager:
    """
    Owns the active user's progress record.

    Every change of the record, including the record appearing at login and
    disappearing at logout, is published to subscribed listeners. The record
    is only ever replaced, never mutated in place.
    """

    def __init__(self, store, judge, remembered):
        self.store = store
        self.judge = judge
        self.remembered = remembered
        self.state = SessionState.BOOTING
        self._record: Optional[ProgressRecord] = None
        self._listeners: List[RecordListener] = []
        self._evaluating = False

    @property
    def record(self) -> Optional[ProgressRecord]:
        return self._record

    @property
    def username(self) -> Optional[str]:
        return self._record.username if self._record else None

    @property
    def evaluating(self) -> bool:
        return self._evaluating

    def subscribe(self, listener: RecordListener) -> Callable[[], None]:
        """Register listener for record changes. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, record: Optional[ProgressRecord]) -> None:
        self._record = record
        for listener in list(self._listeners):
            listener(record)

    def _remember(self, username: Optional[str]) -> None:
        try:
            if username:
                self.remembered.set(username)
            else:
                self.remembered.clear()
        except OSError as e:
            logger.warning("Could not update remembered user: %s", e)

    def _require_record(self) -> ProgressRecord:
        if self.state is not SessionState.AUTHENTICATED or self._record is None:
            raise NotAuthenticated("Not logged in. Please login first.")
        return self._record

    async def boot(self) -> Optional[ProgressRecord]:
        """
        Restore the remembered user, if any.
        Any failure forgets the remembered user and leaves the session anonymous.
        """
        if self.state is not SessionState.BOOTING:
            raise CodeMasterError("Session has already booted")

        username = self.remembered.get()
        if not username:
            self.state = SessionState.ANONYMOUS
            return None

        try:
            record = await asyncio.to_thread(self.store.get_user, username)
        except StoreError as e:
            logger.warning("Could not restore session for %s: %s", username, e)
            record = None

        if record is None:
            logger.info("No stored progress for remembered user %s", username)
            self._remember(None)
            self.state = SessionState.ANONYMOUS
            return None

        self.state = SessionState.AUTHENTICATED
        self._publish(record)
        logger.info("Restored session for %s", username)
        return record

    async def login(self, username: str) -> ProgressRecord:
        """
        Load or create the record for username and authenticate with it.
        Raises AuthFailure if the store is unusable; the session stays anonymous.
        """
        if self.state is SessionState.BOOTING:
            raise CodeMasterError("Session has not booted yet")
        if self.state is SessionState.AUTHENTICATED:
            raise AuthFailure(f"Already logged in as {self.username}. Log out first.")

        name = (username or "").strip()
        if not name:
            raise AuthFailure("Username must not be empty")

        try:
            record = await asyncio.to_thread(self.store.get_user, name)
            if record is None:
                record = ProgressRecord.new(name)
                await asyncio.to_thread(self.store.save_user, record)
                logger.info("Created progress record for %s", name)
        except StoreError as e:
            raise AuthFailure(f"Cannot connect to the progress store: {e}") from e

        self._remember(name)
        self.state = SessionState.AUTHENTICATED
        self._publish(record)
        return record

    def logout(self) -> None:
        """
        End the session. The caller is responsible for confirming first.
        The stored record is left untouched.
        """
        record = self._require_record()
        self.state = SessionState.ANONYMOUS
        self._remember(None)
        self._publish(None)
        logger.info("Logged out %s", record.username)

    def apply(self, submission: Submission) -> ProgressRecord:
        """Fold a judged submission into the active record."""
        record = apply_submission(self._require_record(), submission)
        self._publish(record)
        return record

    async def submit(self, problem: Problem, source: str) -> Submission:
        """
        Judge source for problem and record the result.
        Only one evaluation may be outstanding per session.
        """
        username = self._require_record().username
        if self._evaluating:
            raise SubmissionInProgress("A submission is already being judged")

        self._evaluating = True
        try:
            verdict = await asyncio.to_thread(self.judge.evaluate, problem, source)
        finally:
            self._evaluating = False

        if self.username != username:
            raise NotAuthenticated("Session ended before the verdict arrived")

        submission = create_submission(problem.id, source, verdict)
        self.apply(submission)
        logger.info(
            "Submission %s for %s: %s (%d)",
            submission.id,
            problem.id,
            verdict.status.value,
            verdict.score,
        )
        return submission

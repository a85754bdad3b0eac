"""Debounced background persistence of the progress record."""

import asyncio
import logging
from typing import Callable, Optional, Tuple

from ..client.models import ProgressRecord
from ..errors import StoreError, SyncFailure


logger = logging.getLogger(__name__)


class ProgressSynchronizer:
    """
    Writes the current progress record to the store after a quiet period.

    Watches two signals of the record: the submission count and the points.
    Each change re-arms a trailing-edge timer, so a burst of mutations ends in
    a single write of the record as it is when the timer fires. At most one
    write is in flight; a timer that fires during a write is re-armed once
    the write settles. Failed writes are logged and left for the next
    mutation to repair.

    All methods must be called from the event loop thread.
    """

    def __init__(
        self,
        store,
        get_record: Callable[[], Optional[ProgressRecord]],
        delay: float = 1.0,
    ):
        self.store = store
        self.delay = delay
        self._get_record = get_record
        self._timer: Optional[asyncio.TimerHandle] = None
        self._inflight: Optional[asyncio.Task] = None
        self._signal: Optional[Tuple[str, int, int]] = None
        self._rearm = False
        self._dirty = False
        self.syncing = False
        self.last_error: Optional[SyncFailure] = None

    @property
    def pending(self) -> bool:
        """True while a write is scheduled but has not started."""
        return self._timer is not None

    @property
    def dirty(self) -> bool:
        """True when local changes have not reached the store yet."""
        return self._dirty

    def notify(self, record: Optional[ProgressRecord]) -> None:
        """Record observer; call on every mutation of the session's record."""
        if record is None:
            self.cancel()
            self._signal = None
            self._dirty = False
            return

        signal = (record.username, len(record.submissions), record.points)
        if self._signal is None or self._signal[0] != record.username:
            # A freshly loaded or created record is already in the store
            self._signal = signal
            return
        if signal == self._signal:
            return

        self._signal = signal
        self._dirty = True
        self._schedule()

    def cancel(self) -> None:
        """Drop any scheduled write. A write already in flight still completes."""
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._rearm = False

    async def flush(self) -> bool:
        """
        Write unsynchronised changes now instead of waiting for the timer.
        Returns True when the store holds the current record afterwards.
        """
        self.cancel()
        if self._inflight is not None:
            await asyncio.wait({self._inflight})
        if self._dirty:
            task = self._start_write()
            if task is not None:
                await asyncio.wait({task})
        return not self._dirty

    def _schedule(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay, self._fire)

    def _fire(self) -> None:
        self._timer = None
        if self._inflight is not None:
            self._rearm = True
            return
        self._start_write()

    def _start_write(self) -> Optional[asyncio.Task]:
        record = self._get_record()
        if record is None:
            return None
        self._dirty = False
        self.syncing = True
        self._inflight = asyncio.get_running_loop().create_task(self._write(record))
        return self._inflight

    async def _write(self, record: ProgressRecord) -> None:
        try:
            await asyncio.to_thread(self.store.save_user, record)
        except StoreError as e:
            self._dirty = True
            self.last_error = SyncFailure(f"Could not save progress for {record.username}: {e}")
            logger.warning("%s", self.last_error)
        except Exception as e:
            self._dirty = True
            self.last_error = SyncFailure(f"Could not save progress for {record.username}: {e}")
            logger.exception("Unexpected error while saving progress for %s", record.username)
        else:
            self.last_error = None
            logger.debug(
                "Synced %s: %d points, %d submissions",
                record.username,
                record.points,
                len(record.submissions),
            )
        finally:
            self.syncing = False
            self._inflight = None
            if self._rearm:
                self._rearm = False
                self._schedule()

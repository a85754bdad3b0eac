"""Wiring of the progress components for one practice session."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .catalog import Catalog, PROBLEMS, find_problem, load_catalog
from .client import JudgeClient, StoreClient
from .client.models import Problem
from .config import GlobalConfig, LocalConfig, RememberedUser
from .progress import ProgressSynchronizer, ProgressView, SessionManager


@dataclass
class Practice:
    """A session whose record changes feed the synchronizer and the view."""

    session: SessionManager
    synchronizer: ProgressSynchronizer
    view: ProgressView
    catalog: Catalog

    @classmethod
    def create(
        cls,
        store,
        judge,
        remembered,
        catalog: Catalog = PROBLEMS,
        sync_delay: float = 1.0,
    ) -> "Practice":
        session = SessionManager(store, judge, remembered)
        synchronizer = ProgressSynchronizer(
            store, lambda: session.record, delay=sync_delay
        )
        view = ProgressView(catalog)
        session.subscribe(synchronizer.notify)
        session.subscribe(view.update)
        return cls(session=session, synchronizer=synchronizer, view=view, catalog=catalog)

    def problem(self, problem_id: str) -> Problem:
        return find_problem(self.catalog, problem_id)

    async def close(self) -> bool:
        """Push outstanding changes before the process exits."""
        if self.session.record is None:
            self.synchronizer.cancel()
            return True
        return await self.synchronizer.flush()


def resolve_catalog(local: Optional[LocalConfig]) -> Catalog:
    if local is not None and local.catalog:
        return load_catalog(Path(local.catalog))
    return PROBLEMS


def open_practice(
    config: GlobalConfig,
    local: Optional[LocalConfig] = None,
    config_path: Optional[Path] = None,
) -> Practice:
    """Build a practice session talking to the configured services."""
    store = StoreClient(config.api_url, timeout=config.timeout)
    judge = JudgeClient(config.judge_url, timeout=config.timeout)
    return Practice.create(
        store,
        judge,
        RememberedUser(config, config_path),
        catalog=resolve_catalog(local),
        sync_delay=config.sync_delay,
    )

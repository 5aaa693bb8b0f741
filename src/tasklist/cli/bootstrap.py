# src/tasklist/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local data directory exists,
- wires the SQLite database, task store and history ledger into the controller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..config import Settings, get_settings
from ..history.controller import HistoryController
from ..history.ledger import HistoryLedger
from ..storage.database import MEMORY, Database
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    settings: Settings
    db: Database
    task_store: TaskStore
    ledger: HistoryLedger
    controller: HistoryController

    def close(self) -> None:
        self.db.close()


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    if str(settings.db_path) != MEMORY:
        settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings: Settings | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    db = Database(settings.db_path)
    task_store = TaskStore(db)
    ledger = HistoryLedger(db)
    controller = HistoryController(
        task_store,
        ledger,
        transaction=db.transaction,
        clear_redo_on_write=settings.clear_redo_on_write,
    )
    logger.debug("State ready db=%s clear_redo_on_write=%s", db.path, settings.clear_redo_on_write)
    return AppState(
        settings=settings,
        db=db,
        task_store=task_store,
        ledger=ledger,
        controller=controller,
    )

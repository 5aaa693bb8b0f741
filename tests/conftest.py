# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from tasklist.cli.bootstrap import AppState, create_initial_state
from tasklist.config import Settings
from tasklist.history.controller import HistoryController
from tasklist.history.ledger import HistoryLedger
from tasklist.storage.database import Database
from tasklist.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings pointing at a per-test directory.

    We build Settings directly rather than calling get_settings(),
    to keep unit tests isolated from the environment and any local .env.
    """
    return Settings(
        app_name="tasklist-test",
        log_level="WARNING",
        data_dir=tmp_path,
        db_path=tmp_path / "tasks.sqlite3",
        log_dir=tmp_path / "logs",
        clear_redo_on_write=True,
    )


@pytest.fixture()
def db(settings: Settings) -> Database:
    return Database(settings.db_path)


@pytest.fixture()
def task_store(db: Database) -> TaskStore:
    return TaskStore(db)


@pytest.fixture()
def ledger(db: Database) -> HistoryLedger:
    return HistoryLedger(db)


@pytest.fixture()
def controller(task_store: TaskStore, ledger: HistoryLedger, db: Database) -> HistoryController:
    """
    Controller wired exactly like the CLI does it.

    NOTE: real SQLite stores are used here because transactional behaviour
    across the tasks table and the history logs is part of what we test.
    """
    return HistoryController(task_store, ledger, transaction=db.transaction)


@pytest.fixture()
def state(settings: Settings) -> AppState:
    return create_initial_state(settings=settings)

# src/tasklist/storage/database.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
from collections.abc import Iterator
from pathlib import Path

from ..core.exceptions import StorageError

logger = logging.getLogger(__name__)

MEMORY = ":memory:"


class Database:
    """
    SQLite handle shared by TaskStore and HistoryLedger.

    Connections:
    - outside a transaction, every call opens its own short-lived connection
    - inside transaction(), all nested calls share one connection and are
      committed (or rolled back) together
    - ":memory:" keeps a single connection for the lifetime of the object,
      otherwise every connection would see a fresh empty database
    """

    def __init__(self, db_path: str | Path = "tasks.sqlite3") -> None:
        self._in_memory = str(db_path) == MEMORY
        self._db_path = Path(db_path) if not self._in_memory else None
        self._shared: sqlite3.Connection | None = None
        self._active: sqlite3.Connection | None = None

        if self._db_path is not None:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        else:
            self._shared = self._open()

        self._ensure_schema()
        logger.debug("Database ready path=%s", self.path)

    @property
    def path(self) -> str:
        return MEMORY if self._db_path is None else str(self._db_path)

    def close(self) -> None:
        if self._shared is not None:
            self._shared.close()
            self._shared = None

    # ---- connections ----

    def _open(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self.path, timeout=30.0)
        except sqlite3.Error as exc:
            raise StorageError(f"cannot open database {self.path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    @contextlib.contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """
        Run a block of store/ledger calls as one atomic unit.

        Re-entrant: a nested transaction() joins the outer one, so only the
        outermost block commits. Any exception rolls everything back and is
        re-raised; sqlite3 errors are re-raised as StorageError.
        """
        if self._active is not None:
            yield self._active
            return

        conn = self._shared if self._shared is not None else self._open()
        self._active = conn
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageError(str(exc)) from exc
        except BaseException:
            conn.rollback()
            raise
        finally:
            self._active = None
            if conn is not self._shared:
                conn.close()

    # ---- schema ----

    def _ensure_schema(self) -> None:
        with self.transaction() as conn:
            cur = conn.cursor()
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    text TEXT NOT NULL,
                    status TEXT NOT NULL,
                    tag TEXT,
                    due_date TEXT,
                    created_at TEXT NOT NULL
                )
                """
            )
            for table in ("undo_history", "redo_history"):
                cur.execute(
                    f"""
                    CREATE TABLE IF NOT EXISTS {table} (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        kind TEXT NOT NULL,
                        task_id INTEGER NOT NULL,
                        operation TEXT NOT NULL,
                        created_at TEXT NOT NULL
                    )
                    """
                )

            # Older databases were created before tag/due_date existed.
            cur.execute("PRAGMA table_info(tasks)")
            cols = {row["name"] for row in cur.fetchall()}
            for name in ("tag", "due_date"):
                if name not in cols:
                    cur.execute(f"ALTER TABLE tasks ADD COLUMN {name} TEXT")
                    logger.info("Database migration: added column tasks.%s", name)

# src/tasklist/history/ledger.py

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from enum import StrEnum

from ..core.exceptions import CorruptHistoryError, StorageError
from ..storage.database import Database
from ..tasks.task_models import now_timestamp
from .operations import InverseOperation, decode_operation, encode_operation

logger = logging.getLogger(__name__)


class Log(StrEnum):
    UNDO = "undo_history"
    REDO = "redo_history"


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    id: int
    operation: InverseOperation
    created_at: str


class HistoryLedger:
    """
    Undo and redo logs stored in SQLite.

    Both logs are stacks: entries are appended with a strictly increasing id
    and consumed most-recent-first. Pushing to one log never touches the other.

    A pop is only durable once the enclosing Database.transaction() commits,
    which lets the controller remove an entry and apply it as one unit.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    # ---- low-level helpers ----

    def _push(self, log: Log, op: InverseOperation) -> int:
        try:
            with self._db.transaction() as conn:
                cur = conn.execute(
                    f"INSERT INTO {log.value}(kind, task_id, operation, created_at) VALUES (?, ?, ?, ?)",
                    (op.kind, int(op.task_id), encode_operation(op), now_timestamp()),
                )
                rowid = cur.lastrowid
        except sqlite3.Error as exc:
            raise StorageError(f"append to {log.value} failed: {exc}") from exc
        if rowid is None:
            raise StorageError(f"SQLite did not return lastrowid for {log.value} insert")
        logger.debug("History push log=%s entry=%s kind=%s task=%s", log.value, rowid, op.kind, op.task_id)
        return int(rowid)

    @staticmethod
    def _row_to_entry(row: sqlite3.Row) -> HistoryEntry:
        entry_id = int(row["id"])
        try:
            op = decode_operation(row["operation"])
        except CorruptHistoryError as exc:
            raise CorruptHistoryError(exc.message, entry_id=entry_id) from exc
        return HistoryEntry(id=entry_id, operation=op, created_at=str(row["created_at"]))

    def _peek(self, log: Log) -> HistoryEntry | None:
        try:
            with self._db.transaction() as conn:
                row = conn.execute(
                    f"SELECT id, operation, created_at FROM {log.value} ORDER BY id DESC LIMIT 1"
                ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"read {log.value} failed: {exc}") from exc
        return self._row_to_entry(row) if row else None

    def _pop(self, log: Log) -> HistoryEntry | None:
        with self._db.transaction() as conn:
            entry = self._peek(log)
            if entry is None:
                return None
            try:
                conn.execute(f"DELETE FROM {log.value} WHERE id = ?", (entry.id,))
            except sqlite3.Error as exc:
                raise StorageError(f"remove entry {entry.id} from {log.value} failed: {exc}") from exc
        logger.debug("History pop log=%s entry=%s", log.value, entry.id)
        return entry

    def _list(self, log: Log) -> list[HistoryEntry]:
        try:
            with self._db.transaction() as conn:
                rows = conn.execute(
                    f"SELECT id, operation, created_at FROM {log.value} ORDER BY id DESC"
                ).fetchall()
        except sqlite3.Error as exc:
            raise StorageError(f"read {log.value} failed: {exc}") from exc
        return [self._row_to_entry(r) for r in rows]

    def _count(self, log: Log) -> int:
        try:
            with self._db.transaction() as conn:
                (n,) = conn.execute(f"SELECT COUNT(*) FROM {log.value}").fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"count {log.value} failed: {exc}") from exc
        return int(n)

    def _clear(self, log: Log) -> int:
        try:
            with self._db.transaction() as conn:
                removed = conn.execute(f"DELETE FROM {log.value}").rowcount
        except sqlite3.Error as exc:
            raise StorageError(f"clear {log.value} failed: {exc}") from exc
        if removed:
            logger.debug("History cleared log=%s removed=%s", log.value, removed)
        return int(removed)

    # ---- public API ----

    def push_undo(self, op: InverseOperation) -> int:
        return self._push(Log.UNDO, op)

    def push_redo(self, op: InverseOperation) -> int:
        return self._push(Log.REDO, op)

    def pop_undo(self) -> HistoryEntry | None:
        """Remove and return the newest undo entry, or None when the log is empty."""
        return self._pop(Log.UNDO)

    def pop_redo(self) -> HistoryEntry | None:
        """Remove and return the newest redo entry, or None when the log is empty."""
        return self._pop(Log.REDO)

    def list_undo(self) -> list[HistoryEntry]:
        return self._list(Log.UNDO)

    def list_redo(self) -> list[HistoryEntry]:
        return self._list(Log.REDO)

    def count_undo(self) -> int:
        return self._count(Log.UNDO)

    def count_redo(self) -> int:
        return self._count(Log.REDO)

    def clear_undo(self) -> int:
        return self._clear(Log.UNDO)

    def clear_redo(self) -> int:
        return self._clear(Log.REDO)

# src/tasklist/tasks/task_store.py

from __future__ import annotations

import logging
import sqlite3

from ..core.exceptions import StorageError, TaskNotFoundError
from ..storage.database import Database
from .task_models import Task, TaskStatus, now_timestamp

logger = logging.getLogger(__name__)

_COLUMNS = "id, text, status, tag, due_date, created_at"


class TaskStore:
    """
    SQLite task store.

    All statements are parameterised. Writes go through Database.transaction(),
    so a call made inside an outer transaction commits (or rolls back) together
    with whatever else the caller does in that block.

    Errors:
    - sqlite3 failures surface as StorageError
    - update/reinstate/delete of a missing id raise TaskNotFoundError
    """

    def __init__(self, db: Database) -> None:
        self._db = db
        try:
            total = self.count_tasks()
        except StorageError:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", db.path, total)

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=int(row["id"]),
            text=str(row["text"]),
            status=TaskStatus.from_db(row["status"]),
            tag=row["tag"],
            due_date=row["due_date"],
            created_at=str(row["created_at"]),
        )

    # ---- reads ----

    def count_tasks(self) -> int:
        try:
            with self._db.transaction() as conn:
                (n,) = conn.execute("SELECT COUNT(*) FROM tasks").fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"count tasks failed: {exc}") from exc
        return int(n)

    def get_task(self, task_id: int) -> Task | None:
        try:
            with self._db.transaction() as conn:
                row = conn.execute(
                    f"SELECT {_COLUMNS} FROM tasks WHERE id = ?", (int(task_id),)
                ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"read task {task_id} failed: {exc}") from exc
        return self._row_to_task(row) if row else None

    def list_tasks(self) -> list[Task]:
        """All tasks in storage order (ascending id)."""
        try:
            with self._db.transaction() as conn:
                rows = conn.execute(f"SELECT {_COLUMNS} FROM tasks ORDER BY id ASC").fetchall()
        except sqlite3.Error as exc:
            raise StorageError(f"read tasks failed: {exc}") from exc
        return [self._row_to_task(r) for r in rows]

    def search_tasks(self, needle: str) -> list[Task]:
        """Case-insensitive substring match on text."""
        # Python lower() handles non-ASCII text, SQLite's LIKE does not.
        needle = needle.lower()
        return [t for t in self.list_tasks() if needle in t.text.lower()]

    # ---- writes ----

    def add_task(
        self,
        *,
        text: str,
        status: TaskStatus = TaskStatus.UNDONE,
        tag: str | None = None,
        due_date: str | None = None,
    ) -> int:
        created_at = now_timestamp()
        try:
            with self._db.transaction() as conn:
                cur = conn.execute(
                    """
                    INSERT INTO tasks(text, status, tag, due_date, created_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (text, status.value, tag, due_date, created_at),
                )
                rowid = cur.lastrowid
        except sqlite3.Error as exc:
            raise StorageError(f"create task failed: {exc}") from exc
        if rowid is None:
            raise StorageError("SQLite did not return lastrowid for tasks insert")
        task_id = int(rowid)
        logger.debug("Task added id=%s status=%s tag=%s due=%s", task_id, status.value, tag, due_date)
        return task_id

    def insert_task(self, task: Task) -> None:
        """Insert a task with its explicit id and created_at."""
        try:
            with self._db.transaction() as conn:
                conn.execute(
                    f"INSERT INTO tasks({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?)",
                    (
                        int(task.id),
                        task.text,
                        task.status.value,
                        task.tag,
                        task.due_date,
                        task.created_at,
                    ),
                )
        except sqlite3.Error as exc:
            raise StorageError(f"insert task {task.id} failed: {exc}") from exc
        logger.debug("Task inserted id=%s", task.id)

    def update_task(
        self,
        task_id: int,
        *,
        text: str,
        status: TaskStatus,
        tag: str | None,
        due_date: str | None,
    ) -> None:
        """Overwrite text/status/tag/due_date. id and created_at are never touched."""
        try:
            with self._db.transaction() as conn:
                cur = conn.execute(
                    "UPDATE tasks SET text = ?, status = ?, tag = ?, due_date = ? WHERE id = ?",
                    (text, status.value, tag, due_date, int(task_id)),
                )
                changed = cur.rowcount
        except sqlite3.Error as exc:
            raise StorageError(f"update task {task_id} failed: {exc}") from exc
        if changed == 0:
            raise TaskNotFoundError(task_id)
        logger.debug("Task updated id=%s status=%s", task_id, status.value)

    def reinstate_task(self, task: Task) -> None:
        """Write back every stored field of a snapshot, created_at included."""
        try:
            with self._db.transaction() as conn:
                cur = conn.execute(
                    """
                    UPDATE tasks
                    SET text = ?, status = ?, tag = ?, due_date = ?, created_at = ?
                    WHERE id = ?
                    """,
                    (
                        task.text,
                        task.status.value,
                        task.tag,
                        task.due_date,
                        task.created_at,
                        int(task.id),
                    ),
                )
                changed = cur.rowcount
        except sqlite3.Error as exc:
            raise StorageError(f"reinstate task {task.id} failed: {exc}") from exc
        if changed == 0:
            raise TaskNotFoundError(task.id)
        logger.debug("Task reinstated id=%s", task.id)

    def delete_task(self, task_id: int) -> None:
        try:
            with self._db.transaction() as conn:
                cur = conn.execute("DELETE FROM tasks WHERE id = ?", (int(task_id),))
                changed = cur.rowcount
        except sqlite3.Error as exc:
            raise StorageError(f"delete task {task_id} failed: {exc}") from exc
        if changed == 0:
            raise TaskNotFoundError(task_id)
        logger.debug("Task deleted id=%s", task_id)

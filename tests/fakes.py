# tests/fakes.py

from __future__ import annotations

import contextlib
from collections.abc import Iterator
from dataclasses import dataclass, field

from tasklist.core.exceptions import StorageError, TaskNotFoundError
from tasklist.history.ledger import HistoryEntry
from tasklist.history.operations import InverseOperation
from tasklist.tasks.task_models import Task, TaskStatus


class FakeTaskRepo:
    """
    In-memory TaskRepo used for controller unit tests.

    - ids are monotonic and never reused, like SQLite AUTOINCREMENT
    - fail_on names a method that should raise StorageError (simulated I/O failure)
    """

    def __init__(self) -> None:
        self.tasks: dict[int, Task] = {}
        self.next_id = 1
        self.clock = 0
        self.fail_on: str | None = None

    def _maybe_fail(self, name: str) -> None:
        if self.fail_on == name:
            raise StorageError(f"simulated failure in {name}")

    def get_task(self, task_id: int) -> Task | None:
        return self.tasks.get(task_id)

    def list_tasks(self) -> list[Task]:
        return [self.tasks[k] for k in sorted(self.tasks)]

    def search_tasks(self, needle: str) -> list[Task]:
        return [t for t in self.list_tasks() if needle.lower() in t.text.lower()]

    def add_task(
        self,
        *,
        text: str,
        status: TaskStatus = TaskStatus.UNDONE,
        tag: str | None = None,
        due_date: str | None = None,
    ) -> int:
        self._maybe_fail("add_task")
        task_id = self.next_id
        self.next_id += 1
        self.clock += 1
        self.tasks[task_id] = Task(
            id=task_id,
            text=text,
            status=status,
            tag=tag,
            due_date=due_date,
            created_at=f"2026-01-01 00:00:{self.clock:02d}.000000",
        )
        return task_id

    def insert_task(self, task: Task) -> None:
        self._maybe_fail("insert_task")
        if task.id in self.tasks:
            raise StorageError(f"UNIQUE constraint failed: tasks.id ({task.id})")
        self.tasks[task.id] = task
        self.next_id = max(self.next_id, task.id + 1)

    def update_task(self, task_id, *, text, status, tag, due_date) -> None:
        self._maybe_fail("update_task")
        current = self.tasks.get(task_id)
        if current is None:
            raise TaskNotFoundError(task_id)
        self.tasks[task_id] = Task(
            id=task_id,
            text=text,
            status=status,
            tag=tag,
            due_date=due_date,
            created_at=current.created_at,
        )

    def reinstate_task(self, task: Task) -> None:
        self._maybe_fail("reinstate_task")
        if task.id not in self.tasks:
            raise TaskNotFoundError(task.id)
        self.tasks[task.id] = task

    def delete_task(self, task_id: int) -> None:
        self._maybe_fail("delete_task")
        if task_id not in self.tasks:
            raise TaskNotFoundError(task_id)
        del self.tasks[task_id]


@dataclass
class FakeHistoryRepo:
    """In-memory HistoryRepo: two plain lists used as stacks."""

    undo: list[HistoryEntry] = field(default_factory=list)
    redo: list[HistoryEntry] = field(default_factory=list)
    next_id: int = 1
    fail_on: str | None = None

    def _entry(self, op: InverseOperation) -> HistoryEntry:
        entry = HistoryEntry(id=self.next_id, operation=op, created_at="2026-01-01 00:00:00.000000")
        self.next_id += 1
        return entry

    def push_undo(self, op: InverseOperation) -> int:
        if self.fail_on == "push_undo":
            raise StorageError("simulated failure in push_undo")
        entry = self._entry(op)
        self.undo.append(entry)
        return entry.id

    def push_redo(self, op: InverseOperation) -> int:
        if self.fail_on == "push_redo":
            raise StorageError("simulated failure in push_redo")
        entry = self._entry(op)
        self.redo.append(entry)
        return entry.id

    def pop_undo(self) -> HistoryEntry | None:
        return self.undo.pop() if self.undo else None

    def pop_redo(self) -> HistoryEntry | None:
        return self.redo.pop() if self.redo else None

    def list_undo(self) -> list[HistoryEntry]:
        return list(reversed(self.undo))

    def list_redo(self) -> list[HistoryEntry]:
        return list(reversed(self.redo))

    def clear_undo(self) -> int:
        n = len(self.undo)
        self.undo.clear()
        return n

    def clear_redo(self) -> int:
        n = len(self.redo)
        self.redo.clear()
        return n


class FakeTransaction:
    """
    Snapshot/restore transaction over the fakes.

    On exception the repos are put back exactly as they were when the block
    started, mirroring a SQLite rollback.
    """

    def __init__(self, tasks: FakeTaskRepo, history: FakeHistoryRepo) -> None:
        self._tasks = tasks
        self._history = history
        self.rollbacks = 0

    @contextlib.contextmanager
    def __call__(self) -> Iterator[None]:
        saved_tasks = dict(self._tasks.tasks)
        saved_next = self._tasks.next_id
        saved_undo = list(self._history.undo)
        saved_redo = list(self._history.redo)
        try:
            yield
        except BaseException:
            self._tasks.tasks = saved_tasks
            self._tasks.next_id = saved_next
            self._history.undo = saved_undo
            self._history.redo = saved_redo
            self.rollbacks += 1
            raise

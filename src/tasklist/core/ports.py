# src/tasklist/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the history controller.

The controller depends on Protocols instead of the SQLite implementations.
This keeps storage swappable and lets tests drive the controller against
in-memory fakes.
"""

from contextlib import AbstractContextManager
from typing import Any, Callable, Protocol

from ..history.ledger import HistoryEntry
from ..history.operations import InverseOperation
from ..tasks.task_models import Task, TaskStatus

# Zero-argument factory for the scope that makes several calls atomic.
TransactionFactory = Callable[[], AbstractContextManager[Any]]


class TaskRepo(Protocol):
    def get_task(self, task_id: int) -> Task | None: ...
    def list_tasks(self) -> list[Task]: ...
    def search_tasks(self, needle: str) -> list[Task]: ...

    def add_task(
            self,
            *,
            text: str,
            status: TaskStatus = TaskStatus.UNDONE,
            tag: str | None = None,
            due_date: str | None = None,
    ) -> int: ...

    def insert_task(self, task: Task) -> None: ...

    def update_task(
            self,
            task_id: int,
            *,
            text: str,
            status: TaskStatus,
            tag: str | None,
            due_date: str | None,
    ) -> None: ...

    def reinstate_task(self, task: Task) -> None: ...
    def delete_task(self, task_id: int) -> None: ...


class HistoryRepo(Protocol):
    def push_undo(self, op: InverseOperation) -> int: ...
    def push_redo(self, op: InverseOperation) -> int: ...
    def pop_undo(self) -> HistoryEntry | None: ...
    def pop_redo(self) -> HistoryEntry | None: ...
    def list_undo(self) -> list[HistoryEntry]: ...
    def list_redo(self) -> list[HistoryEntry]: ...
    def clear_undo(self) -> int: ...
    def clear_redo(self) -> int: ...

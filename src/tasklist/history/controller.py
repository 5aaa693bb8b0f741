# src/tasklist/history/controller.py

"""
Undo/redo controller.

Every mutation runs as one unit: capture the before-state, write, encode the
inverse and push it onto the undo log. Undo pops the newest undo entry, applies
it as a normal mutation and files the inverse of that application into the
redo log; redo mirrors this. If any step fails the unit is rolled back, so the
popped entry stays in its log and no half-written history is left behind.
"""

from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..core.exceptions import CorruptHistoryError, TaskNotFoundError
from ..core.ports import HistoryRepo, TaskRepo, TransactionFactory
from ..tasks.task_models import KEEP, Task, TaskStatus
from .ledger import HistoryEntry
from .operations import (
    InverseOperation,
    Recreate,
    ReinstateFields,
    Remove,
    inverse_of_create,
    inverse_of_delete,
    inverse_of_update,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class HistoryOutcome:
    """Result of undo()/redo(). applied=False means the log was empty."""

    applied: bool
    operation: InverseOperation | None = None


class HistoryController:
    def __init__(
        self,
        tasks: TaskRepo,
        history: HistoryRepo,
        *,
        transaction: TransactionFactory | None = None,
        clear_redo_on_write: bool = True,
    ) -> None:
        self._tasks = tasks
        self._history = history
        self._transaction: TransactionFactory = transaction or contextlib.nullcontext
        self._clear_redo_on_write = clear_redo_on_write

    # ---- reads ----

    def read(self, task_id: int) -> Task:
        task = self._tasks.get_task(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    def read_all(self) -> list[Task]:
        return self._tasks.list_tasks()

    def search(self, needle: str) -> list[Task]:
        return self._tasks.search_tasks(needle)

    # ---- mutations ----

    def _record(self, op: InverseOperation) -> None:
        self._history.push_undo(op)
        if self._clear_redo_on_write:
            self._history.clear_redo()

    def create(
        self,
        text: str,
        *,
        status: TaskStatus = TaskStatus.UNDONE,
        tag: str | None = None,
        due_date: str | None = None,
    ) -> Task:
        with self._transaction():
            task_id = self._tasks.add_task(text=text, status=status, tag=tag, due_date=due_date)
            self._record(inverse_of_create(task_id))
            created = self.read(task_id)
        logger.info("Created task id=%s", task_id)
        return created

    def update(
        self,
        task_id: int,
        *,
        text: str | None = None,
        status: TaskStatus | None = None,
        tag: str | None = KEEP,
        due_date: str | None = KEEP,
    ) -> Task:
        """
        Update the given fields.

        Omitted fields keep their current value. An explicit None for tag or
        due_date clears it; text and status cannot be cleared.
        """
        with self._transaction():
            before = self.read(task_id)
            after = before.with_fields(text=text, status=status, tag=tag, due_date=due_date)
            self._tasks.update_task(
                task_id,
                text=after.text,
                status=after.status,
                tag=after.tag,
                due_date=after.due_date,
            )
            self._record(inverse_of_update(before))
        logger.info("Updated task id=%s", task_id)
        return after

    def set_status(self, task_id: int, status: TaskStatus) -> Task:
        return self.update(task_id, status=status)

    def delete(self, task_id: int) -> Task:
        """Delete a task and return the snapshot it had before deletion."""
        with self._transaction():
            before = self.read(task_id)
            self._tasks.delete_task(task_id)
            self._record(inverse_of_delete(before))
        logger.info("Deleted task id=%s", task_id)
        return before

    # ---- undo / redo ----

    def undo(self) -> HistoryOutcome:
        return self._replay("undo", self._history.pop_undo, self._history.push_redo)

    def redo(self) -> HistoryOutcome:
        return self._replay("redo", self._history.pop_redo, self._history.push_undo)

    def _replay(
        self,
        label: str,
        pop: Callable[[], HistoryEntry | None],
        push: Callable[[InverseOperation], int],
    ) -> HistoryOutcome:
        with self._transaction():
            entry = pop()
            if entry is None:
                logger.info("Nothing to %s", label)
                return HistoryOutcome(applied=False)
            inverse = self._apply(entry)
            push(inverse)
        logger.info("Applied %s entry=%s kind=%s task=%s", label, entry.id, entry.operation.kind, entry.operation.task_id)
        return HistoryOutcome(applied=True, operation=entry.operation)

    def _apply(self, entry: HistoryEntry) -> InverseOperation:
        """Apply a logged operation and return the operation that reverses it."""
        op = entry.operation
        current = self._tasks.get_task(op.task_id)

        if isinstance(op, Recreate):
            if current is not None:
                raise CorruptHistoryError(f"cannot recreate task {op.task_id}: it already exists", entry.id)
            self._tasks.insert_task(op.task)
            return inverse_of_create(op.task_id)

        if current is None:
            raise CorruptHistoryError(f"task {op.task_id} no longer exists", entry.id)

        if isinstance(op, Remove):
            self._tasks.delete_task(op.task_id)
            return inverse_of_delete(current)

        if isinstance(op, ReinstateFields):
            self._tasks.reinstate_task(op.task)
            return inverse_of_update(current)

        raise CorruptHistoryError(f"unsupported operation {op!r}", entry.id)

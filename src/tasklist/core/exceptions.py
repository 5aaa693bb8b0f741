"""Core exceptions: storage failures, missing tasks and unusable history entries."""

from __future__ import annotations


class TaskListError(Exception):
    """Base exception for tasklist errors."""

    pass


class TaskNotFoundError(TaskListError):
    """Raised when a referenced task id does not exist."""

    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"Task with id {task_id} does not exist")


class StorageError(TaskListError):
    """Raised when the underlying database read/write or transaction fails."""

    pass


class CorruptDataError(TaskListError):
    """Raised when a stored task row holds a value that cannot be decoded.

    Not a StorageError: retrying will not help, the row has to be repaired.
    """

    pass


class CorruptHistoryError(TaskListError):
    """Raised when a history entry cannot be decoded or applied to the current tasks."""

    def __init__(self, message: str, entry_id: int | None = None):
        self.entry_id = entry_id
        self.message = message
        prefix = f"[history entry {entry_id}] " if entry_id is not None else ""
        super().__init__(f"{prefix}{message}")

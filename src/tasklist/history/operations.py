# src/tasklist/history/operations.py

"""
Inverse operations: data values describing how to exactly undo one mutation.

The variant is closed:
- Recreate(task)         undoes a delete (reinstates the row with its own id)
- Remove(task_id)        undoes a create
- ReinstateFields(task)  undoes an update (writes every field back)

Operations are stored as JSON with a "kind" discriminator and applied through
parameterised TaskStore calls, so task text is never spliced into SQL.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from ..core.exceptions import CorruptDataError, CorruptHistoryError
from ..tasks.task_models import Task, TaskStatus


@dataclass(frozen=True, slots=True)
class Recreate:
    task: Task

    kind = "recreate"

    @property
    def task_id(self) -> int:
        return self.task.id


@dataclass(frozen=True, slots=True)
class Remove:
    task_id: int

    kind = "remove"


@dataclass(frozen=True, slots=True)
class ReinstateFields:
    task: Task

    kind = "reinstate"

    @property
    def task_id(self) -> int:
        return self.task.id


InverseOperation = Recreate | Remove | ReinstateFields


# ---- encoder ----


def inverse_of_create(task_id: int) -> Remove:
    return Remove(task_id=int(task_id))


def inverse_of_update(before: Task) -> ReinstateFields:
    return ReinstateFields(task=before)


def inverse_of_delete(before: Task) -> Recreate:
    return Recreate(task=before)


# ---- JSON codec ----


def encode_operation(op: InverseOperation) -> str:
    payload: dict[str, Any] = {"kind": op.kind}
    if isinstance(op, Remove):
        payload["task_id"] = op.task_id
    else:
        payload["task"] = op.task.to_dict()
    return json.dumps(payload, ensure_ascii=False, sort_keys=True)


def _decode_task(raw: Any) -> Task:
    if not isinstance(raw, dict):
        raise CorruptHistoryError(f"task snapshot is not an object: {raw!r}")
    try:
        return Task(
            id=int(raw["id"]),
            text=str(raw["text"]),
            status=TaskStatus.from_db(raw["status"]),
            tag=raw.get("tag"),
            due_date=raw.get("due_date"),
            created_at=str(raw["created_at"]),
        )
    except KeyError as exc:
        raise CorruptHistoryError(f"task snapshot is missing field {exc.args[0]!r}") from None
    except (TypeError, ValueError, CorruptDataError) as exc:
        raise CorruptHistoryError(f"task snapshot is invalid: {exc}") from exc


def decode_operation(raw: str) -> InverseOperation:
    """Parse a stored operation; anything unexpected raises CorruptHistoryError."""
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise CorruptHistoryError(f"operation is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise CorruptHistoryError(f"operation is not an object: {payload!r}")

    kind = payload.get("kind")
    if kind == Remove.kind:
        try:
            return Remove(task_id=int(payload["task_id"]))
        except (KeyError, TypeError, ValueError):
            raise CorruptHistoryError("remove operation has no valid task_id") from None
    if kind == Recreate.kind:
        return Recreate(task=_decode_task(payload.get("task")))
    if kind == ReinstateFields.kind:
        return ReinstateFields(task=_decode_task(payload.get("task")))
    raise CorruptHistoryError(f"unknown operation kind {kind!r}")


# tests/test_operations.py

from __future__ import annotations

import json

import pytest

from tasklist.core.exceptions import CorruptHistoryError
from tasklist.history.operations import (
    Recreate,
    ReinstateFields,
    Remove,
    decode_operation,
    encode_operation,
    inverse_of_create,
    inverse_of_delete,
    inverse_of_update,
)
from tasklist.tasks.task_models import Task, TaskStatus


def _task(**overrides) -> Task:
    fields = {
        "id": 3,
        "text": "Read chapter 5 of the history book.",
        "status": TaskStatus.UNDONE,
        "tag": "study",
        "due_date": "2026-11-02",
        "created_at": "2026-10-19 08:30:00.123456",
    }
    fields.update(overrides)
    return Task(**fields)


def test_encoder_picks_the_inverse_for_each_mutation() -> None:
    before = _task()

    assert inverse_of_create(5) == Remove(task_id=5)
    assert inverse_of_update(before) == ReinstateFields(task=before)
    assert inverse_of_delete(before) == Recreate(task=before)

    assert inverse_of_update(before).task_id == 3
    assert inverse_of_delete(before).task_id == 3


def test_codec_keeps_full_snapshot_including_awkward_text() -> None:
    before = _task(text="Bob's \"quoted\" task', NULL); --", tag=None, status=TaskStatus.ARCHIVED)

    for op in (Remove(task_id=9), Recreate(task=before), ReinstateFields(task=before)):
        assert decode_operation(encode_operation(op)) == op


def test_encoded_operation_is_tagged_json() -> None:
    payload = json.loads(encode_operation(Recreate(task=_task())))
    assert payload["kind"] == "recreate"
    assert payload["task"]["status"] == "Undone"
    assert payload["task"]["created_at"] == "2026-10-19 08:30:00.123456"


@pytest.mark.parametrize(
    "raw",
    [
        "DELETE FROM Tasks WHERE id = (SELECT MAX(id) FROM Tasks)",
        "[1, 2, 3]",
        json.dumps({"kind": "explode", "task_id": 1}),
        json.dumps({"kind": "remove"}),
        json.dumps({"kind": "recreate", "task": {"id": 1, "text": "x"}}),
        json.dumps(
            {
                "kind": "reinstate",
                "task": {"id": 1, "text": "x", "status": "Maybe", "created_at": "t"},
            }
        ),
    ],
)
def test_decode_rejects_unusable_payloads(raw: str) -> None:
    with pytest.raises(CorruptHistoryError):
        decode_operation(raw)


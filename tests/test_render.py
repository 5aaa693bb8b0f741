# tests/test_render.py

from __future__ import annotations

from tasklist.cli.render import describe, sort_for_display, task_line
from tasklist.history.operations import Recreate, ReinstateFields, Remove
from tasklist.tasks.task_models import Task, TaskStatus


def _task(**overrides) -> Task:
    fields = {
        "id": 3,
        "text": "Water plants",
        "status": TaskStatus.UNDONE,
        "tag": None,
        "due_date": None,
        "created_at": "2026-10-19 09:00:00.000000",
    }
    fields.update(overrides)
    return Task(**fields)


def test_describe_names_the_task() -> None:
    assert describe(Remove(task_id=4)) == "remove task 4"
    assert describe(Recreate(task=_task())) == "recreate task 3 ('Water plants')"
    assert "[Done]" in describe(ReinstateFields(task=_task(status=TaskStatus.DONE)))


def test_task_line_shows_tag_and_due_date_only_when_set() -> None:
    assert task_line(_task()).plain == "3 Water plants"
    assert task_line(_task(tag="home", due_date="2026-12-24")).plain == "3 Water plants #home (due 2026-12-24)"


def test_sort_for_display_is_newest_first() -> None:
    old = _task(id=1, created_at="2026-10-19 09:00:00.000001")
    new = _task(id=2, created_at="2026-10-19 09:00:00.000002")
    assert sort_for_display([old, new]) == [new, old]

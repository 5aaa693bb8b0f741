# src/tasklist/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum
from typing import Any

from ..core.exceptions import CorruptDataError


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Values are stored verbatim in the database ("Undone", "Done", "Archived").
    """

    UNDONE = "Undone"
    DONE = "Done"
    ARCHIVED = "Archived"

    @classmethod
    def from_db(cls, raw: str | None) -> TaskStatus:
        # Unknown values mean the database was edited by hand or is damaged.
        try:
            return cls(raw)
        except ValueError:
            raise CorruptDataError(f"invalid task status {raw!r}") from None


# Default for with_fields/update arguments that should leave a field as it is.
# None is a real value for tag and due_date (it clears them).
KEEP: Any = object()


def now_timestamp() -> str:
    return datetime.now().isoformat(sep=" ", timespec="microseconds")


@dataclass(frozen=True, slots=True)
class Task:
    id: int
    text: str
    status: TaskStatus
    tag: str | None
    due_date: str | None
    created_at: str

    def with_fields(
        self,
        *,
        text: str | None = None,
        status: TaskStatus | None = None,
        tag: str | None = KEEP,
        due_date: str | None = KEEP,
    ) -> Task:
        """
        Copy with the given mutable fields replaced.

        text and status are required columns, so None keeps them. tag and due_date
        keep their value only when omitted; passing None clears them.
        """
        return replace(
            self,
            text=self.text if text is None else text,
            status=self.status if status is None else status,
            tag=self.tag if tag is KEEP else tag,
            due_date=self.due_date if due_date is KEEP else due_date,
        )

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "text": self.text,
            "status": self.status.value,
            "tag": self.tag,
            "due_date": self.due_date,
            "created_at": self.created_at,
        }

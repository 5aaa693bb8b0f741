# src/tasklist/cli/render.py

"""Rich rendering of task lists and history logs."""

from __future__ import annotations

from collections.abc import Callable, Iterable

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..history.ledger import HistoryEntry
from ..history.operations import InverseOperation, Recreate, Remove
from ..tasks.task_models import Task, TaskStatus

WELCOME = (
    "Welcome to tasklist, a command-line todo app!\n"
    "Task list is empty.\n"
    "Run [bold blue]tasklist add[/bold blue] to add a new task.\n"
    "Run [bold blue]tasklist --help[/bold blue] to get all commands"
)
NO_PENDING = "Great, no pending tasks 🎉"


def sort_for_display(tasks: Iterable[Task]) -> list[Task]:
    """Newest first."""
    return sorted(tasks, key=lambda t: t.created_at, reverse=True)


def task_line(task: Task) -> Text:
    # Task text goes in as a plain Text segment so brackets are never read as markup.
    line = Text()
    line.append(str(task.id), style="bold")
    line.append(" ")
    if task.status is TaskStatus.DONE:
        line.append(task.text, style="strike")
    elif task.status is TaskStatus.ARCHIVED:
        line.append(task.text, style="dim")
    else:
        line.append(task.text)
    if task.tag:
        line.append(f" #{task.tag}", style="cyan")
    if task.due_date:
        line.append(f" (due {task.due_date})", style="yellow")
    return line


def print_tasks(
    console: Console,
    tasks: list[Task],
    keep: Callable[[Task], bool],
    *,
    show_archived: bool,
) -> None:
    console.print()
    if not tasks:
        console.print(WELCOME)
    elif not show_archived and not any(t.status is TaskStatus.UNDONE for t in tasks):
        console.print(NO_PENDING)
    else:
        for task in sort_for_display(tasks):
            if keep(task):
                console.print(task_line(task))
    console.print()


def describe(op: InverseOperation) -> str:
    """Short human-readable summary of a history entry."""
    if isinstance(op, Remove):
        return f"remove task {op.task_id}"
    if isinstance(op, Recreate):
        return f"recreate task {op.task_id} ({op.task.text!r})"
    return f"restore task {op.task_id} to {op.task.text!r} [{op.task.status.value}]"


def history_table(title: str, entries: list[HistoryEntry]) -> Table:
    table = Table(title=title, show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Operation")
    table.add_column("Recorded")
    for entry in entries:
        table.add_row(str(entry.id), Text(describe(entry.operation)), entry.created_at)
    return table

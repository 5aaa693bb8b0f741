# src/tasklist/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs exactly one command against it.
Every command returns success or prints a typed failure and exits with 1;
"nothing to undo/redo" is a normal result.
"""

from __future__ import annotations

import contextlib
import dataclasses
import logging
from collections.abc import Iterator
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from .. import __version__
from ..config import get_settings
from ..core.exceptions import CorruptDataError, CorruptHistoryError, StorageError, TaskNotFoundError
from ..logging_setup import setup_logging
from ..tasks.task_models import TaskStatus
from .bootstrap import AppState, create_initial_state
from .render import describe, history_table, print_tasks

logger = logging.getLogger(__name__)

console = Console()


@contextlib.contextmanager
def _reporting(ctx: click.Context, action: str) -> Iterator[None]:
    """Turn core failures into a red message and exit code 1."""
    try:
        yield
    except TaskNotFoundError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        ctx.exit(1)
    except CorruptHistoryError as exc:
        logger.error("Corrupt history while %s: %s", action, exc)
        console.print(f"[red]Error {action}:[/red] {escape(str(exc))}")
        console.print("Run [bold]tasklist history clear[/bold] to drop the damaged log.")
        ctx.exit(1)
    except CorruptDataError as exc:
        logger.error("Damaged task data while %s: %s", action, exc)
        console.print(f"[red]Error {action}:[/red] the task database holds an unreadable row: {escape(str(exc))}")
        ctx.exit(1)
    except StorageError as exc:
        logger.error("Storage failure while %s: %s", action, exc)
        console.print(f"[red]Error {action}:[/red] {escape(str(exc))}")
        ctx.exit(1)


def _state(ctx: click.Context) -> AppState:
    return ctx.find_object(AppState)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="tasklist")
@click.option(
    "--db",
    "db_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Use this SQLite file instead of the configured one.",
)
@click.pass_context
def main(ctx: click.Context, db_path: Path | None) -> None:
    """tasklist - a command-line todo list with undo/redo.

    \b
    Examples:
      tasklist add "Buy milk"   # Add a task
      tasklist done 1           # Mark task 1 as done
      tasklist undo             # Roll back the last change
      tasklist redo             # Re-apply it
    """
    # Tests (and embedders) may hand in a ready AppState via obj=...
    if not isinstance(ctx.obj, AppState):
        settings = get_settings()
        if db_path is not None:
            settings = dataclasses.replace(settings, db_path=db_path)

        level_name = str(settings.log_level).upper()
        setup_logging(
            log_dir=settings.log_dir,
            log_name=settings.app_name,
            console_level=getattr(logging, level_name, logging.WARNING),
        )
        logger.debug("Starting %s %s db=%s", settings.app_name, __version__, settings.db_path)

        with _reporting(ctx, "opening the task database"):
            ctx.obj = create_initial_state(settings=settings)
        ctx.call_on_close(ctx.obj.close)

    if ctx.invoked_subcommand is None:
        ctx.invoke(list_command)


# ---- views ----


@main.command("list")
@click.pass_context
def list_command(ctx: click.Context) -> None:
    """List pending and done tasks."""
    with _reporting(ctx, "reading tasks"):
        tasks = _state(ctx).controller.read_all()
    print_tasks(console, tasks, lambda t: t.status is not TaskStatus.ARCHIVED, show_archived=False)


@main.command("all")
@click.pass_context
def all_command(ctx: click.Context) -> None:
    """List all tasks, archived ones included."""
    with _reporting(ctx, "reading tasks"):
        tasks = _state(ctx).controller.read_all()
    print_tasks(console, tasks, lambda t: True, show_archived=True)


@main.command("archived")
@click.pass_context
def archived_command(ctx: click.Context) -> None:
    """List archived tasks."""
    with _reporting(ctx, "reading tasks"):
        tasks = _state(ctx).controller.read_all()
    print_tasks(console, tasks, lambda t: t.status is TaskStatus.ARCHIVED, show_archived=True)


@main.command("search")
@click.argument("content")
@click.pass_context
def search_command(ctx: click.Context, content: str) -> None:
    """Search for tasks by their contents (case-insensitive)."""
    with _reporting(ctx, "searching tasks"):
        controller = _state(ctx).controller
        tasks = controller.read_all()
        matches = {t.id for t in controller.search(content)}
    print_tasks(console, tasks, lambda t: t.id in matches, show_archived=True)


# ---- mutations ----


@main.command("add")
@click.argument("text")
@click.option("--tag", "-t", default=None, help="Short label for the task.")
@click.option("--due", "due_date", default=None, help="Due date, free-form (e.g. 2026-11-01).")
@click.pass_context
def add_command(ctx: click.Context, text: str, tag: str | None, due_date: str | None) -> None:
    """Add a task."""
    with _reporting(ctx, "creating task"):
        task = _state(ctx).controller.create(text, tag=tag, due_date=due_date)
    console.print(f"Task {task.id} added")


@main.command("remove")
@click.argument("task_id", type=int)
@click.pass_context
def remove_command(ctx: click.Context, task_id: int) -> None:
    """Remove a task."""
    with _reporting(ctx, "removing task"):
        _state(ctx).controller.delete(task_id)
    console.print(f"Task {task_id} removed")


@main.command("update")
@click.argument("task_id", type=int)
@click.argument("text", required=False)
@click.option("--tag", "-t", default=None, help="Replace the tag.")
@click.option("--due", "due_date", default=None, help="Replace the due date.")
@click.option("--clear-tag", is_flag=True, help="Remove the tag.")
@click.option("--clear-due", is_flag=True, help="Remove the due date.")
@click.pass_context
def update_command(
    ctx: click.Context,
    task_id: int,
    text: str | None,
    tag: str | None,
    due_date: str | None,
    clear_tag: bool,
    clear_due: bool,
) -> None:
    """Update the text, tag or due date of a task."""
    if clear_tag and tag is not None:
        raise click.UsageError("--tag and --clear-tag cannot be combined.")
    if clear_due and due_date is not None:
        raise click.UsageError("--due and --clear-due cannot be combined.")

    changes: dict[str, str | None] = {}
    if text is not None:
        changes["text"] = text
    if tag is not None or clear_tag:
        changes["tag"] = tag
    if due_date is not None or clear_due:
        changes["due_date"] = due_date
    if not changes:
        raise click.UsageError("Nothing to update: give TEXT or a tag/due option.")

    with _reporting(ctx, "updating task"):
        _state(ctx).controller.update(task_id, **changes)
    console.print(f"Task {task_id} updated")


def _set_status(ctx: click.Context, task_id: int, status: TaskStatus) -> None:
    with _reporting(ctx, "modifying task"):
        _state(ctx).controller.set_status(task_id, status)
    console.print(f"Task {task_id} set to {status.value}")


@main.command("done")
@click.argument("task_id", type=int)
@click.pass_context
def done_command(ctx: click.Context, task_id: int) -> None:
    """Set a task to Done."""
    _set_status(ctx, task_id, TaskStatus.DONE)


@main.command("undone")
@click.argument("task_id", type=int)
@click.pass_context
def undone_command(ctx: click.Context, task_id: int) -> None:
    """Set a task back to Undone."""
    _set_status(ctx, task_id, TaskStatus.UNDONE)


@main.command("archive")
@click.argument("task_id", type=int)
@click.pass_context
def archive_command(ctx: click.Context, task_id: int) -> None:
    """Set a task to Archived."""
    _set_status(ctx, task_id, TaskStatus.ARCHIVED)


# ---- history ----


@main.command("undo")
@click.pass_context
def undo_command(ctx: click.Context) -> None:
    """Roll back the last change."""
    state = _state(ctx)
    with _reporting(ctx, "undoing"):
        outcome = state.controller.undo()
        remaining = state.ledger.count_undo()
    if not outcome.applied or outcome.operation is None:
        console.print("Nothing to undo")
        return
    console.print(f"Undone: {describe(outcome.operation)} ({remaining} left to undo)", markup=False)


@main.command("redo")
@click.pass_context
def redo_command(ctx: click.Context) -> None:
    """Re-apply the last undone change."""
    state = _state(ctx)
    with _reporting(ctx, "redoing"):
        outcome = state.controller.redo()
        remaining = state.ledger.count_redo()
    if not outcome.applied or outcome.operation is None:
        console.print("Nothing to redo")
        return
    console.print(f"Redone: {describe(outcome.operation)} ({remaining} left to redo)", markup=False)


@main.group("history", invoke_without_command=True)
@click.pass_context
def history_group(ctx: click.Context) -> None:
    """Show the undo and redo logs (newest first)."""
    if ctx.invoked_subcommand is not None:
        return
    ledger = _state(ctx).ledger
    with _reporting(ctx, "reading history"):
        undo_entries = ledger.list_undo()
        redo_entries = ledger.list_redo()
    console.print(history_table(f"Undo log ({len(undo_entries)})", undo_entries))
    console.print(history_table(f"Redo log ({len(redo_entries)})", redo_entries))


@history_group.command("clear")
@click.option("--undo", "only_undo", is_flag=True, help="Clear only the undo log.")
@click.option("--redo", "only_redo", is_flag=True, help="Clear only the redo log.")
@click.pass_context
def history_clear_command(ctx: click.Context, only_undo: bool, only_redo: bool) -> None:
    """Drop history entries (both logs unless --undo or --redo is given)."""
    ledger = _state(ctx).ledger
    clear_undo = only_undo or not only_redo
    clear_redo = only_redo or not only_undo
    with _reporting(ctx, "clearing history"):
        removed_undo = ledger.clear_undo() if clear_undo else 0
        removed_redo = ledger.clear_redo() if clear_redo else 0
    console.print(f"Cleared {removed_undo} undo and {removed_redo} redo entries")


if __name__ == "__main__":
    main()

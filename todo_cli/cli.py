"""Typer-based command line interface for the todo tracker."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from .config import load_settings
from .errors import StorageError, TaskNotFoundError, ValidationError
from .logging_setup import setup_logging
from .services import TaskService
from .shell import Shell
from .store import open_store
from .utils import local_now, parse_deadline
from .visualization.board import render_board, render_tally, render_task_table

logger = logging.getLogger(__name__)

app = typer.Typer(help="Local task tracker with deadlines and overdue detection.")


@dataclass(slots=True)
class AppState:
    console: Console
    tasks_file: Path
    task_service: TaskService


def get_state(ctx: typer.Context) -> AppState:
    if ctx.obj is None:
        raise typer.BadParameter("Application state not initialised")
    return ctx.obj


@app.callback()
def main(
    ctx: typer.Context,
    tasks_file: Optional[Path] = typer.Option(
        None,
        "--file",
        "-f",
        help="Task file (.json, or .db/.sqlite for SQLite). Defaults to $TODO_FILE or tasks.json.",
    ),
) -> None:
    settings = load_settings()
    setup_logging(settings.log_level, settings.log_file)
    path = tasks_file or settings.tasks_file
    ctx.obj = AppState(
        console=Console(),
        tasks_file=path,
        task_service=TaskService(open_store(path)),
    )


def _parse_deadline(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    deadline = parse_deadline(value)
    if deadline is None:
        raise typer.BadParameter("Deadlines must be valid dates formatted as YYYY-MM-DD")
    return deadline


def _storage_failure(state: AppState, exc: StorageError) -> typer.Exit:
    logger.error("Storage failure: %s", exc)
    state.console.print(f"[red]Storage error:[/red] {exc}")
    return typer.Exit(code=1)


@app.command("add")
def add_task(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the task"),
    deadline: Optional[str] = typer.Option(
        None, "--deadline", "-d", help="Optional deadline, YYYY-MM-DD"
    ),
) -> None:
    state = get_state(ctx)
    due = _parse_deadline(deadline)
    try:
        task = state.task_service.add(name, deadline=due)
    except ValidationError as exc:
        state.console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1)
    except StorageError as exc:
        raise _storage_failure(state, exc)
    state.console.print(f"[green]Created task {task.id}[/green]")
    state.console.print(render_task_table([task]))


@app.command("list")
def list_tasks(ctx: typer.Context) -> None:
    state = get_state(ctx)
    now = local_now()
    try:
        grouped = state.task_service.listing(now)
    except StorageError as exc:
        raise _storage_failure(state, exc)
    state.console.print(render_board(grouped, now))


@app.command("close")
def close_task(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="ID of the task to close"),
) -> None:
    state = get_state(ctx)
    try:
        task = state.task_service.close(task_id)
    except TaskNotFoundError as exc:
        state.console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1)
    except StorageError as exc:
        raise _storage_failure(state, exc)
    state.console.print(f"[green]Closed task {task.id}[/green]")


@app.command("remove")
def remove_task(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="ID of the task to remove"),
) -> None:
    state = get_state(ctx)
    try:
        state.task_service.remove(task_id)
    except NotImplementedError as exc:
        state.console.print(f"[yellow]{exc}[/yellow]")
        raise typer.Exit(code=1)


@app.command("status")
def show_status(ctx: typer.Context) -> None:
    state = get_state(ctx)
    try:
        tally = state.task_service.tally()
    except StorageError as exc:
        raise _storage_failure(state, exc)
    state.console.print(render_tally(tally))


@app.command("shell")
def run_shell(ctx: typer.Context) -> None:
    """Interactive mode: add, list, close, remove, help, quit."""
    state = get_state(ctx)
    try:
        state.task_service.load()
        Shell(state.task_service, state.console).run()
    except StorageError as exc:
        raise _storage_failure(state, exc)

"""Task board rendering using rich."""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, Mapping

from rich.columns import Columns
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..models import STATUS_ORDER, Status, Task
from ..utils import format_date

STATUS_COLORS = {
    Status.OVERDUE: "red",
    Status.TODO: "bright_blue",
    Status.DONE: "green",
}

STATUS_MARKERS = {
    Status.OVERDUE: "*",
    Status.TODO: "|",
    Status.DONE: "-",
}

EMPTY_MESSAGES = {
    Status.OVERDUE: "You have no overdue tasks",
    Status.TODO: "You have no tasks",
    Status.DONE: "Nothing closed yet",
}


def render_board(grouped: Mapping[Status, list[Task]], now: datetime) -> Columns:
    columns = [
        _build_status_column(status, grouped.get(status, []), now)
        for status in STATUS_ORDER
    ]
    return Columns(columns, expand=True)


def _build_status_column(status: Status, tasks: list[Task], now: datetime) -> Panel:
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column("Task", overflow="fold")
    if not tasks:
        table.add_row(f"[dim italic]{EMPTY_MESSAGES[status]}[/dim italic]")
    for task in tasks:
        table.add_row(_task_line(task, now))
    return Panel(
        table,
        title=f"[bold]{status.value}[/bold] ({len(tasks)})",
        border_style=STATUS_COLORS[status],
        padding=(1, 1),
    )


def _task_line(task: Task, now: datetime) -> str:
    line = f"{STATUS_MARKERS[task.status]} [dim]#{task.id}[/dim] {escape(task.name)}"
    if task.deadline is not None:
        line += f"\n  [yellow]due {format_date(task.deadline)}[/yellow]"
    age = task.age_days(now)
    line += f"\n  [dim]{age} day{'s' if age != 1 else ''} old[/dim]"
    return line


def render_task_table(tasks: Iterable[Task]) -> Table:
    table = Table(title="Tasks", show_lines=False)
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Status", style="magenta")
    table.add_column("Deadline", style="yellow")
    table.add_column("Created", style="dim")
    for task in tasks:
        table.add_row(
            str(task.id),
            escape(task.name),
            task.status.value,
            format_date(task.deadline) if task.deadline else "-",
            task.created_at.isoformat(timespec="minutes"),
        )
    return table


def render_tally(tally: Mapping[Status, int]) -> str:
    parts = [
        f"[{STATUS_COLORS[status]}]{status.value}: {tally.get(status, 0)}[/{STATUS_COLORS[status]}]"
        for status in STATUS_ORDER
    ]
    return "  ".join(parts)

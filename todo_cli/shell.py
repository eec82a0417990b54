"""Line-oriented interactive loop over a TaskService."""
from __future__ import annotations

import logging
from typing import Callable, Optional

from rich.console import Console
from rich.markup import escape

from .errors import TaskNotFoundError, ValidationError
from .services import TaskService
from .utils import local_now, parse_deadline
from .visualization.board import render_board, render_tally

logger = logging.getLogger(__name__)

PROMPT = "> "
DEADLINE_PROMPT = "Deadline (YYYY-MM-DD, blank for none): "

HELP_TEXT = """
Usage:
add [task_name]
    Adds new task named [task_name] under Todo, then asks for an optional deadline.

list
    List all overdue, todo and closed tasks, in that order.

close [task_id]
    Close task with provided [task_id], moves it from Todo or Overdue to Done.

remove [task_id]
    Removes task from list. Other task ids are not affected. (not supported yet)

help
    Show this message.

quit
    Save and exit.
"""

ReadLine = Callable[[str], Optional[str]]


class Shell:
    """Reads commands one line at a time until ``quit`` or end of input.

    ``read_line`` receives a prompt and returns the next line, or ``None``
    at end of input. It defaults to reading from the console.
    """

    def __init__(
        self,
        service: TaskService,
        console: Console,
        read_line: ReadLine | None = None,
    ) -> None:
        self.service = service
        self.console = console
        self.read_line = read_line or self._console_input

    def _console_input(self, prompt: str) -> str | None:
        try:
            return self.console.input(prompt)
        except EOFError:
            return None

    def run(self) -> None:
        try:
            while True:
                line = self.read_line(PROMPT)
                if line is None or not self.handle(line):
                    break
        except KeyboardInterrupt:
            self.console.print()
        self.service.save()
        logger.debug("Shell finished")

    def handle(self, line: str) -> bool:
        """Run one command line. Returns False when the loop should stop."""
        tokens = line.split()
        if not tokens:
            return True
        command = tokens[0]
        argument = line.strip()[len(command):].strip()

        if command == "quit":
            return False
        if command == "add":
            self.add(argument)
        elif command == "list":
            self.list()
        elif command == "close":
            self.close(argument)
        elif command == "remove":
            self.console.print("[yellow]Removing tasks is not supported yet[/yellow]")
        elif command == "help":
            self.console.print(HELP_TEXT, markup=False)
        else:
            self.console.print(f"Unknown command: {escape(command)}")
        return True

    def add(self, name: str) -> None:
        if not name:
            self.console.print("[red]Error:[/red] Cannot add a task with an empty name")
            return
        deadline = None
        answer = self.read_line(DEADLINE_PROMPT)
        if answer and answer.strip():
            deadline = parse_deadline(answer.strip())
            if deadline is None:
                self.console.print(
                    f"[yellow]Ignoring invalid date '{escape(answer.strip())}', "
                    "task has no deadline[/yellow]"
                )
        try:
            task = self.service.add(name, deadline=deadline)
        except ValidationError as exc:
            self.console.print(f"[red]Error:[/red] {exc}")
            return
        self.console.print(f"[green]Created task {task.id}[/green]")

    def list(self) -> None:
        now = local_now()
        grouped = self.service.listing(now)
        self.console.print(render_board(grouped, now))
        self.console.print(render_tally(self.service.tasks.tally_by_status()))

    def close(self, argument: str) -> None:
        if not argument:
            self.console.print("Usage: close <task_id>")
            return
        try:
            task_id = int(argument)
        except ValueError:
            self.console.print("[red]Error:[/red] Task id must be an integer")
            return
        try:
            task = self.service.close(task_id)
        except TaskNotFoundError as exc:
            self.console.print(f"[red]Error:[/red] {exc}")
            return
        self.console.print(f"[green]Closed task {task.id}[/green]")

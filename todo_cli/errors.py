"""Exception types raised by the task list and its stores."""
from __future__ import annotations

from pathlib import Path


class TodoError(Exception):
    """Base class for all errors raised by todo_cli."""


class ValidationError(TodoError, ValueError):
    """Rejected input, e.g. an empty task name."""


class TaskNotFoundError(TodoError, LookupError):
    def __init__(self, task_id: int) -> None:
        super().__init__(f"Open task with id {task_id} not found")
        self.task_id = task_id


class StorageError(TodoError):
    """The task store could not be read or written."""

    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = Path(path)

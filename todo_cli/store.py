"""Stores that load and save the full task list state."""
from __future__ import annotations

import copy
import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any, Protocol

from .errors import StorageError
from .models import Status, Task, TaskList
from .utils import format_ts, parse_ts

logger = logging.getLogger(__name__)

SQLITE_SUFFIXES = {".db", ".sqlite", ".sqlite3"}


class Store(Protocol):
    def load(self) -> TaskList:
        ...

    def save(self, task_list: TaskList) -> None:
        ...


def task_to_dict(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "name": task.name,
        "status": task.status.value,
        "created_at": format_ts(task.created_at),
        "deadline": format_ts(task.deadline) if task.deadline else None,
    }


def task_from_dict(raw: dict[str, Any]) -> Task:
    task_id = raw["id"]
    if not isinstance(task_id, int) or isinstance(task_id, bool):
        raise ValueError(f"task id must be an integer, got {task_id!r}")
    name = raw["name"]
    if not isinstance(name, str) or not name.strip():
        raise ValueError(f"task {task_id} has an empty name")
    deadline = raw.get("deadline")
    return Task(
        id=task_id,
        name=name,
        status=Status(raw["status"]),
        created_at=parse_ts(raw["created_at"]),
        deadline=parse_ts(deadline) if deadline is not None else None,
    )


def list_to_dict(task_list: TaskList) -> dict[str, Any]:
    return {
        "entries": [task_to_dict(task) for task in task_list.entries],
        "next_id": task_list.next_id,
    }


def list_from_dict(raw: dict[str, Any]) -> TaskList:
    """Rebuild a TaskList, raising ValueError/KeyError/TypeError on bad data."""
    if not isinstance(raw, dict):
        raise TypeError("task list must be a JSON object")
    entries = [task_from_dict(item) for item in raw["entries"]]
    next_id = raw["next_id"]
    if not isinstance(next_id, int) or isinstance(next_id, bool) or next_id < 0:
        raise ValueError(f"next_id must be a non-negative integer, got {next_id!r}")
    check_ids(entries, next_id)
    return TaskList(entries=entries, next_id=next_id)


def check_ids(entries: list[Task], next_id: int) -> None:
    seen: set[int] = set()
    for task in entries:
        if task.id in seen:
            raise ValueError(f"duplicate task id {task.id}")
        if task.id < 0 or task.id >= next_id:
            raise ValueError(f"task id {task.id} is outside the id cursor {next_id}")
        seen.add(task.id)


class JsonFileStore:
    """Task list persisted as a single JSON document.

    Saves go through a temporary file in the same directory followed by an
    atomic rename, so the target always holds either the old or the new
    state.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> TaskList:
        if not self.path.exists():
            logger.info("No task file at %s, starting with an empty list", self.path)
            return TaskList()
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                raw = json.load(fh)
        except OSError as exc:
            logger.error("Failed to read %s: %s", self.path, exc)
            raise StorageError(self.path, f"cannot read task file ({exc.strerror or exc})") from exc
        except ValueError as exc:
            logger.error("Failed to decode %s: %s", self.path, exc)
            raise StorageError(self.path, f"task file is not valid JSON ({exc})") from exc
        try:
            task_list = list_from_dict(raw)
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("Corrupt task file %s: %s", self.path, exc)
            raise StorageError(self.path, f"task file is corrupt ({exc})") from exc
        logger.info("Loaded %d task(s) from %s", task_list.size(), self.path)
        return task_list

    def save(self, task_list: TaskList) -> None:
        payload = json.dumps(list_to_dict(task_list), indent=2, ensure_ascii=False)
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
            )
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            if self.path.exists():
                os.chmod(tmp_name, stat.S_IMODE(self.path.stat().st_mode))
            os.replace(tmp_name, self.path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            logger.error("Failed to write %s: %s", self.path, exc)
            raise StorageError(self.path, f"cannot write task file ({exc.strerror or exc})") from exc
        logger.debug("Saved %d task(s) to %s", task_list.size(), self.path)


class MemoryStore:
    """In-process store holding an encoded snapshot; used by tests."""

    def __init__(self, snapshot: dict[str, Any] | None = None) -> None:
        self.snapshot = snapshot
        self.saves = 0

    def load(self) -> TaskList:
        if self.snapshot is None:
            return TaskList()
        return list_from_dict(copy.deepcopy(self.snapshot))

    def save(self, task_list: TaskList) -> None:
        self.snapshot = list_to_dict(task_list)
        self.saves += 1


def open_store(path: str | Path) -> Store:
    """Pick a store implementation from the file suffix."""
    path = Path(path).expanduser()
    if path.suffix.lower() in SQLITE_SUFFIXES:
        from .db import SqliteStore

        return SqliteStore(path)
    return JsonFileStore(path)

"""SQLite persistence for the todo CLI."""
from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Iterable, Sequence

from .errors import StorageError
from .models import Task, TaskList
from .store import list_from_dict
from .utils import format_ts

logger = logging.getLogger(__name__)


class Database:
    """Lightweight wrapper around sqlite3 for the application."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._connection: sqlite3.Connection | None = None

    def connect(self) -> sqlite3.Connection:
        if self._connection is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._connection = sqlite3.connect(self.path)
            self._connection.row_factory = sqlite3.Row
        return self._connection

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    @contextmanager
    def cursor(self) -> Generator[sqlite3.Cursor, None, None]:
        conn = self.connect()
        cur = conn.cursor()
        try:
            yield cur
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            cur.close()

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> None:
        with self.cursor() as cur:
            cur.execute(sql, params or [])

    def query(self, sql: str, params: Sequence[Any] | None = None) -> list[sqlite3.Row]:
        with self.cursor() as cur:
            cur.execute(sql, params or [])
            return cur.fetchall()

    def query_one(
        self, sql: str, params: Sequence[Any] | None = None
    ) -> sqlite3.Row | None:
        with self.cursor() as cur:
            cur.execute(sql, params or [])
            return cur.fetchone()

    def initialize(self) -> None:
        """Create tables if they are missing."""
        self.execute(
            """
            CREATE TABLE IF NOT EXISTS tasks (
                id INTEGER PRIMARY KEY,
                position INTEGER NOT NULL UNIQUE,
                name TEXT NOT NULL,
                status TEXT NOT NULL CHECK(status IN ('Todo', 'Done', 'Overdue')),
                created_at TEXT NOT NULL,
                deadline TEXT DEFAULT NULL
            );
            """
        )
        self.execute(
            """
            CREATE TABLE IF NOT EXISTS meta (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
            """
        )


class SqliteStore:
    """Task list persisted in a SQLite database.

    ``save`` rewrites every row inside one transaction, so a crash leaves
    the previous state in place.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> TaskList:
        if not self.path.exists():
            logger.info("No database at %s, starting with an empty list", self.path)
            return TaskList()
        database = Database(self.path)
        try:
            rows = database.query(
                "SELECT id, name, status, created_at, deadline FROM tasks ORDER BY position ASC"
            )
            cursor_row = database.query_one("SELECT value FROM meta WHERE key = 'next_id'")
            task_list = list_from_dict(
                {
                    "entries": [dict(row) for row in rows],
                    "next_id": self._cursor_value(cursor_row),
                }
            )
        except sqlite3.Error as exc:
            logger.error("Failed to read %s: %s", self.path, exc)
            raise StorageError(self.path, f"cannot read database ({exc})") from exc
        except (KeyError, TypeError, ValueError) as exc:
            logger.error("Corrupt database %s: %s", self.path, exc)
            raise StorageError(self.path, f"database is corrupt ({exc})") from exc
        finally:
            database.close()
        logger.info("Loaded %d task(s) from %s", task_list.size(), self.path)
        return task_list

    def save(self, task_list: TaskList) -> None:
        database = Database(self.path)
        try:
            database.initialize()
            with database.cursor() as cur:
                cur.execute("DELETE FROM tasks")
                cur.executemany(
                    """
                    INSERT INTO tasks(id, position, name, status, created_at, deadline)
                    VALUES(?, ?, ?, ?, ?, ?)
                    """,
                    self._task_rows(task_list.entries),
                )
                cur.execute(
                    "INSERT OR REPLACE INTO meta(key, value) VALUES('next_id', ?)",
                    (str(task_list.next_id),),
                )
        except (OSError, sqlite3.Error) as exc:
            logger.error("Failed to write %s: %s", self.path, exc)
            raise StorageError(self.path, f"cannot write database ({exc})") from exc
        finally:
            database.close()
        logger.debug("Saved %d task(s) to %s", task_list.size(), self.path)

    @staticmethod
    def _task_rows(tasks: Iterable[Task]) -> Generator[tuple, None, None]:
        for position, task in enumerate(tasks):
            yield (
                task.id,
                position,
                task.name,
                task.status.value,
                format_ts(task.created_at),
                format_ts(task.deadline) if task.deadline else None,
            )

    @staticmethod
    def _cursor_value(row: sqlite3.Row | None) -> Any:
        if row is None:
            return 0
        try:
            return int(row["value"])
        except (TypeError, ValueError):
            # Left as stored so validation reports it.
            return row["value"]

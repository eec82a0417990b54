# tests/conftest.py

from __future__ import annotations

from datetime import datetime, timedelta
from pathlib import Path

import pytest

from todo_cli.models import TaskList
from todo_cli.services import TaskService
from todo_cli.store import JsonFileStore, MemoryStore


@pytest.fixture()
def now() -> datetime:
    """Fixed, timezone-aware 'current time' so tests never race the clock."""
    return datetime(2024, 6, 15, 12, 0, 0).astimezone()


@pytest.fixture()
def yesterday(now: datetime) -> datetime:
    return now - timedelta(days=1)


@pytest.fixture()
def tomorrow(now: datetime) -> datetime:
    return now + timedelta(days=1)


@pytest.fixture()
def task_list() -> TaskList:
    return TaskList()


@pytest.fixture()
def json_path(tmp_path: Path) -> Path:
    return tmp_path / "tasks.json"


@pytest.fixture()
def json_store(json_path: Path) -> JsonFileStore:
    return JsonFileStore(json_path)


@pytest.fixture()
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture()
def service(memory_store: MemoryStore) -> TaskService:
    return TaskService(memory_store)

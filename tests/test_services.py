# tests/test_services.py

from __future__ import annotations

import pytest

from todo_cli.errors import StorageError, TaskNotFoundError, ValidationError
from todo_cli.models import Status, TaskList
from todo_cli.services import TaskService
from todo_cli.store import JsonFileStore, MemoryStore


class FailingStore:
    """Store whose every call fails, like an unreadable or read-only file."""

    def load(self) -> TaskList:
        raise StorageError("tasks.json", "cannot read task file (Permission denied)")

    def save(self, task_list: TaskList) -> None:
        raise StorageError("tasks.json", "cannot write task file (Permission denied)")


def test_service_loads_lazily(memory_store) -> None:
    memory_store.save(TaskList(next_id=3))
    memory_store.saves = 0
    service = TaskService(memory_store)
    assert service.add("first").id == 3


def test_add_persists_immediately(service, memory_store) -> None:
    task = service.add("Buy milk")
    assert task.id == 0
    assert task.status is Status.TODO
    assert memory_store.saves == 1
    assert memory_store.load().get(0).name == "Buy milk"


def test_invalid_add_is_not_saved(service, memory_store) -> None:
    with pytest.raises(ValidationError):
        service.add("   ")
    assert memory_store.saves == 0
    assert service.tasks.next_id == 0


def test_close_persists_and_reports_missing(service, memory_store) -> None:
    service.add("a")
    service.close(0)
    assert memory_store.load().get(0).status is Status.DONE
    saves = memory_store.saves

    with pytest.raises(TaskNotFoundError):
        service.close(0)
    with pytest.raises(TaskNotFoundError):
        service.close(99)
    assert memory_store.saves == saves


def test_listing_sweeps_and_saves_only_on_change(service, memory_store, now, yesterday) -> None:
    service.add("open")
    service.add("late", deadline=yesterday)
    saves = memory_store.saves

    grouped = service.listing(now)
    assert [t.name for t in grouped[Status.OVERDUE]] == ["late"]
    assert [t.name for t in grouped[Status.TODO]] == ["open"]
    assert grouped[Status.DONE] == []
    assert memory_store.saves == saves + 1
    assert memory_store.load().get(1).status is Status.OVERDUE

    service.listing(now)
    assert memory_store.saves == saves + 1


def test_tally_sweeps_first(service, now, yesterday) -> None:
    service.add("Buy milk")
    service.add("Pay rent", deadline=yesterday)
    assert service.tally(now) == {Status.TODO: 1, Status.OVERDUE: 1, Status.DONE: 0}
    service.close(1)
    assert service.tally(now) == {Status.TODO: 1, Status.OVERDUE: 0, Status.DONE: 1}


def test_remove_is_not_supported(service) -> None:
    service.add("keep me")
    with pytest.raises(NotImplementedError):
        service.remove(0)
    assert service.tasks.size() == 1


def test_storage_errors_propagate() -> None:
    service = TaskService(FailingStore())
    with pytest.raises(StorageError):
        service.add("anything")


def test_session_survives_restart(json_path, now, yesterday) -> None:
    first = TaskService(JsonFileStore(json_path))
    first.add("Buy milk")
    first.add("Pay rent", deadline=yesterday)
    first.close(0)

    second = TaskService(JsonFileStore(json_path))
    assert second.tasks == first.tasks
    assert second.add("Walk dog").id == 2
    assert second.tally(now) == {Status.TODO: 1, Status.OVERDUE: 1, Status.DONE: 1}


def test_memory_store_snapshot_is_independent() -> None:
    store = MemoryStore()
    service = TaskService(store)
    service.add("a")
    service.tasks.entries[0].name = "mutated in memory"
    assert store.load().get(0).name == "a"

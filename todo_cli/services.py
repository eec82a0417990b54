"""Business logic for one task-tracking session bound to a store."""
from __future__ import annotations

import logging
from datetime import datetime

from .models import Status, Task, TaskList
from .store import Store
from .utils import local_now

logger = logging.getLogger(__name__)


class TaskService:
    """Applies commands to a TaskList and persists after each mutation.

    The list is loaded from the store on first use. Status-dependent queries
    sweep for overdue tasks first; between sweeps statuses may be stale.
    """

    def __init__(self, store: Store) -> None:
        self.store = store
        self._tasks: TaskList | None = None

    @property
    def tasks(self) -> TaskList:
        if self._tasks is None:
            self._tasks = self.store.load()
        return self._tasks

    def load(self) -> TaskList:
        """Load the list now so storage errors surface before any command."""
        return self.tasks

    def add(self, name: str, deadline: datetime | None = None) -> Task:
        task_id = self.tasks.add_task(name, deadline=deadline)
        self.save()
        task = self.tasks.get(task_id)
        if task is None:
            raise RuntimeError("Task missing after creation")
        logger.info("Created task %s", task_id)
        return task

    def close(self, task_id: int) -> Task:
        task = self.tasks.close_task(task_id)
        self.save()
        logger.info("Closed task %s", task_id)
        return task

    def remove(self, task_id: int) -> None:
        raise NotImplementedError("Removing tasks is not supported yet")

    def refresh(self, now: datetime | None = None) -> datetime:
        now = now or local_now()
        if self.tasks.sweep_overdue(now):
            self.save()
        return now

    def listing(self, now: datetime | None = None) -> dict[Status, list[Task]]:
        self.refresh(now)
        return self.tasks.by_status()

    def tally(self, now: datetime | None = None) -> dict[Status, int]:
        self.refresh(now)
        return self.tasks.tally_by_status()

    def save(self) -> None:
        self.store.save(self.tasks)

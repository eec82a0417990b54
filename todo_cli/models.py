"""Domain models for the todo CLI: tasks, their statuses and the task list."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from .errors import TaskNotFoundError, ValidationError
from .utils import local_now

logger = logging.getLogger(__name__)


class Status(str, Enum):
    TODO = "Todo"
    DONE = "Done"
    OVERDUE = "Overdue"


# Display order of the status groups.
STATUS_ORDER = (Status.OVERDUE, Status.TODO, Status.DONE)


@dataclass(slots=True)
class Task:
    id: int
    name: str
    status: Status
    created_at: datetime
    deadline: datetime | None = None

    @classmethod
    def create(
        cls,
        id: int,
        name: str,
        deadline: datetime | None = None,
        now: datetime | None = None,
    ) -> "Task":
        return cls(
            id=id,
            name=name,
            status=Status.TODO,
            created_at=now or local_now(),
            deadline=deadline,
        )

    def is_overdue(self, now: datetime) -> bool:
        """True when the deadline has passed, whatever the current status."""
        return self.deadline is not None and self.deadline < now

    def age_days(self, now: datetime) -> int:
        return max((now - self.created_at).days, 0)


@dataclass(slots=True)
class TaskList:
    """Aggregate owning every task of a session and the id cursor.

    Ids come from ``next_id`` only and are never handed out twice, so they
    stay unique even if tasks were ever dropped from ``entries``.
    """

    entries: list[Task] = field(default_factory=list)
    next_id: int = 0

    def __len__(self) -> int:
        return len(self.entries)

    def size(self) -> int:
        return len(self.entries)

    def get(self, task_id: int) -> Task | None:
        for task in self.entries:
            if task.id == task_id:
                return task
        return None

    def add_task(
        self,
        name: str,
        deadline: datetime | None = None,
        now: datetime | None = None,
    ) -> int:
        name = name.strip()
        if not name:
            raise ValidationError("Cannot add a task with an empty name")
        task_id = self.next_id
        self.entries.append(Task.create(task_id, name, deadline=deadline, now=now))
        self.next_id += 1
        logger.debug("Added task id=%s name=%r deadline=%s", task_id, name, deadline)
        return task_id

    def close_task(self, task_id: int) -> Task:
        for task in self.entries:
            if task.id == task_id and task.status is not Status.DONE:
                task.status = Status.DONE
                logger.debug("Closed task id=%s", task_id)
                return task
        raise TaskNotFoundError(task_id)

    def sweep_overdue(self, now: datetime) -> list[Task]:
        """Promote open tasks past their deadline to ``Overdue``.

        Done and already overdue tasks are left alone, so repeated sweeps with
        the same ``now`` change nothing. Returns the promoted tasks.
        """
        promoted = []
        for task in self.entries:
            if task.status is Status.TODO and task.is_overdue(now):
                task.status = Status.OVERDUE
                promoted.append(task)
        if promoted:
            logger.debug("Marked %d task(s) overdue", len(promoted))
        return promoted

    def tally_by_status(self) -> dict[Status, int]:
        counts = {status: 0 for status in Status}
        for task in self.entries:
            counts[task.status] += 1
        return counts

    def by_status(self) -> dict[Status, list[Task]]:
        grouped: dict[Status, list[Task]] = {status: [] for status in STATUS_ORDER}
        for task in self.entries:
            grouped[task.status].append(task)
        return grouped

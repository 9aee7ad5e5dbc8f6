"""
Task Lifecycle Manager
======================

The business rules of the service: defaults on create, wholesale overwrite
on update, existence checks before update and delete, and timestamp
stamping.

Author: jetgause
Created: 2025-12-10
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from .database import TaskRecord
from .errors import TaskError, TaskResult
from .store import TaskStore

logger = logging.getLogger(__name__)

# Smallest step a stored DateTime can represent
TIMESTAMP_RESOLUTION = timedelta(microseconds=1)


def utc_now() -> datetime:
    """Current UTC time as a naive datetime, the form stored in the table."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class TaskLifecycleManager:
    """
    Enforces creation/update defaults and existence checks over a TaskStore.

    Every operation returns a TaskResult. A missing task is reported as a
    NOT_FOUND error; failures raised by the store are not caught here.
    """

    def __init__(self, store: TaskStore, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize the manager.

        Args:
            store: Persistence backend
            clock: Returns naive UTC datetimes; defaults to utc_now
        """
        self.store = store
        self.clock = clock or utc_now

    def list_all(self) -> TaskResult:
        """Return every stored task in store order."""
        records = self.store.list()
        logger.debug(f"Listed {len(records)} tasks")
        return TaskResult.success(records)

    def get_by_id(self, task_id: int) -> TaskResult:
        """Return the task with this id, or a NOT_FOUND error."""
        record = self.store.get(task_id)
        if record is None:
            logger.warning(f"Task {task_id} not found")
            return TaskResult.failure(TaskError.not_found(task_id))

        logger.debug(f"Retrieved task {task_id}")
        return TaskResult.success(record)

    def create(self, title: str, description: str, completed: Optional[bool] = None) -> TaskResult:
        """
        Create a task.

        Args:
            title: Task title
            description: Task description
            completed: Completion flag, False when omitted

        Returns:
            TaskResult holding the stored record with its new id
        """
        if completed is None:
            completed = False

        now = self.clock()
        record = TaskRecord(
            title=title,
            description=description,
            completed=completed,
            created_at=now,
            updated_at=now,
        )

        saved = self.store.put(record)
        logger.info(f"Created task {saved.id}")
        return TaskResult.success(saved)

    def update(
        self,
        task_id: int,
        title: str,
        description: str,
        completed: Optional[bool] = None
    ) -> TaskResult:
        """
        Overwrite title, description and completed on an existing task.

        An omitted ``completed`` is stored as False, not left unchanged.
        """
        found = self.get_by_id(task_id)
        if not found.ok:
            return found

        record = found.value
        record.title = title
        record.description = description
        record.completed = completed if completed is not None else False
        record.updated_at = self._next_update_time(record.updated_at)

        saved = self.store.put(record)
        logger.info(f"Updated task {task_id}")
        return TaskResult.success(saved)

    def delete(self, task_id: int) -> TaskResult:
        """Hard-delete a task, or return a NOT_FOUND error."""
        if not self.store.exists(task_id):
            logger.warning(f"Cannot delete task {task_id}: not found")
            return TaskResult.failure(TaskError.not_found(task_id))

        self.store.delete(task_id)
        logger.info(f"Deleted task {task_id}")
        return TaskResult.success()

    def _next_update_time(self, previous: datetime) -> datetime:
        # updated_at must strictly increase even when the clock does not move
        now = self.clock()
        if now <= previous:
            now = previous + TIMESTAMP_RESOLUTION
        return now

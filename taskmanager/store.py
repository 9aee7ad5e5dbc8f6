"""
Task Store
==========

Small persistence interface used by the lifecycle manager, with a
SQLAlchemy implementation for the service and an in-memory one for tests
and local experiments.

Each call is its own round trip. Nothing here spans more than one call in
a transaction.
"""

import itertools
import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from .database import DatabaseManager, TaskRecord

logger = logging.getLogger(__name__)


def copy_record(record: TaskRecord) -> TaskRecord:
    """Return a detached copy of a task record."""
    return TaskRecord(
        id=record.id,
        title=record.title,
        description=record.description,
        completed=record.completed,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


class TaskStore(ABC):
    """Create/read/update/delete/exists over task records keyed by id."""

    @abstractmethod
    def get(self, task_id: int) -> Optional[TaskRecord]:
        """Return the record with this id, or None."""

    @abstractmethod
    def list(self) -> List[TaskRecord]:
        """Return every record in store order."""

    @abstractmethod
    def put(self, record: TaskRecord) -> TaskRecord:
        """
        Insert or update a record.

        A record without an id is inserted and gets a fresh id. A record with
        an id replaces the stored row.

        Returns:
            The stored record, with its id populated
        """

    @abstractmethod
    def delete(self, task_id: int) -> None:
        """Remove the record with this id. Missing ids are a no-op."""

    @abstractmethod
    def exists(self, task_id: int) -> bool:
        """Check whether a record with this id is stored."""

    def ping(self) -> bool:
        """Check that the backing storage is reachable."""
        return True


class SQLAlchemyTaskStore(TaskStore):
    """
    TaskStore backed by the ``tasks`` table.

    Records returned from here are detached from their session; the session
    factory keeps attributes loaded after commit.
    """

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager

    def get(self, task_id: int) -> Optional[TaskRecord]:
        with self.db_manager.get_session() as session:
            return session.get(TaskRecord, task_id)

    def list(self) -> List[TaskRecord]:
        with self.db_manager.get_session() as session:
            return session.query(TaskRecord).order_by(TaskRecord.id.asc()).all()

    def put(self, record: TaskRecord) -> TaskRecord:
        with self.db_manager.get_session() as session:
            if record.id is None:
                session.add(record)
                session.flush()
                stored = record
            else:
                stored = session.merge(record)
                session.flush()
        logger.debug(f"Stored task {stored.id}")
        return stored

    def delete(self, task_id: int) -> None:
        with self.db_manager.get_session() as session:
            # Bulk delete: a row removed concurrently just matches zero rows
            count = session.query(TaskRecord).filter(
                TaskRecord.id == task_id
            ).delete(synchronize_session=False)
        if count == 0:
            logger.debug(f"Delete of task {task_id} matched no rows")

    def exists(self, task_id: int) -> bool:
        with self.db_manager.get_session() as session:
            return session.query(
                session.query(TaskRecord).filter(TaskRecord.id == task_id).exists()
            ).scalar()

    def ping(self) -> bool:
        """Check that the database answers a trivial query."""
        try:
            with self.db_manager.get_session() as session:
                session.query(TaskRecord.id).limit(1).all()
            return True
        except Exception as e:
            logger.error(f"Store health check failed: {e}")
            return False


class InMemoryTaskStore(TaskStore):
    """
    TaskStore kept in a dict.

    Ids come from a counter starting at 1 and are never reused. Records are
    copied in and out so callers cannot mutate stored state.
    """

    def __init__(self):
        self._records: Dict[int, TaskRecord] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def get(self, task_id: int) -> Optional[TaskRecord]:
        with self._lock:
            record = self._records.get(task_id)
            return copy_record(record) if record is not None else None

    def list(self) -> List[TaskRecord]:
        with self._lock:
            return [copy_record(r) for r in self._records.values()]

    def put(self, record: TaskRecord) -> TaskRecord:
        stored = copy_record(record)
        with self._lock:
            if stored.id is None:
                stored.id = next(self._ids)
            self._records[stored.id] = stored
        return copy_record(stored)

    def delete(self, task_id: int) -> None:
        with self._lock:
            self._records.pop(task_id, None)

    def exists(self, task_id: int) -> bool:
        with self._lock:
            return task_id in self._records

    def clear(self):
        """Remove all records. Ids keep counting."""
        with self._lock:
            self._records.clear()

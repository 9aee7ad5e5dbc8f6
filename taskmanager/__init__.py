"""
Task Manager
============

CRUD service for task records: lifecycle rules, persistence and the
HTTP/JSON API.

Author: jetgause
Version: 1.0.0
"""

__version__ = "1.0.0"
__all__ = [
    "TaskLifecycleManager",
    "TaskMapper",
    "TaskStore",
    "SQLAlchemyTaskStore",
    "InMemoryTaskStore",
    "TaskError",
    "TaskResult",
    "ErrorKind",
    "create_app",
]

from taskmanager.errors import ErrorKind, TaskError, TaskResult
from taskmanager.store import TaskStore, SQLAlchemyTaskStore, InMemoryTaskStore
from taskmanager.service import TaskLifecycleManager
from taskmanager.mapper import TaskMapper
from taskmanager.api import create_app

"""
Task error taxonomy.

The lifecycle manager reports a missing task as a value, not an exception:
every operation returns a TaskResult, and callers branch on the error kind.
Anything the store raises is left to propagate.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    """Classification used to pick an HTTP status."""
    NOT_FOUND = "not_found"
    VALIDATION_FAILED = "validation_failed"
    UNCLASSIFIED = "unclassified"


@dataclass(frozen=True)
class TaskError:
    """A domain failure with enough context to build an error body."""
    kind: ErrorKind
    message: str
    task_id: Optional[int] = None
    field_messages: List[str] = field(default_factory=list)

    @classmethod
    def not_found(cls, task_id: int) -> "TaskError":
        return cls(
            kind=ErrorKind.NOT_FOUND,
            message=f"Task with ID {task_id} not found",
            task_id=task_id,
        )

    @classmethod
    def validation_failed(cls, field_messages: List[str]) -> "TaskError":
        return cls(
            kind=ErrorKind.VALIDATION_FAILED,
            message="Validation failed",
            field_messages=list(field_messages),
        )

    @classmethod
    def unclassified(cls, exc: BaseException) -> "TaskError":
        return cls(kind=ErrorKind.UNCLASSIFIED, message=str(exc))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "task_id": self.task_id,
            "field_messages": list(self.field_messages),
        }


@dataclass(frozen=True)
class TaskResult:
    """
    Outcome of a lifecycle operation.

    Exactly one of ``value`` or ``error`` is meaningful: ``ok`` tells which.
    ``value`` is a TaskRecord, a list of them, or None for delete.
    """
    value: Any = None
    error: Optional[TaskError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any = None) -> "TaskResult":
        return cls(value=value)

    @classmethod
    def failure(cls, error: TaskError) -> "TaskResult":
        return cls(error=error)

    def unwrap(self) -> Any:
        """Return the value, raising LookupError if this is a failure."""
        if self.error is not None:
            raise LookupError(self.error.message)
        return self.value

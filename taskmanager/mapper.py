"""
Presentation mapper: persisted TaskRecord -> TaskResponse.
"""

from datetime import datetime, timezone
from typing import Iterable, List, Optional

from .database import TaskRecord
from .models import TaskResponse


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to a naive timestamp; convert an aware one to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class TaskMapper:
    """Converts task records into their wire representation."""

    @staticmethod
    def to_model(record: Optional[TaskRecord]) -> Optional[TaskResponse]:
        """Map one record; None maps to None."""
        if record is None:
            return None

        return TaskResponse(
            id=record.id,
            title=record.title,
            description=record.description,
            completed=record.completed,
            created_at=to_utc(record.created_at),
            updated_at=to_utc(record.updated_at),
        )

    @classmethod
    def to_models(cls, records: Iterable[TaskRecord]) -> List[TaskResponse]:
        return [cls.to_model(record) for record in records]

"""
Task Manager API Models

Pydantic models for the HTTP wire format: the task request body, the task
representation and the error body. Field names on the wire are camelCase.

Author: jetgause
Created: 2025-12-10
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


# ==================== TASK MODELS ====================

class TaskRequest(BaseModel):
    """Body for creating or replacing a task"""

    title: str = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Task title (required, non-empty)"
    )
    description: str = Field(
        ...,
        description="Task description (required, may be empty)"
    )
    completed: Optional[bool] = Field(
        None,
        description="Completion flag, false when omitted"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Write release notes",
                "description": "Summarize the changes since the last tag",
                "completed": False
            }
        }


class TaskResponse(BaseModel):
    """Externally visible task representation"""

    id: int = Field(..., description="Task identifier")
    title: str = Field(..., description="Task title")
    description: str = Field(..., description="Task description")
    completed: bool = Field(..., description="Completion flag")
    created_at: datetime = Field(
        ...,
        alias="createdAt",
        description="Creation time (ISO 8601, UTC)"
    )
    updated_at: datetime = Field(
        ...,
        alias="updatedAt",
        description="Last update time (ISO 8601, UTC)"
    )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "title": "Write release notes",
                "description": "Summarize the changes since the last tag",
                "completed": False,
                "createdAt": "2025-12-10T09:30:00Z",
                "updatedAt": "2025-12-10T09:30:00Z"
            }
        }


# ==================== ERROR MODELS ====================

class ErrorResponse(BaseModel):
    """Error body returned for 4xx and 5xx responses"""

    message: str = Field(..., description="Short error summary")
    timestamp: datetime = Field(..., description="When the error occurred (UTC)")
    details: str = Field("", description="Additional error information")

    class Config:
        json_schema_extra = {
            "example": {
                "message": "Task with ID 42 not found",
                "timestamp": "2025-12-10T09:30:00Z",
                "details": "The requested task does not exist in the database"
            }
        }

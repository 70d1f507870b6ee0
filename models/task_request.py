"""
Task Request/Response Models

This module defines the Pydantic models for the extraction and task endpoints.
These models handle validation and serialization for the /api routes.
"""

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID
from pydantic import BaseModel, ConfigDict, Field

from models.extraction_models import ExtractedTaskCandidate, PriorityEnum


class ExtractTasksRequest(BaseModel):
    """
    Request body for the extraction endpoint.

    Attributes:
        transcript: Meeting transcript text; emptiness is checked by the
            extraction service so that it is reported as a 400
    """
    transcript: str = Field(
        ...,
        description="Meeting transcript to extract tasks from"
    )


class ExtractTasksResponse(BaseModel):
    """
    Response from the extraction endpoint.

    Attributes:
        tasks: Validated task candidates, in model order
        message: Present only when no tasks were found
    """
    tasks: List[ExtractedTaskCandidate] = Field(default_factory=list)
    message: Optional[str] = Field(default=None)


class BulkCreateRequest(BaseModel):
    """
    Request body for bulk task creation.

    Items are kept raw so that each one can be validated on its own;
    a malformed item is skipped instead of failing the whole request.
    """
    tasks: List[Any] = Field(
        ...,
        description="Approved task candidates"
    )


class TaskUpdateRequest(BaseModel):
    """
    Partial update for a task. Owner, id and creation time are not updatable.

    A naive due_date_utc is interpreted in the caller's timezone.
    """
    model_config = ConfigDict(extra="ignore")

    description: Optional[str] = None
    assignee: Optional[str] = None
    due_date_utc: Optional[datetime] = None
    due_date_original: Optional[str] = None
    priority: Optional[PriorityEnum] = None
    completed: Optional[bool] = None


class TaskResponse(BaseModel):
    """A persisted task as returned by the API."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: str
    description: str
    assignee: str
    due_date_utc: datetime
    due_date_original: str
    priority: PriorityEnum
    completed: bool
    created_at: datetime


class TaskListItem(TaskResponse):
    """Task augmented with its due date rendered in the caller's timezone."""
    due_date_local: str

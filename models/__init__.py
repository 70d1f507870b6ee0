"""Data models for the meeting task extractor."""
from .extraction_models import (
    ExtractedTaskCandidate,
    ExtractionResult,
    PriorityEnum,
    PRIORITY_LABELS,
)
from .db_models import TaskModel
from .request_context import RequestContext
from .task_request import (
    ExtractTasksRequest,
    ExtractTasksResponse,
    BulkCreateRequest,
    TaskUpdateRequest,
    TaskResponse,
    TaskListItem,
)

__all__ = [
    # Extraction models
    "ExtractedTaskCandidate",
    "ExtractionResult",
    "PriorityEnum",
    "PRIORITY_LABELS",
    # Database models
    "TaskModel",
    # Request context
    "RequestContext",
    # API models
    "ExtractTasksRequest",
    "ExtractTasksResponse",
    "BulkCreateRequest",
    "TaskUpdateRequest",
    "TaskResponse",
    "TaskListItem",
]

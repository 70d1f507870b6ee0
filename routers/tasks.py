"""
Task router for the owner-scoped task resource.

Every endpoint requires an authenticated caller and only ever touches that
caller's tasks. A task owned by another user is reported as not found.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import ValidationError

from models.extraction_models import ExtractedTaskCandidate, PriorityEnum
from models.request_context import RequestContext
from models.task_request import (
    BulkCreateRequest,
    TaskListItem,
    TaskResponse,
    TaskUpdateRequest,
)
from services.task_store import TaskStore
from utils.context_utils import get_request_context
from utils.date_utils import utc_to_local

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def get_task_store() -> TaskStore:
    return TaskStore()


@router.get("", response_model=List[TaskListItem])
async def list_tasks(
    priority: Optional[PriorityEnum] = None,
    context: RequestContext = Depends(get_request_context),
    store: TaskStore = Depends(get_task_store),
):
    """
    List the caller's tasks with due dates rendered in their timezone.

    Args:
        priority: Optional priority filter (P1-P4)
    """
    try:
        tasks = await store.list_tasks(context.user_id, priority=priority)
    except Exception as e:
        logger.error(
            f"Get tasks failed: trace_id={context.trace_id}, "
            f"user_id={context.user_id}, error={type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Failed to fetch tasks")

    return [
        TaskListItem(
            **TaskResponse.model_validate(task).model_dump(),
            due_date_local=utc_to_local(task.due_date_utc, context.timezone)
        )
        for task in tasks
    ]


@router.post("", response_model=List[TaskResponse], status_code=201)
async def create_tasks(
    body: BulkCreateRequest,
    context: RequestContext = Depends(get_request_context),
    store: TaskStore = Depends(get_task_store),
):
    """
    Create tasks from approved candidates.

    Each item is validated and stored on its own. Items that fail validation
    or storage are logged and left out of the response.

    Returns:
        The created tasks, in request order
    """
    logger.info(
        f"Bulk create started: trace_id={context.trace_id}, "
        f"user_id={context.user_id}, count={len(body.tasks)}"
    )

    created = []
    for index, item in enumerate(body.tasks):
        try:
            candidate = ExtractedTaskCandidate.model_validate(item)
        except ValidationError as e:
            logger.warning(
                f"Skipping malformed task: trace_id={context.trace_id}, "
                f"index={index}, errors={e.error_count()}"
            )
            continue

        try:
            task = await store.create_task(context.user_id, candidate, context.timezone)
        except Exception as e:
            logger.error(
                f"Error creating task: trace_id={context.trace_id}, index={index}, "
                f"error={type(e).__name__}: {str(e)}",
                exc_info=True
            )
            continue

        created.append(TaskResponse.model_validate(task))

    logger.info(
        f"Bulk create complete: trace_id={context.trace_id}, "
        f"requested={len(body.tasks)}, created={len(created)}"
    )
    return created


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID,
    body: TaskUpdateRequest,
    context: RequestContext = Depends(get_request_context),
    store: TaskStore = Depends(get_task_store),
):
    """
    Apply a partial update to one of the caller's tasks.

    Raises:
        HTTPException: 404 if the task does not exist or is not the caller's
    """
    updates = body.model_dump(exclude_unset=True)

    try:
        task = await store.update_task(task_id, context.user_id, updates, context.timezone)
    except Exception as e:
        logger.error(
            f"Update task failed: trace_id={context.trace_id}, task_id={task_id}, "
            f"error={type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Failed to update task")

    if task is None:
        raise HTTPException(status_code=404, detail="Task not found")

    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: UUID,
    context: RequestContext = Depends(get_request_context),
    store: TaskStore = Depends(get_task_store),
):
    """
    Delete one of the caller's tasks.

    Raises:
        HTTPException: 404 if the task does not exist or is not the caller's
    """
    try:
        deleted = await store.delete_task(task_id, context.user_id)
    except Exception as e:
        logger.error(
            f"Delete task failed: trace_id={context.trace_id}, task_id={task_id}, "
            f"error={type(e).__name__}: {str(e)}",
            exc_info=True
        )
        raise HTTPException(status_code=500, detail="Failed to delete task")

    if not deleted:
        raise HTTPException(status_code=404, detail="Task not found")

    return Response(status_code=204)

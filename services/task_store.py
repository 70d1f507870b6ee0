"""Task Store for owner-scoped task persistence.

Every operation takes the caller's user id. Update and delete go through
_get_owned_task, so a task owned by someone else looks exactly like a task
that does not exist.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlmodel import select

from models.db_models import TaskModel
from models.extraction_models import ExtractedTaskCandidate, PriorityEnum
from services.database import get_async_session
from utils.date_utils import DEFAULT_TIMEZONE, local_to_utc, resolve_due_date

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    "description",
    "assignee",
    "due_date_utc",
    "due_date_original",
    "priority",
    "completed",
}


class TaskStore:
    """Durable collection of tasks keyed by id and scoped by owner."""

    async def list_tasks(
        self,
        user_id: str,
        priority: Optional[PriorityEnum] = None
    ) -> List[TaskModel]:
        """List the caller's tasks, optionally filtered by priority.

        Args:
            user_id: The owner whose tasks are returned.
            priority: Only return tasks with this priority.

        Returns:
            Tasks owned by user_id, in no particular order.
        """
        query = select(TaskModel).where(TaskModel.user_id == user_id)
        if priority is not None:
            query = query.where(TaskModel.priority == priority.value)

        async with get_async_session() as session:
            result = await session.execute(query)
            tasks = list(result.scalars().all())

        logger.debug(f"Listed tasks: user_id={user_id}, count={len(tasks)}")
        return tasks

    async def create_task(
        self,
        user_id: str,
        candidate: ExtractedTaskCandidate,
        timezone_name: str = DEFAULT_TIMEZONE,
        now: Optional[datetime] = None
    ) -> TaskModel:
        """Persist one approved candidate as a task.

        The due date phrase is parsed best-effort; when parsing fails the task
        is still created with a due date one day out. The phrase itself is
        always kept in due_date_original.

        Args:
            user_id: The owner of the new task.
            candidate: The approved candidate.
            timezone_name: IANA timezone the due date phrase is expressed in.
            now: Naive UTC reference time for relative phrases and the fallback.

        Returns:
            The created TaskModel.
        """
        task = TaskModel(
            user_id=user_id,
            description=candidate.description,
            assignee=candidate.assignee,
            due_date_utc=resolve_due_date(candidate.due_date_text, timezone_name, now=now),
            due_date_original=candidate.due_date_text,
            priority=candidate.priority.value,
            completed=False,
        )

        async with get_async_session() as session:
            session.add(task)
            await session.commit()
            await session.refresh(task)

        logger.info(f"Task created: task_id={task.id}, user_id={user_id}")
        return task

    async def update_task(
        self,
        task_id: UUID,
        user_id: str,
        updates: Dict[str, Any],
        timezone_name: str = DEFAULT_TIMEZONE
    ) -> Optional[TaskModel]:
        """Apply a partial update to one of the caller's tasks.

        Keys outside UPDATABLE_FIELDS are ignored. A naive due_date_utc is
        taken to be local time in timezone_name.

        Returns:
            The updated TaskModel, or None if no task with that id is owned by
            user_id.
        """
        async with get_async_session() as session:
            task = await self._get_owned_task(session, task_id, user_id)
            if task is None:
                return None

            for field, value in updates.items():
                if field not in UPDATABLE_FIELDS or value is None:
                    continue
                if field == "due_date_utc":
                    value = local_to_utc(value, timezone_name)
                elif field == "priority":
                    value = PriorityEnum(value).value
                setattr(task, field, value)

            session.add(task)
            await session.commit()
            await session.refresh(task)

        logger.info(
            f"Task updated: task_id={task_id}, user_id={user_id}, "
            f"fields={sorted(k for k, v in updates.items() if k in UPDATABLE_FIELDS and v is not None)}"
        )
        return task

    async def delete_task(self, task_id: UUID, user_id: str) -> bool:
        """Delete one of the caller's tasks.

        Returns:
            True if a row was removed, False if no task with that id is owned
            by user_id.
        """
        async with get_async_session() as session:
            task = await self._get_owned_task(session, task_id, user_id)
            if task is None:
                return False

            await session.delete(task)
            await session.commit()

        logger.info(f"Task deleted: task_id={task_id}, user_id={user_id}")
        return True

    async def _get_owned_task(
        self,
        session,
        task_id: UUID,
        user_id: str
    ) -> Optional[TaskModel]:
        """Fetch a task only if user_id owns it.

        Args:
            session: The database session.
            task_id: The task to look up.
            user_id: The caller.

        Returns:
            The TaskModel, or None when missing or owned by another user.
        """
        result = await session.execute(
            select(TaskModel).where(
                TaskModel.id == task_id,
                TaskModel.user_id == user_id,
            )
        )
        task = result.scalar_one_or_none()

        if task is None:
            logger.info(f"Task not found for caller: task_id={task_id}, user_id={user_id}")

        return task

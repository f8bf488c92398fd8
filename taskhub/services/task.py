"""
Task Service
Business logic for board tasks and assignment.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from taskhub.core.database import AsyncSessionLocal
from taskhub.core.exceptions import BadRequestError, NotFoundError
from taskhub.models.task import Task
from taskhub.repositories.task import task_repository
from taskhub.repositories.user import user_repository
from taskhub.schemas.base import page_to_offset, parse_uuid
from taskhub.schemas.task import (
    StatusUpdateItem,
    TaskCreateRequest,
    TaskFilters,
    TaskResponse,
    TaskUpdateRequest,
)
from taskhub.schemas.user import AssignableUserFilters, AssignableUserResponse

logger = structlog.get_logger()

# Columns that cannot be cleared through a partial update
NON_NULLABLE_FIELDS = ("title", "status", "priority", "tags", "subtasks")


class TaskService:
    def __init__(self, session_factory: async_sessionmaker = AsyncSessionLocal) -> None:
        # Bulk updates open one session per item from this factory
        self.session_factory = session_factory

    async def _get_or_404(self, db: AsyncSession, task_id: Any) -> Task:
        task = await task_repository.get(db, id=parse_uuid(task_id, "task ID"))
        if not task:
            raise NotFoundError("Task not found")
        return task

    async def _ensure_assignee_exists(self, db: AsyncSession, user_id: UUID) -> None:
        if not await user_repository.exists(db, user_id):
            raise BadRequestError("Assigned user not found")

    async def _to_response(self, db: AsyncSession, task: Task) -> TaskResponse:
        await db.refresh(task, attribute_names=["assignee"])
        return TaskResponse.model_validate(task)

    async def list_tasks(self, db: AsyncSession, filters: TaskFilters) -> list[TaskResponse]:
        tasks = await task_repository.filter_tasks(
            db,
            search=filters.search,
            assigned_to=filters.assigned_to,
            status=filters.status,
            priority=filters.priority,
        )
        return [TaskResponse.model_validate(task) for task in tasks]

    async def get_task(self, db: AsyncSession, task_id: Any) -> TaskResponse:
        return TaskResponse.model_validate(await self._get_or_404(db, task_id))

    async def create_task(self, db: AsyncSession, data: TaskCreateRequest, created_by: UUID) -> TaskResponse:
        if data.assigned_to:
            await self._ensure_assignee_exists(db, data.assigned_to)

        values = data.model_dump()
        values["assigned_to_id"] = values.pop("assigned_to")
        values["created_by_id"] = created_by

        task = await task_repository.create(db, obj_in=values)

        logger.info(
            "Task created",
            task_id=str(task.id),
            created_by=str(created_by),
            assigned_to=str(task.assigned_to_id) if task.assigned_to_id else None,
        )
        return await self._to_response(db, task)

    async def update_task(self, db: AsyncSession, task_id: Any, data: TaskUpdateRequest) -> TaskResponse:
        task = await self._get_or_404(db, task_id)

        updates = data.model_dump(exclude_unset=True)
        for field in NON_NULLABLE_FIELDS:
            if field in updates and updates[field] is None:
                updates.pop(field)
        if "description" in updates and updates["description"] is None:
            updates["description"] = ""

        if "assigned_to" in updates:
            assigned_to = updates.pop("assigned_to")
            if assigned_to is not None:
                await self._ensure_assignee_exists(db, assigned_to)
            updates["assigned_to_id"] = assigned_to

        task = await task_repository.update(db, db_obj=task, obj_in=updates)

        logger.info("Task updated", task_id=str(task.id), fields=sorted(updates))
        return await self._to_response(db, task)

    async def delete_task(self, db: AsyncSession, task_id: Any) -> None:
        task = await self._get_or_404(db, task_id)
        await task_repository.delete(db, id=task.id)

        logger.info("Task deleted", task_id=str(task.id))

    async def _apply_status(self, item: StatusUpdateItem) -> Optional[TaskResponse]:
        try:
            task_id = UUID(item.id)
        except ValueError:
            return None

        async with self.session_factory() as session:
            task = await task_repository.get(session, id=task_id)
            if not task:
                return None

            task = await task_repository.update(session, db_obj=task, obj_in={"status": item.status})
            return await self._to_response(session, task)

    async def bulk_update_status(self, updates: list[StatusUpdateItem]) -> list[Optional[TaskResponse]]:
        """
        Move several tasks at once.

        Each item is written concurrently in its own session, so one failure
        does not undo the others. The result lines up with ``updates``; a
        missing task or a failed write leaves None at its position.
        """
        if not updates:
            raise BadRequestError("Updates array is required and must not be empty")

        results = await asyncio.gather(
            *(self._apply_status(item) for item in updates),
            return_exceptions=True,
        )

        tasks: list[Optional[TaskResponse]] = []
        for item, result in zip(updates, results):
            if isinstance(result, BaseException):
                logger.error("Bulk status update failed", task_id=item.id, status=item.status, error=str(result))
                tasks.append(None)
            else:
                tasks.append(result)

        logger.info(
            "Bulk status update finished",
            requested=len(updates),
            updated=sum(1 for task in tasks if task is not None),
        )
        return tasks

    async def list_assignable_users(
        self,
        db: AsyncSession,
        filters: AssignableUserFilters,
    ) -> tuple[list[AssignableUserResponse], int]:
        users, total = await user_repository.filter_assignable(
            db,
            search=filters.search,
            skip=page_to_offset(filters.page, filters.limit),
            limit=filters.limit,
        )
        return [AssignableUserResponse.model_validate(user) for user in users], total


task_service = TaskService()

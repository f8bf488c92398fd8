"""
Task Repository
Database operations for board tasks.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

import structlog
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.models.task import Task
from taskhub.repositories.base import CRUDBase
from taskhub.schemas.task import TaskCreateRequest, TaskUpdateRequest

logger = structlog.get_logger()


class TaskRepository(CRUDBase[Task, TaskCreateRequest, TaskUpdateRequest]):
    async def filter_tasks(
        self,
        db: AsyncSession,
        *,
        search: Optional[str] = None,
        assigned_to: Optional[UUID] = None,
        status: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> list[Task]:
        query = select(Task)

        if search:
            term = search.strip()
            query = query.where(
                or_(Task.title.icontains(term, autoescape=True), Task.description.icontains(term, autoescape=True))
            )

        if assigned_to:
            query = query.where(Task.assigned_to_id == assigned_to)

        if status:
            query = query.where(Task.status == status)

        if priority:
            query = query.where(Task.priority == priority)

        result = await db.execute(query.order_by(Task.created_at.desc(), Task.id))
        return list(result.scalars().all())


task_repository = TaskRepository(Task)

"""Task board endpoints."""

from __future__ import annotations

from typing import Any, Optional
from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.core.database import get_db
from taskhub.core.deps import Principal, require_task_management
from taskhub.models.task import TaskPriority, TaskStatus
from taskhub.schemas.base import DataResponse, PaginatedResponse, PaginationMeta
from taskhub.schemas.task import (
    BulkStatusUpdateRequest,
    TaskCreateRequest,
    TaskFilters,
    TaskListResponse,
    TaskResponse,
    TaskUpdateRequest,
)
from taskhub.schemas.user import AssignableUserFilters, AssignableUserResponse
from taskhub.services.task import task_service

logger = structlog.get_logger()
router = APIRouter()


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    search: Optional[str] = Query(default=None),
    assigned_to: Optional[UUID] = Query(default=None, alias="assignedTo"),
    task_status: Optional[TaskStatus] = Query(default=None, alias="status"),
    priority: Optional[TaskPriority] = Query(default=None),
    current_user: Principal = Depends(require_task_management),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """List tasks, newest first."""
    filters = TaskFilters(
        search=search,
        assigned_to=assigned_to,
        status=task_status,
        priority=priority,
    )

    tasks = await task_service.list_tasks(db, filters)
    return TaskListResponse(count=len(tasks), data=tasks)


@router.get("/users", response_model=PaginatedResponse[AssignableUserResponse])
async def list_assignable_users(
    search: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    current_user: Principal = Depends(require_task_management),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Available users that tasks can be assigned to."""
    filters = AssignableUserFilters(search=search, page=page, limit=limit)

    items, total = await task_service.list_assignable_users(db, filters)

    return PaginatedResponse(
        data=items,
        pagination=PaginationMeta.create(page=filters.page, limit=filters.limit, total=total),
    )


@router.post("/bulk-update", response_model=DataResponse[list[Optional[TaskResponse]]])
async def bulk_update_status(
    payload: BulkStatusUpdateRequest,
    current_user: Principal = Depends(require_task_management),
) -> Any:
    """Apply several status moves; a missing task comes back as null."""
    tasks = await task_service.bulk_update_status(payload.updates)
    return DataResponse(data=tasks, message="Tasks updated successfully")


@router.post("", response_model=DataResponse[TaskResponse], status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreateRequest,
    current_user: Principal = Depends(require_task_management),
    db: AsyncSession = Depends(get_db),
) -> Any:
    task = await task_service.create_task(db, task_data, created_by=current_user.id)
    return DataResponse(data=task, message="Task created successfully")


@router.get("/{task_id}", response_model=DataResponse[TaskResponse])
async def get_task(
    task_id: str,
    current_user: Principal = Depends(require_task_management),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return DataResponse(data=await task_service.get_task(db, task_id))


@router.put("/{task_id}", response_model=DataResponse[TaskResponse])
async def update_task(
    task_id: str,
    task_data: TaskUpdateRequest,
    current_user: Principal = Depends(require_task_management),
    db: AsyncSession = Depends(get_db),
) -> Any:
    task = await task_service.update_task(db, task_id, task_data)
    return DataResponse(data=task, message="Task updated successfully")


@router.delete("/{task_id}", response_model=DataResponse[dict])
async def delete_task(
    task_id: str,
    current_user: Principal = Depends(require_task_management),
    db: AsyncSession = Depends(get_db),
) -> Any:
    await task_service.delete_task(db, task_id)
    return DataResponse(data={}, message="Task deleted successfully")

"""Role management endpoints."""

from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.core.database import get_db
from taskhub.core.deps import Principal, require_role_management
from taskhub.schemas.base import DataResponse, MessageResponse, PaginatedResponse, PaginationMeta
from taskhub.schemas.role import RoleCreateRequest, RoleFilters, RoleResponse, RoleUpdateRequest
from taskhub.services.role import role_service

logger = structlog.get_logger()
router = APIRouter()


@router.get("/permissions", response_model=DataResponse[dict[str, int]])
async def list_permissions(
    current_user: Principal = Depends(require_role_management),
) -> Any:
    """Registered permission names and their codes."""
    return DataResponse(data=role_service.list_permissions())


@router.get("/all", response_model=DataResponse[list[RoleResponse]])
async def list_all_roles(
    current_user: Principal = Depends(require_role_management),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Every role, alphabetical, for pickers."""
    return DataResponse(data=await role_service.list_all_roles(db))


@router.get("", response_model=PaginatedResponse[RoleResponse])
async def list_roles(
    search: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    sort_by: str = Query(default="createdAt", alias="sortBy"),
    sort_order: str = Query(default="desc", alias="sortOrder", pattern="^(asc|desc)$"),
    current_user: Principal = Depends(require_role_management),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """List roles with search, sorting and pagination."""
    filters = RoleFilters(
        search=search,
        page=page,
        limit=limit,
        sort_by=sort_by,
        sort_order=sort_order,
    )

    items, total = await role_service.list_roles(db, filters)

    return PaginatedResponse(
        data=items,
        pagination=PaginationMeta.create(page=filters.page, limit=filters.limit, total=total),
    )


@router.post("", response_model=DataResponse[RoleResponse], status_code=status.HTTP_201_CREATED)
async def create_role(
    role_data: RoleCreateRequest,
    current_user: Principal = Depends(require_role_management),
    db: AsyncSession = Depends(get_db),
) -> Any:
    role = await role_service.create_role(db, role_data)
    return DataResponse(data=role, message="Role created successfully")


@router.get("/{role_id}", response_model=DataResponse[RoleResponse])
async def get_role(
    role_id: str,
    current_user: Principal = Depends(require_role_management),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return DataResponse(data=await role_service.get_role(db, role_id))


@router.put("/{role_id}", response_model=DataResponse[RoleResponse])
async def update_role(
    role_id: str,
    role_data: RoleUpdateRequest,
    current_user: Principal = Depends(require_role_management),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Update a role. Users already holding it keep their copied codes."""
    role = await role_service.update_role(db, role_id, role_data)
    return DataResponse(data=role, message="Role updated successfully")


@router.delete("/{role_id}", response_model=MessageResponse)
async def delete_role(
    role_id: str,
    current_user: Principal = Depends(require_role_management),
    db: AsyncSession = Depends(get_db),
) -> Any:
    await role_service.delete_role(db, role_id)
    return MessageResponse(message="Role deleted successfully")

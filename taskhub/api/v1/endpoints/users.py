"""User management endpoints (admin-only)."""

from __future__ import annotations

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.core.database import get_db
from taskhub.core.deps import Principal, require_user_management
from taskhub.models.user import UserStatus
from taskhub.schemas.base import DataResponse, PaginatedResponse, PaginationMeta
from taskhub.schemas.user import UserCreateRequest, UserFilters, UserResponse, UserUpdateRequest
from taskhub.services.user import user_service

logger = structlog.get_logger()
router = APIRouter()


def _created_message(email_sent: Optional[bool]) -> str:
    if email_sent is None:
        return "User created successfully"
    if email_sent:
        return "User created successfully and password emailed."
    return "User created successfully, but email failed to send."


@router.get("", response_model=PaginatedResponse[UserResponse])
async def list_users(
    search: Optional[str] = Query(default=None),
    user_status: Optional[UserStatus] = Query(default=None, alias="status"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    exclude_self: bool = Query(default=True, alias="excludeSelf"),
    current_user: Principal = Depends(require_user_management),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """List users with pagination and filters. The caller is left out unless excludeSelf=false."""
    filters = UserFilters(
        search=search,
        status=user_status,
        page=page,
        limit=limit,
        exclude_self=exclude_self,
    )

    items, total = await user_service.list_users(db, filters, current_user_id=current_user.id)

    return PaginatedResponse(
        data=items,
        pagination=PaginationMeta.create(page=filters.page, limit=filters.limit, total=total),
    )


@router.post("", response_model=DataResponse[UserResponse], status_code=status.HTTP_201_CREATED)
async def create_user(
    user_data: UserCreateRequest,
    current_user: Principal = Depends(require_user_management),
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Create a user; without a password a temporary one is generated and emailed."""
    user, email_sent = await user_service.create_user(db, user_data)

    logger.info("Admin created user", admin_id=str(current_user.id), user_id=str(user.id), email_sent=email_sent)
    return DataResponse(data=user, message=_created_message(email_sent))


@router.get("/{user_id}", response_model=DataResponse[UserResponse])
async def get_user(
    user_id: str,
    current_user: Principal = Depends(require_user_management),
    db: AsyncSession = Depends(get_db),
) -> Any:
    return DataResponse(data=await user_service.get_user(db, user_id))


@router.put("/{user_id}", response_model=DataResponse[UserResponse])
async def update_user(
    user_id: str,
    user_data: UserUpdateRequest,
    current_user: Principal = Depends(require_user_management),
    db: AsyncSession = Depends(get_db),
) -> Any:
    user = await user_service.update_user(db, user_id, user_data)
    return DataResponse(data=user, message="User updated successfully")


@router.delete("/{user_id}", response_model=DataResponse[UserResponse])
async def delete_user(
    user_id: str,
    current_user: Principal = Depends(require_user_management),
    db: AsyncSession = Depends(get_db),
) -> Any:
    user = await user_service.delete_user(db, user_id)
    return DataResponse(data=user, message="User deleted successfully")

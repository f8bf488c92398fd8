"""
User Repository
Database operations for user management.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.models.user import User, UserStatus
from taskhub.repositories.base import CRUDBase
from taskhub.schemas.user import UserCreateRequest, UserUpdateRequest

logger = structlog.get_logger()


def _search_clause(search: str):
    # % and _ in the term match literally
    term = search.strip()
    return or_(User.name.icontains(term, autoescape=True), User.email.icontains(term, autoescape=True))


class UserRepository(CRUDBase[User, UserCreateRequest, UserUpdateRequest]):
    async def get_by_email(
        self,
        db: AsyncSession,
        email: str,
        exclude_id: Optional[UUID] = None,
    ) -> Optional[User]:
        query = select(User).where(User.email == email.lower().strip())
        if exclude_id:
            query = query.where(User.id != exclude_id)

        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def exists(self, db: AsyncSession, id: UUID) -> bool:
        result = await db.execute(select(User.id).where(User.id == id))
        return result.scalar_one_or_none() is not None

    async def filter_users(
        self,
        db: AsyncSession,
        *,
        search: Optional[str],
        status: Optional[str],
        exclude_id: Optional[UUID],
        skip: int,
        limit: int,
    ) -> tuple[list[User], int]:
        query = select(User)

        if search:
            query = query.where(_search_clause(search))

        if status:
            query = query.where(User.status == status)

        if exclude_id:
            query = query.where(User.id != exclude_id)

        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        query = query.order_by(User.created_at.desc(), User.id).offset(skip).limit(limit)
        result = await db.execute(query)

        return list(result.scalars().all()), total

    async def filter_assignable(
        self,
        db: AsyncSession,
        *,
        search: Optional[str],
        skip: int,
        limit: int,
    ) -> tuple[list[User], int]:
        """Available users only, alphabetical"""
        query = select(User).where(User.status == UserStatus.AVAILABLE.value)

        if search:
            query = query.where(_search_clause(search))

        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        query = query.order_by(User.name.asc(), User.id).offset(skip).limit(limit)
        result = await db.execute(query)

        return list(result.scalars().all()), total


user_repository = UserRepository(User)

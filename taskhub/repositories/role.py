"""
Role Repository
Database operations for role management.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

import structlog
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.models.role import Role
from taskhub.repositories.base import CRUDBase
from taskhub.schemas.role import RoleCreateRequest, RoleUpdateRequest

logger = structlog.get_logger()


class RoleRepository(CRUDBase[Role, RoleCreateRequest, RoleUpdateRequest]):
    async def get_by_name(
        self,
        db: AsyncSession,
        name: str,
        exclude_id: Optional[UUID] = None,
    ) -> Optional[Role]:
        """Case-insensitive lookup by name"""
        query = select(Role).where(func.lower(Role.name) == name.strip().lower())
        if exclude_id:
            query = query.where(Role.id != exclude_id)

        result = await db.execute(query.limit(1))
        return result.scalars().first()

    async def filter_roles(
        self,
        db: AsyncSession,
        *,
        search: Optional[str],
        skip: int,
        limit: int,
        sort_by: str,
        sort_order: str,
    ) -> tuple[list[Role], int]:
        query = select(Role)

        if search:
            term = search.strip()
            query = query.where(
                or_(Role.name.icontains(term, autoescape=True), Role.description.icontains(term, autoescape=True))
            )

        count_query = select(func.count()).select_from(query.subquery())
        total = (await db.execute(count_query)).scalar() or 0

        sort_column = getattr(Role, sort_by, Role.created_at)
        if sort_order.lower() == "asc":
            query = query.order_by(sort_column.asc(), Role.id)
        else:
            query = query.order_by(sort_column.desc(), Role.id)

        query = query.offset(skip).limit(limit)
        result = await db.execute(query)

        return list(result.scalars().all()), total

    async def list_all(self, db: AsyncSession) -> list[Role]:
        result = await db.execute(select(Role).order_by(Role.name.asc()))
        return list(result.scalars().all())


role_repository = RoleRepository(Role)

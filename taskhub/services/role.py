"""
Role Service
Business logic for role management.
"""

from __future__ import annotations

from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.core.exceptions import ConflictError, NotFoundError
from taskhub.core.permissions import permission_registry
from taskhub.models.role import Role
from taskhub.repositories.role import role_repository
from taskhub.schemas.base import page_to_offset, parse_uuid
from taskhub.schemas.role import RoleCreateRequest, RoleFilters, RoleResponse, RoleUpdateRequest

logger = structlog.get_logger()


class RoleService:
    def list_permissions(self) -> dict[str, int]:
        return permission_registry.as_dict()

    async def _get_or_404(self, db: AsyncSession, role_id: Any) -> Role:
        role = await role_repository.get(db, id=parse_uuid(role_id, "role ID"))
        if not role:
            raise NotFoundError("Role not found")
        return role

    async def create_role(self, db: AsyncSession, data: RoleCreateRequest) -> RoleResponse:
        if await role_repository.get_by_name(db, data.name):
            raise ConflictError("Role already exists")

        role = await role_repository.create(
            db,
            obj_in={
                "name": data.name,
                "description": data.description,
                "permissions": list(data.permissions),
            },
        )

        logger.info("Role created", role_id=str(role.id), name=role.name, permissions=role.permissions)
        return RoleResponse.model_validate(role)

    async def list_roles(self, db: AsyncSession, filters: RoleFilters) -> tuple[list[RoleResponse], int]:
        roles, total = await role_repository.filter_roles(
            db,
            search=filters.search,
            skip=page_to_offset(filters.page, filters.limit),
            limit=filters.limit,
            sort_by=filters.sort_by,
            sort_order=filters.sort_order if isinstance(filters.sort_order, str) else filters.sort_order.value,
        )
        return [RoleResponse.model_validate(role) for role in roles], total

    async def list_all_roles(self, db: AsyncSession) -> list[RoleResponse]:
        return [RoleResponse.model_validate(role) for role in await role_repository.list_all(db)]

    async def get_role(self, db: AsyncSession, role_id: Any) -> RoleResponse:
        return RoleResponse.model_validate(await self._get_or_404(db, role_id))

    async def update_role(self, db: AsyncSession, role_id: Any, data: RoleUpdateRequest) -> RoleResponse:
        role = await self._get_or_404(db, role_id)

        updates = data.model_dump(exclude_unset=True, exclude_none=True)

        new_name = updates.get("name")
        if new_name and new_name.lower() != role.name.lower():
            if await role_repository.get_by_name(db, new_name, exclude_id=role.id):
                raise ConflictError("Role with this name already exists")

        role = await role_repository.update(db, db_obj=role, obj_in=updates)

        # Users holding this role keep their copied permissions until reassigned
        logger.info("Role updated", role_id=str(role.id), fields=sorted(updates))
        return RoleResponse.model_validate(role)

    async def delete_role(self, db: AsyncSession, role_id: Any) -> None:
        role = await self._get_or_404(db, role_id)
        await role_repository.delete(db, id=role.id)

        logger.info("Role deleted", role_id=str(role.id), name=role.name)


role_service = RoleService()

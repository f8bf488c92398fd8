"""
Bootstrap admin creation service.
"""

from __future__ import annotations

import asyncio

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.core.permissions import permission_registry
from taskhub.core.security import get_password_hash
from taskhub.core.simple_config import settings
from taskhub.models.role import Role
from taskhub.models.user import User, UserStatus
from taskhub.repositories.role import role_repository
from taskhub.repositories.user import user_repository
from taskhub.services.user import default_picture, role_snapshot

logger = structlog.get_logger()


async def ensure_admin_role_exists(db: AsyncSession) -> Role:
    """Return the administrator role, creating it with every registered code"""
    role = await role_repository.get_by_name(db, settings.BOOTSTRAP_ADMIN_ROLE)
    if role:
        logger.info("Bootstrap role already exists", role_id=str(role.id), name=role.name)
        return role

    role = await role_repository.create(
        db,
        obj_in={
            "name": settings.BOOTSTRAP_ADMIN_ROLE,
            "description": "Full access to roles, users and tasks",
            "permissions": permission_registry.all_codes(),
        },
    )

    logger.info("Bootstrap role created", role_id=str(role.id), permissions=role.permissions)
    return role


async def ensure_bootstrap_admin_exists(db: AsyncSession) -> None:
    admin_email = settings.BOOTSTRAP_ADMIN_EMAIL.lower().strip()
    role = await ensure_admin_role_exists(db)

    existing = await user_repository.get_by_email(db, admin_email)
    if existing:
        logger.info("Bootstrap admin already exists", email=admin_email, user_id=str(existing.id))
        return

    bootstrap_user = User(
        name=settings.BOOTSTRAP_ADMIN_NAME,
        email=admin_email,
        password_hash=await asyncio.to_thread(get_password_hash, settings.BOOTSTRAP_ADMIN_PASSWORD),
        picture=default_picture(settings.BOOTSTRAP_ADMIN_NAME),
        status=UserStatus.AVAILABLE.value,
        email_verified=True,
        **role_snapshot(role),
    )

    db.add(bootstrap_user)
    await db.commit()
    await db.refresh(bootstrap_user)

    logger.info("Bootstrap admin created", email=admin_email, user_id=str(bootstrap_user.id))

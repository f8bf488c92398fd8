"""
User Service
Business logic for administrative user management.
"""

from __future__ import annotations

import asyncio
import secrets
import string
from datetime import datetime, timezone
from typing import Any, Optional
from urllib.parse import quote
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from taskhub.core.exceptions import (
    ACCOUNT_INACTIVE,
    BadRequestError,
    ConflictError,
    ForbiddenError,
    INACTIVE_ACCOUNT_DETAIL,
    NotFoundError,
    UnauthorizedError,
)
from taskhub.core.security import get_password_hash, verify_password
from taskhub.models.role import Role
from taskhub.models.user import User
from taskhub.repositories.role import role_repository
from taskhub.repositories.user import user_repository
from taskhub.schemas.base import page_to_offset, parse_uuid
from taskhub.schemas.user import UserCreateRequest, UserFilters, UserResponse, UserUpdateRequest
from taskhub.services.email_service import email_service

logger = structlog.get_logger()

AVATAR_URL = "https://ui-avatars.com/api/?name={name}"


def default_picture(name: str) -> str:
    return AVATAR_URL.format(name=quote(name, safe=""))


def role_snapshot(role: Optional[Role]) -> dict[str, Any]:
    """Column values for assigning (or clearing) a role"""
    if role is None:
        return {"role_id": None, "permissions": [], "permissions_synced_at": None}
    return {
        "role_id": role.id,
        "permissions": list(role.permissions or []),
        "permissions_synced_at": datetime.now(timezone.utc),
    }


class UserService:
    def _to_response(self, user: User) -> UserResponse:
        return UserResponse.model_validate(user)

    def _generate_temporary_password(self, length: int = 10) -> str:
        if length < 8:
            length = 8

        uppercase = secrets.choice(string.ascii_uppercase)
        lowercase = secrets.choice(string.ascii_lowercase)
        digit = secrets.choice(string.digits)
        special_chars = "!@#$%^&*()_+-=[]{}|;:,.<>?"
        special = secrets.choice(special_chars)

        remaining = [
            secrets.choice(string.ascii_letters + string.digits + special_chars)
            for _ in range(length - 4)
        ]

        chars = [uppercase, lowercase, digit, special] + remaining
        secrets.SystemRandom().shuffle(chars)
        return "".join(chars)

    async def _resolve_role(self, db: AsyncSession, role_id: str) -> Role:
        role = await role_repository.get(db, id=parse_uuid(role_id, "role ID"))
        if not role:
            raise BadRequestError("Role not found")
        return role

    async def _get_or_404(self, db: AsyncSession, user_id: Any) -> User:
        user = await user_repository.get(db, id=parse_uuid(user_id, "user ID"))
        if not user:
            raise NotFoundError("User not found")
        return user

    async def _send_credentials(self, user: User, temporary_password: str) -> bool:
        try:
            await asyncio.to_thread(
                email_service.send_temporary_password_email,
                to_email=user.email,
                name=user.name,
                temporary_password=temporary_password,
            )
            return True
        except Exception as exc:  # noqa: BLE001
            logger.error("Failed to send credentials email", user_id=str(user.id), email=user.email, error=str(exc))
            return False

    async def list_users(
        self,
        db: AsyncSession,
        filters: UserFilters,
        current_user_id: Optional[UUID] = None,
    ) -> tuple[list[UserResponse], int]:
        users, total = await user_repository.filter_users(
            db,
            search=filters.search,
            status=filters.status,
            exclude_id=current_user_id if filters.exclude_self else None,
            skip=page_to_offset(filters.page, filters.limit),
            limit=filters.limit,
        )
        return [self._to_response(user) for user in users], total

    async def get_user(self, db: AsyncSession, user_id: Any) -> UserResponse:
        return self._to_response(await self._get_or_404(db, user_id))

    async def create_user(self, db: AsyncSession, data: UserCreateRequest) -> tuple[UserResponse, Optional[bool]]:
        """
        Create an admin-managed account.

        Returns:
            The sanitized user and whether the credentials email went out
            (None when the caller supplied the password).
        """
        if await user_repository.get_by_email(db, data.email):
            raise ConflictError("Email already in use")

        role = await self._resolve_role(db, data.role_id) if data.role_id else None

        temporary_password = None
        password = data.password
        if password is None:
            temporary_password = self._generate_temporary_password()
            password = temporary_password

        password_hash = await asyncio.to_thread(get_password_hash, password)

        user = await user_repository.create(
            db,
            obj_in={
                "name": data.name,
                "email": data.email,
                "password_hash": password_hash,
                "picture": data.picture or default_picture(data.name),
                "status": data.status,
                "is_admin_created": True,
                "must_change_password": temporary_password is not None,
                **role_snapshot(role),
            },
        )
        await db.refresh(user, attribute_names=["role"])

        logger.info(
            "User created by admin",
            user_id=str(user.id),
            email=user.email,
            role_id=str(user.role_id) if user.role_id else None,
        )

        email_sent = None
        if temporary_password is not None:
            email_sent = await self._send_credentials(user, temporary_password)

        return self._to_response(user), email_sent

    async def update_user(self, db: AsyncSession, user_id: Any, data: UserUpdateRequest) -> UserResponse:
        user = await self._get_or_404(db, user_id)

        provided = data.model_fields_set
        updates: dict[str, Any] = {}

        for field in ("name", "status", "picture"):
            value = getattr(data, field)
            if field in provided and value is not None:
                updates[field] = value

        if "email" in provided and data.email is not None:
            if await user_repository.get_by_email(db, data.email, exclude_id=user.id):
                raise ConflictError("Email already in use")
            updates["email"] = data.email

        if "role_id" in provided:
            role = await self._resolve_role(db, data.role_id) if data.role_id else None
            updates.update(role_snapshot(role))

        user = await user_repository.update(db, db_obj=user, obj_in=updates)
        await db.refresh(user, attribute_names=["role"])

        logger.info("User updated by admin", user_id=str(user.id), fields=sorted(updates))
        return self._to_response(user)

    async def delete_user(self, db: AsyncSession, user_id: Any) -> UserResponse:
        user = await self._get_or_404(db, user_id)
        deleted = self._to_response(user)

        await user_repository.delete(db, id=user.id)

        logger.info("User deleted by admin", user_id=str(user.id), email=user.email)
        return deleted

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> User:
        user = await user_repository.get_by_email(db, email)
        if not user or not await asyncio.to_thread(verify_password, password, user.password_hash):
            logger.warning("Failed login attempt", email=email)
            raise UnauthorizedError("Invalid email or password")

        if not user.is_active:
            logger.warning("Login attempt on inactive account", user_id=str(user.id))
            raise ForbiddenError(INACTIVE_ACCOUNT_DETAIL, code=ACCOUNT_INACTIVE)

        logger.info("User logged in", user_id=str(user.id))
        return user

    async def change_password(
        self,
        db: AsyncSession,
        user_id: UUID,
        current_password: str,
        new_password: str,
    ) -> None:
        user = await self._get_or_404(db, user_id)

        if not await asyncio.to_thread(verify_password, current_password, user.password_hash):
            raise BadRequestError("Current password is incorrect")

        password_hash = await asyncio.to_thread(get_password_hash, new_password)
        await user_repository.update(
            db,
            db_obj=user,
            obj_in={"password_hash": password_hash, "must_change_password": False},
        )

        logger.info("Password changed", user_id=str(user.id))


user_service = UserService()

"""
FastAPI Dependencies
Authentication and authorization gates
"""

from dataclasses import dataclass
from typing import Callable, Optional
from uuid import UUID

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from taskhub.core.database import get_db
from taskhub.core.exceptions import (
    ACCOUNT_INACTIVE,
    INACTIVE_ACCOUNT_DETAIL,
    ForbiddenError,
    UnauthorizedError,
)
from taskhub.core.permissions import (
    ROLE_MANAGEMENT,
    TASK_MANAGEMENT,
    USER_MANAGEMENT,
    permission_registry,
)
from taskhub.core.security import verify_token
from taskhub.models.user import UserStatus
from taskhub.repositories.user import user_repository

logger = structlog.get_logger()

# Security scheme
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller, handed explicitly to endpoints and services"""
    id: UUID
    email: str
    status: str
    permissions: frozenset
    role_id: Optional[UUID] = None

    @property
    def is_active(self) -> bool:
        return self.status != UserStatus.NOT_AVAILABLE.value

    def has_permission(self, code: int) -> bool:
        return code in self.permissions


async def get_current_principal(
    db: AsyncSession = Depends(get_db),
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> Principal:
    """
    Resolve the caller from the bearer token

    Raises:
        UnauthorizedError: missing, invalid or expired token, or unknown user
        ForbiddenError: the account is not available
    """
    if not credentials:
        logger.warning("Missing authentication credentials")
        raise UnauthorizedError("Not authorized, token missing")

    subject = verify_token(credentials.credentials, token_type="access")
    try:
        user_id = UUID(subject)
    except ValueError:
        logger.warning("Token subject is not a user id", subject=subject)
        raise UnauthorizedError("Token invalid or expired")

    user = await user_repository.get(db, id=user_id)
    if not user:
        logger.warning("Token references unknown user", user_id=subject)
        raise UnauthorizedError("User not found")

    if not user.is_active:
        logger.warning("Inactive user attempted access", user_id=subject)
        raise ForbiddenError(INACTIVE_ACCOUNT_DETAIL, code=ACCOUNT_INACTIVE)

    logger.debug("User authenticated successfully", user_id=subject, email=user.email)
    return Principal(
        id=user.id,
        email=user.email,
        status=user.status,
        permissions=frozenset(user.permissions or []),
        role_id=user.role_id,
    )


def require_permission(permission_name: str, detail: str = "Forbidden: Insufficient permissions") -> Callable:
    """
    Dependency factory for a permission-code gate

    The code is looked up once; the check itself never touches the database.
    """
    code = permission_registry.code_for(permission_name)

    async def permission_checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not principal.is_active:
            raise ForbiddenError(INACTIVE_ACCOUNT_DETAIL, code=ACCOUNT_INACTIVE)

        if code is None or not principal.has_permission(code):
            logger.warning(
                "Permission denied",
                user_id=str(principal.id),
                permission=permission_name,
                code=code,
            )
            raise ForbiddenError(detail)

        return principal

    return permission_checker


require_role_management = require_permission(ROLE_MANAGEMENT)
require_user_management = require_permission(
    USER_MANAGEMENT, "Forbidden: Insufficient permissions for user management"
)
require_task_management = require_permission(
    TASK_MANAGEMENT, "Forbidden: Insufficient permissions for task management"
)

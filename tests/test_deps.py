"""
Tests for the authentication and authorization gates
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from taskhub.core.deps import (
    Principal,
    get_current_principal,
    require_permission,
    require_role_management,
    require_task_management,
    require_user_management,
)
from taskhub.core.exceptions import ACCOUNT_INACTIVE, ForbiddenError, UnauthorizedError
from taskhub.core.security import create_access_token


def _principal(permissions, status="available"):
    return Principal(
        id=uuid4(),
        email="someone@example.com",
        status=status,
        permissions=frozenset(permissions),
    )


def _credentials(token):
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestPermissionGates:
    """A gate only looks at its own code"""

    @pytest.mark.asyncio
    async def test_gate_allows_principal_with_code(self):
        principal = _principal([3])

        assert await require_role_management(principal) is principal

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "gate, other_codes",
        [
            (require_role_management, [1, 2]),
            (require_user_management, [2, 3]),
            (require_task_management, [1, 3]),
        ],
    )
    async def test_gate_denies_without_its_code(self, gate, other_codes):
        with pytest.raises(ForbiddenError) as exc_info:
            await gate(_principal(other_codes))

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_domain_specific_messages(self):
        with pytest.raises(ForbiddenError, match="user management"):
            await require_user_management(_principal([]))
        with pytest.raises(ForbiddenError, match="task management"):
            await require_task_management(_principal([]))

    @pytest.mark.asyncio
    async def test_inactive_principal_denied_even_with_code(self):
        with pytest.raises(ForbiddenError) as exc_info:
            await require_task_management(_principal([2], status="not_available"))

        assert exc_info.value.code == ACCOUNT_INACTIVE

    @pytest.mark.asyncio
    async def test_unregistered_permission_name_denies_everyone(self):
        gate = require_permission("billing")

        with pytest.raises(ForbiddenError):
            await gate(_principal([1, 2, 3]))

    def test_principal_is_immutable(self):
        principal = _principal([1])

        with pytest.raises(AttributeError):
            principal.permissions = frozenset({1, 2, 3})


class TestGetCurrentPrincipal:
    """Bearer token to Principal"""

    @pytest.fixture
    def user(self):
        return SimpleNamespace(
            id=uuid4(),
            email="member@example.com",
            status="available",
            is_active=True,
            permissions=[2],
            role_id=uuid4(),
        )

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        with pytest.raises(UnauthorizedError, match="token missing"):
            await get_current_principal(db=AsyncMock(), credentials=None)

    @pytest.mark.asyncio
    async def test_invalid_token(self):
        with pytest.raises(UnauthorizedError, match="Token invalid or expired"):
            await get_current_principal(db=AsyncMock(), credentials=_credentials("bogus"))

    @pytest.mark.asyncio
    async def test_non_uuid_subject(self):
        token = create_access_token(subject="not-a-uuid")

        with pytest.raises(UnauthorizedError):
            await get_current_principal(db=AsyncMock(), credentials=_credentials(token))

    @pytest.mark.asyncio
    async def test_unknown_user(self):
        token = create_access_token(subject=uuid4())

        with patch("taskhub.core.deps.user_repository.get", new=AsyncMock(return_value=None)):
            with pytest.raises(UnauthorizedError, match="User not found"):
                await get_current_principal(db=AsyncMock(), credentials=_credentials(token))

    @pytest.mark.asyncio
    async def test_inactive_user(self, user):
        user.status = "not_available"
        user.is_active = False
        token = create_access_token(subject=user.id)

        with patch("taskhub.core.deps.user_repository.get", new=AsyncMock(return_value=user)):
            with pytest.raises(ForbiddenError) as exc_info:
                await get_current_principal(db=AsyncMock(), credentials=_credentials(token))

        assert exc_info.value.code == ACCOUNT_INACTIVE

    @pytest.mark.asyncio
    async def test_returns_principal(self, user):
        token = create_access_token(subject=user.id)

        with patch("taskhub.core.deps.user_repository.get", new=AsyncMock(return_value=user)):
            principal = await get_current_principal(db=AsyncMock(), credentials=_credentials(token))

        assert principal.id == user.id
        assert principal.permissions == frozenset({2})
        assert principal.role_id == user.role_id

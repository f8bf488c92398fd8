"""
Tests for startup creation of the administrator role and account
"""

import pytest
from sqlalchemy import func, select

from conftest import ALL_CODES
from taskhub.core.simple_config import settings
from taskhub.models.role import Role
from taskhub.models.user import User
from taskhub.services.bootstrap_admin import ensure_bootstrap_admin_exists


@pytest.mark.asyncio
async def test_bootstrap_is_idempotent(db):
    await ensure_bootstrap_admin_exists(db)
    await ensure_bootstrap_admin_exists(db)

    roles = (await db.execute(select(Role))).scalars().all()
    user_count = (await db.execute(select(func.count(User.id)))).scalar()

    assert [role.name for role in roles] == [settings.BOOTSTRAP_ADMIN_ROLE]
    assert sorted(roles[0].permissions) == ALL_CODES
    assert user_count == 1


@pytest.mark.asyncio
async def test_bootstrap_admin_holds_every_code(db):
    await ensure_bootstrap_admin_exists(db)

    admin = (
        await db.execute(select(User).where(User.email == settings.BOOTSTRAP_ADMIN_EMAIL.lower()))
    ).scalar_one()

    assert sorted(admin.permissions) == ALL_CODES
    assert admin.permissions_synced_at is not None
    assert admin.role.name == settings.BOOTSTRAP_ADMIN_ROLE

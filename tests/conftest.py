"""
Shared test fixtures
API tests run against a throwaway SQLite database per test
"""

import asyncio
import os
from contextlib import asynccontextmanager

# Settings are read at import time, so the environment must be in place first
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test_taskhub.db"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-at-least-32-characters!"
os.environ["PERMISSIONS"] = "user_management:1,task_management:2,role_management:3"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SMTP_HOST"] = ""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from taskhub.core.database import Base, get_db
from taskhub.core.security import create_access_token, get_password_hash
from taskhub.main import app
from taskhub.models.role import Role
from taskhub.models.user import User, UserStatus
from taskhub.services.task import task_service
from taskhub.services.user import role_snapshot

USER_MANAGEMENT_CODE = 1
TASK_MANAGEMENT_CODE = 2
ROLE_MANAGEMENT_CODE = 3
ALL_CODES = [USER_MANAGEMENT_CODE, TASK_MANAGEMENT_CODE, ROLE_MANAGEMENT_CODE]

DEFAULT_PASSWORD = "secret123"


@pytest_asyncio.fixture
async def session_factory(tmp_path):
    """Session factory bound to a fresh database file"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'taskhub_test.db'}",
        poolclass=NullPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)
    yield factory

    await engine.dispose()


class SerializedSessions:
    """Hands out sessions one at a time; SQLite allows a single writer"""

    def __init__(self, factory):
        self.factory = factory
        self.lock = asyncio.Lock()

    @asynccontextmanager
    async def __call__(self):
        async with self.lock:
            async with self.factory() as session:
                yield session


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory, monkeypatch):
    """HTTP client wired to the test database"""
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(task_service, "session_factory", SerializedSessions(session_factory))

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client

    app.dependency_overrides.clear()


@pytest.fixture
def make_role(db):
    async def _make_role(name="Member", permissions=None, description=""):
        role = Role(name=name, description=description, permissions=list(permissions or []))
        db.add(role)
        await db.commit()
        await db.refresh(role)
        return role

    return _make_role


@pytest.fixture
def make_user(db):
    async def _make_user(
        name="Test User",
        email="user@example.com",
        role=None,
        status=UserStatus.AVAILABLE.value,
        password=DEFAULT_PASSWORD,
    ):
        user = User(
            name=name,
            email=email,
            password_hash=get_password_hash(password),
            status=status,
            **role_snapshot(role),
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make_user


def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(subject=user.id)}"}


@pytest_asyncio.fixture
async def admin(make_role, make_user):
    """User holding every permission code"""
    role = await make_role(name="Administrator", permissions=ALL_CODES)
    return await make_user(name="Admin", email="admin@example.com", role=role)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)

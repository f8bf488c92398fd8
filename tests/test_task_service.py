"""
Tests for Task Service
Unit tests for bulk status updates and assignment checks
"""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from taskhub.core.exceptions import BadRequestError, NotFoundError
from taskhub.schemas.task import StatusUpdateItem, TaskCreateRequest, TaskUpdateRequest
from taskhub.services.task import TaskService


# ==================== Fixtures ====================

def _task(status="TODO", **fields):
    now = datetime.now()
    values = dict(
        id=uuid4(),
        title="Task",
        description="",
        status=status,
        priority="MEDIUM",
        assignee=None,
        assigned_to_id=None,
        created_by_id=uuid4(),
        due_date=None,
        tags=[],
        subtasks=[],
        created_at=now,
        updated_at=now,
    )
    values.update(fields)
    return SimpleNamespace(**values)


@pytest.fixture
def mock_db():
    """Create a mock async database session"""
    db = AsyncMock()
    db.refresh = AsyncMock()
    return db


@pytest.fixture
def sessions_opened():
    return []


@pytest.fixture
def task_service(sessions_opened):
    """TaskService whose per-item sessions are mocks"""
    @asynccontextmanager
    async def session_factory():
        session = AsyncMock()
        sessions_opened.append(session)
        yield session

    return TaskService(session_factory=session_factory)


@pytest.fixture
def repository():
    with patch("taskhub.services.task.task_repository") as repo:
        repo.get = AsyncMock()
        repo.update = AsyncMock()
        repo.create = AsyncMock()
        yield repo


# ==================== Bulk update ====================


class TestBulkUpdateStatus:
    """Concurrent per-item status moves"""

    @pytest.mark.asyncio
    async def test_preserves_order_and_nulls_missing(self, task_service, repository, sessions_opened):
        first, second = _task(), _task()
        stored = {first.id: first, second.id: second}

        async def get(session, id):
            # finish out of order
            await asyncio.sleep(0.01 if id == first.id else 0)
            return stored.get(id)

        async def update(session, *, db_obj, obj_in):
            db_obj.status = obj_in["status"]
            return db_obj

        repository.get.side_effect = get
        repository.update.side_effect = update

        updates = [
            StatusUpdateItem(id=str(first.id), status="DONE"),
            StatusUpdateItem(id=str(uuid4()), status="DONE"),
            StatusUpdateItem(id=str(second.id), status="REVIEW"),
        ]

        results = await task_service.bulk_update_status(updates)

        assert results[0].id == first.id
        assert results[0].status == "DONE"
        assert results[1] is None
        assert results[2].id == second.id
        assert results[2].status == "REVIEW"
        assert len(sessions_opened) == 3

    @pytest.mark.asyncio
    async def test_failed_write_does_not_affect_others(self, task_service, repository):
        healthy, broken = _task(), _task()
        async def get(session, id):
            return healthy if id == healthy.id else broken

        repository.get.side_effect = get

        async def update(session, *, db_obj, obj_in):
            if db_obj is broken:
                raise RuntimeError("database is locked")
            db_obj.status = obj_in["status"]
            return db_obj

        repository.update.side_effect = update

        results = await task_service.bulk_update_status([
            StatusUpdateItem(id=str(broken.id), status="DONE"),
            StatusUpdateItem(id=str(healthy.id), status="DONE"),
        ])

        assert results[0] is None
        assert results[1].status == "DONE"

    @pytest.mark.asyncio
    async def test_unparsable_id_is_treated_as_missing(self, task_service, repository, sessions_opened):
        results = await task_service.bulk_update_status([StatusUpdateItem(id="abc", status="DONE")])

        assert results == [None]
        assert sessions_opened == []
        repository.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_updates_rejected(self, task_service):
        with pytest.raises(BadRequestError, match="must not be empty"):
            await task_service.bulk_update_status([])


# ==================== Assignment ====================


class TestAssignment:
    """Assignee existence is checked on write"""

    @pytest.mark.asyncio
    async def test_create_with_unknown_assignee(self, task_service, repository, mock_db):
        with patch("taskhub.services.task.user_repository.exists", new=AsyncMock(return_value=False)):
            with pytest.raises(BadRequestError, match="Assigned user not found"):
                await task_service.create_task(
                    mock_db,
                    TaskCreateRequest(title="Task", description="Details", assigned_to=uuid4()),
                    created_by=uuid4(),
                )

        repository.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_create_sets_creator(self, task_service, repository, mock_db):
        creator = uuid4()
        repository.create.return_value = _task(created_by_id=creator)

        await task_service.create_task(mock_db, TaskCreateRequest(title="Task", description="Details"), created_by=creator)

        values = repository.create.call_args.kwargs["obj_in"]
        assert values["created_by_id"] == creator
        assert values["assigned_to_id"] is None
        assert values["status"] == "TODO"
        assert values["priority"] == "MEDIUM"

    @pytest.mark.asyncio
    async def test_update_only_touches_sent_fields(self, task_service, repository, mock_db):
        task = _task(assigned_to_id=uuid4())
        repository.get.return_value = task
        repository.update.return_value = task

        await task_service.update_task(mock_db, task.id, TaskUpdateRequest(assigned_to=None, title=None))

        assert repository.update.call_args.kwargs["obj_in"] == {"assigned_to_id": None}

    @pytest.mark.asyncio
    async def test_update_missing_task(self, task_service, repository, mock_db):
        repository.get.return_value = None

        with pytest.raises(NotFoundError, match="Task not found"):
            await task_service.update_task(mock_db, uuid4(), TaskUpdateRequest(status="DONE"))

"""
Shared columns for TaskHub tables: a UUID key plus created/updated stamps.
"""

import uuid

from sqlalchemy import JSON, Column, DateTime, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from taskhub.core.database import Base

# Permission codes, tags and subtasks; JSONB on PostgreSQL, JSON on SQLite
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _timestamp(**kwargs) -> Column:
    return Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True, **kwargs)


class UUIDMixin:
    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, nullable=False)


class TimestampMixin:
    """Listings sort on created_at, so both stamps are indexed"""
    created_at = _timestamp()
    updated_at = _timestamp(onupdate=func.now())


class BaseModel(Base, UUIDMixin, TimestampMixin):
    __abstract__ = True

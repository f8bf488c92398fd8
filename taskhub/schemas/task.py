"""
Task Schemas
Board tasks, subtasks and bulk status moves
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID, uuid4

from pydantic import AliasChoices, Field, field_validator

from taskhub.models.task import TITLE_MAX_LENGTH, TaskPriority, TaskStatus
from taskhub.models.user import UserStatus
from taskhub.schemas.base import BaseResponseSchema, BaseSchema


def _validate_title(value: str) -> str:
    if not value:
        raise ValueError("Title is required")
    if len(value) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")
    return value


class SubTask(BaseSchema):
    """Checklist item embedded in a task"""
    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str = Field(..., min_length=1)
    completed: bool = False


class TaskAssignee(BaseSchema):
    """Reduced user view embedded in tasks"""
    id: UUID
    name: str
    email: str
    picture: str = ""
    status: UserStatus


class TaskResponse(BaseResponseSchema):
    """Task with its assignee populated"""
    title: str
    description: str = ""
    status: TaskStatus
    priority: TaskPriority
    assigned_to: Optional[TaskAssignee] = Field(
        default=None,
        validation_alias=AliasChoices("assignee", "assigned_to"),
    )
    assigned_to_id: Optional[UUID] = None
    created_by: UUID = Field(..., validation_alias=AliasChoices("created_by_id", "created_by"))
    due_date: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)
    subtasks: List[SubTask] = Field(default_factory=list)


class TaskCreateRequest(BaseSchema):
    """Task creation request"""
    title: Optional[str] = Field(default=None, validate_default=True)
    description: Optional[str] = Field(default=None, validate_default=True)
    status: TaskStatus = Field(TaskStatus.TODO)
    priority: TaskPriority = Field(TaskPriority.MEDIUM)
    assigned_to: Optional[UUID] = Field(default=None, description="Assignee user id")
    due_date: Optional[datetime] = None
    tags: List[str] = Field(default_factory=list)
    subtasks: List[SubTask] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        return _validate_title(v)

    @field_validator("description")
    @classmethod
    def require_description(cls, v):
        if not v:
            raise ValueError("Description is required")
        return v

    @field_validator("assigned_to", "due_date", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        # board clients send "" for unassigned and no due date
        return v or None


class TaskUpdateRequest(BaseSchema):
    """Partial task update; unset fields are left untouched"""
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    # explicit null unassigns
    assigned_to: Optional[UUID] = None
    due_date: Optional[datetime] = None
    tags: Optional[List[str]] = None
    subtasks: Optional[List[SubTask]] = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        if v is None:
            return v
        return _validate_title(v)

    @field_validator("assigned_to", "due_date", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return v or None


class TaskFilters(BaseSchema):
    search: Optional[str] = None
    assigned_to: Optional[UUID] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None


class StatusUpdateItem(BaseSchema):
    # Kept as text: an unparsable id behaves like a missing task
    id: str
    status: TaskStatus


class BulkStatusUpdateRequest(BaseSchema):
    """Drag-and-drop board moves"""
    updates: Optional[List[StatusUpdateItem]] = Field(default=None, validate_default=True)

    @field_validator("updates")
    @classmethod
    def require_updates(cls, v):
        if not v:
            raise ValueError("Updates array is required and must not be empty")
        return v


class TaskListResponse(BaseSchema):
    success: bool = True
    count: int
    data: List[TaskResponse]

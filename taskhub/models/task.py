"""
Task Model
Board tasks with assignment, status workflow, tags and subtasks
"""

from sqlalchemy import Column, String, Text, DateTime, Index, Uuid
from sqlalchemy.orm import relationship
from taskhub.models.base import BaseModel, JSONType
import enum


class TaskStatus(str, enum.Enum):
    """Board column a task sits in"""
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    REVIEW = "REVIEW"
    DONE = "DONE"


class TaskPriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


TITLE_MAX_LENGTH = 200


class Task(BaseModel):
    """Task model"""
    __tablename__ = "tasks"

    title = Column(String(TITLE_MAX_LENGTH), nullable=False)
    description = Column(Text, nullable=False, default="")

    status = Column(String(20), default=TaskStatus.TODO.value, nullable=False, index=True)
    priority = Column(String(10), default=TaskPriority.MEDIUM.value, nullable=False, index=True)

    # Existence is checked when written; there is no foreign key, so a deleted
    # user leaves a dangling assignee id behind.
    assigned_to_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    assignee = relationship(
        "User",
        primaryjoin="foreign(Task.assigned_to_id) == User.id",
        lazy="selectin",
        viewonly=True,
    )
    created_by_id = Column(Uuid(as_uuid=True), nullable=False, index=True)

    due_date = Column(DateTime(timezone=True), nullable=True)

    # Ordered lists
    tags = Column(JSONType, default=list, nullable=False)
    subtasks = Column(JSONType, default=list, nullable=False)  # [{id, title, completed}]

    __table_args__ = (
        Index('ix_task_status_priority', 'status', 'priority'),
    )

    def __repr__(self):
        return f"<Task(title='{self.title}', status='{self.status}')>"

"""
SQLAlchemy Models Package
TaskHub Database Models
"""

from taskhub.models.role import Role
from taskhub.models.task import Task, TaskPriority, TaskStatus
from taskhub.models.user import User, UserStatus

__all__ = [
    "Role",
    "Task",
    "TaskPriority",
    "TaskStatus",
    "User",
    "UserStatus",
]

"""
Role Model
Named sets of permission codes
"""

from sqlalchemy import Column, String, Text, Index, func
from taskhub.models.base import BaseModel, JSONType


class Role(BaseModel):
    """A role groups numeric permission codes under a name"""
    __tablename__ = "roles"

    # Stored with the caller's casing; uniqueness is checked on lower(name)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False, default="")
    permissions = Column(JSONType, nullable=False, default=list)

    __table_args__ = (
        Index("ix_role_name_lower", func.lower(name)),
    )

    def __repr__(self):
        return f"<Role(name='{self.name}', permissions={self.permissions})>"

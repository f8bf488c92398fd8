"""
User Model
Accounts, role assignment and the permission snapshot
"""

from sqlalchemy import Column, String, Boolean, DateTime, Index, Uuid
from sqlalchemy.orm import relationship
from taskhub.models.base import BaseModel, JSONType
import enum


class UserStatus(str, enum.Enum):
    """Account availability; not_available accounts are locked out"""
    AVAILABLE = "available"
    NOT_AVAILABLE = "not_available"


class User(BaseModel):
    """User model for authentication and role assignment"""
    __tablename__ = "users"

    # Basic user information
    name = Column(String(100), nullable=False)
    email = Column(String(254), nullable=False, unique=True, index=True)
    # Null for accounts that authenticate through an external identity provider
    password_hash = Column(String(128), nullable=True)
    picture = Column(String(500), nullable=False, default="")

    # External identity
    external_auth_id = Column(String(255), nullable=True, unique=True)
    is_external_auth = Column(Boolean, default=False, nullable=False)
    email_verified = Column(Boolean, default=False, nullable=False)

    # Account status
    status = Column(
        String(20),
        default=UserStatus.AVAILABLE.value,
        nullable=False,
        index=True,
    )
    is_admin_created = Column(Boolean, default=False, nullable=False)
    must_change_password = Column(Boolean, default=False, nullable=False)

    # Authorization. No foreign key: deleting a role leaves role_id and the
    # permission snapshot in place.
    role_id = Column(Uuid(as_uuid=True), nullable=True, index=True)
    role = relationship(
        "Role",
        primaryjoin="foreign(User.role_id) == Role.id",
        lazy="selectin",
        viewonly=True,
    )
    # Copy of role.permissions taken when the role was assigned
    permissions = Column(JSONType, default=list, nullable=False)
    permissions_synced_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index('ix_user_status_name', 'status', 'name'),
    )

    def __repr__(self):
        return f"<User(email='{self.email}', name='{self.name}')>"

    @property
    def is_active(self) -> bool:
        return self.status != UserStatus.NOT_AVAILABLE.value

"""
User management schemas for admin CRUD operations.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Optional
from uuid import UUID

from pydantic import AliasChoices, Field, StringConstraints, field_validator

from taskhub.models.user import UserStatus
from taskhub.schemas.base import BaseResponseSchema, BaseSchema, validate_email

PASSWORD_MIN_LENGTH = 6

# Passwords are hashed exactly as typed
RawPassword = Annotated[str, StringConstraints(strip_whitespace=False)]


def validate_password_length(value: str) -> str:
    if len(value) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
    return value


class RoleBrief(BaseSchema):
    id: UUID
    name: str
    permissions: list[int] = Field(default_factory=list)


class RoleRef(BaseSchema):
    id: UUID
    name: str


class UserResponse(BaseResponseSchema):
    """User as returned by the API; credentials never leave the service"""
    name: str
    email: str
    picture: str = ""
    status: UserStatus
    is_external_auth: bool = False
    email_verified: bool = False
    is_admin_created: bool = False
    must_change_password: bool = False
    role_id: Optional[UUID] = None
    role: Optional[RoleBrief] = None
    permissions: list[int] = Field(default_factory=list)
    permissions_synced_at: Optional[datetime] = None


class AssignableUserResponse(BaseSchema):
    id: UUID
    name: str
    email: str
    picture: str = ""
    status: UserStatus
    role: Optional[RoleRef] = None


class UserCreateRequest(BaseSchema):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., description="Unique email")
    status: UserStatus = Field(UserStatus.AVAILABLE)
    picture: Optional[str] = Field(default=None, max_length=500)
    role_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("roleId", "role_id", "role"),
    )
    password: Optional[RawPassword] = Field(default=None, max_length=128)

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, value: str) -> str:
        return validate_email(value)

    @field_validator("role_id", "picture")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return validate_password_length(value)


class UserUpdateRequest(BaseSchema):
    """Partial update; only fields present in the body are applied"""
    name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = None
    status: Optional[UserStatus] = None
    picture: Optional[str] = Field(default=None, max_length=500)
    # null or "" clears the role and the copied permissions
    role_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("roleId", "role_id", "role"),
    )

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            raise ValueError("Name cannot be empty")
        return value

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        return validate_email(value)

    @field_validator("role_id")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class UserFilters(BaseSchema):
    search: Optional[str] = Field(default=None)
    status: Optional[UserStatus] = Field(default=None)
    exclude_self: bool = Field(default=True)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)


class AssignableUserFilters(BaseSchema):
    search: Optional[str] = Field(default=None)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)

"""
Role schemas for role management.
"""

from __future__ import annotations

from typing import Optional

from pydantic import Field, StrictInt, field_validator, model_validator

from taskhub.core.permissions import permission_registry
from taskhub.schemas.base import BaseResponseSchema, BaseSchema, SortOrder

ROLE_SORT_FIELDS = ("name", "description", "created_at", "updated_at")


def _normalize_codes(values: list[int]) -> list[int]:
    if not permission_registry.is_valid_set(values):
        raise ValueError("Invalid permission codes")
    # set semantics, first-seen order
    return list(dict.fromkeys(values))


class RoleResponse(BaseResponseSchema):
    name: str
    description: str = ""
    permissions: list[int] = Field(default_factory=list)


class RoleCreateRequest(BaseSchema):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(default="")
    permissions: list[StrictInt]

    @field_validator("description")
    @classmethod
    def default_description(cls, value: Optional[str]) -> str:
        return value or ""

    @field_validator("permissions")
    @classmethod
    def validate_permissions(cls, values: list[int]) -> list[int]:
        return _normalize_codes(values)


class RoleUpdateRequest(BaseSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = None
    permissions: Optional[list[StrictInt]] = None

    @field_validator("permissions")
    @classmethod
    def validate_permissions(cls, values: Optional[list[int]]) -> Optional[list[int]]:
        if values is None:
            return values
        return _normalize_codes(values)

    @model_validator(mode="after")
    def require_one_field(self) -> "RoleUpdateRequest":
        if self.name is None and self.description is None and self.permissions is None:
            raise ValueError("At least one field (name, description, or permissions) is required")
        return self


class RoleFilters(BaseSchema):
    search: Optional[str] = Field(default=None)
    sort_by: str = Field(default="created_at")
    sort_order: SortOrder = Field(default=SortOrder.DESC)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)

    @field_validator("sort_by")
    @classmethod
    def validate_sort_by(cls, value: str) -> str:
        # accept camelCase from query strings
        normalized = {"createdAt": "created_at", "updatedAt": "updated_at"}.get(value, value)
        if normalized not in ROLE_SORT_FIELDS:
            raise ValueError(f"Invalid sort field {value}")
        return normalized

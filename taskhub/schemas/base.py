"""
Base Pydantic Schemas
Common schemas and base classes for request/response models
"""

import math
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from taskhub.core.exceptions import BadRequestError

T = TypeVar("T")

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class BaseSchema(BaseModel):
    """Base schema with common configuration"""
    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        str_strip_whitespace=True,
        use_enum_values=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class BaseResponseSchema(BaseSchema):
    """Base schema for API responses"""
    id: UUID = Field(..., description="Unique identifier")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class SortOrder(str, Enum):
    """Sort order enumeration"""
    ASC = "asc"
    DESC = "desc"


class PaginationMeta(BaseSchema):
    """Page-number pagination metadata"""
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool

    @classmethod
    def create(cls, *, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_items=total,
            items_per_page=limit,
            has_next_page=page < total_pages,
            has_prev_page=page > 1,
        )


class DataResponse(BaseSchema, Generic[T]):
    """Success envelope around a single payload"""
    success: bool = True
    data: T
    message: Optional[str] = None


class PaginatedResponse(BaseSchema, Generic[T]):
    """Success envelope around one page of items"""
    success: bool = True
    data: List[T]
    pagination: PaginationMeta


class MessageResponse(BaseSchema):
    """Success envelope without a payload"""
    success: bool = True
    message: str


class ErrorResponse(BaseSchema):
    """Error envelope"""
    success: bool = False
    message: str
    code: Optional[str] = None
    errors: Optional[List[Any]] = None
    error: Optional[str] = None


class HealthStatus(str, Enum):
    """Health status enumeration"""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    DEGRADED = "degraded"


class HealthCheck(BaseModel):
    """Health check response"""
    status: HealthStatus = Field(..., description="Overall health status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Service version")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), description="Check timestamp")
    checks: Dict[str, Any] = Field(default_factory=dict, description="Individual health checks")


# Validation helpers
def page_to_offset(page: int, limit: int) -> int:
    return (page - 1) * limit


def parse_uuid(value: Any, label: str = "ID") -> UUID:
    """Parse a path/body identifier, raising BadRequestError when malformed"""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise BadRequestError(f"Invalid {label} format")


def validate_email(v: Any) -> str:
    """Validate email format and normalize to lower case"""
    if not isinstance(v, str):
        raise ValueError("Email must be a string")

    v = v.strip().lower()
    if not EMAIL_PATTERN.match(v):
        raise ValueError("Invalid email format")

    return v

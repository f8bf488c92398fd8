"""
Authentication Schemas
Pydantic models for authentication requests and responses
"""

from pydantic import Field, field_validator
from taskhub.schemas.base import BaseSchema, validate_email
from taskhub.schemas.user import RawPassword, UserResponse, validate_password_length


class LoginRequest(BaseSchema):
    """Login request schema"""
    email: str = Field(..., description="User email address")
    password: RawPassword = Field(..., min_length=1, description="User password")

    @field_validator('email')
    @classmethod
    def validate_email_format(cls, v):
        return validate_email(v)

    @field_validator('password')
    @classmethod
    def validate_password_not_empty(cls, v):
        if not v.strip():
            raise ValueError("Password is required")
        return v


class ChangePasswordRequest(BaseSchema):
    """Change password request schema"""
    current_password: RawPassword = Field(..., min_length=1, description="Current password")
    new_password: RawPassword = Field(..., max_length=128, description="New password")

    @field_validator('new_password')
    @classmethod
    def validate_new_password(cls, v):
        return validate_password_length(v)


class LoginResponse(BaseSchema):
    """Issued access token and the signed-in user"""
    token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: UserResponse

"""
Authentication Endpoints
Login, profile and password change
"""

from typing import Any
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from taskhub.core.database import get_db
from taskhub.core.deps import Principal, get_current_principal
from taskhub.core.security import ACCESS_TOKEN_EXPIRE_MINUTES, create_access_token
from taskhub.schemas.auth import ChangePasswordRequest, LoginRequest, LoginResponse
from taskhub.schemas.base import DataResponse, MessageResponse
from taskhub.schemas.user import UserResponse
from taskhub.services.user import user_service

logger = structlog.get_logger()
router = APIRouter()


@router.post("/login", response_model=DataResponse[LoginResponse])
async def login(
    login_data: LoginRequest,
    db: AsyncSession = Depends(get_db)
) -> Any:
    """
    User login endpoint

    Args:
        login_data: Login credentials
        db: Database session

    Returns:
        Access token and the sanitized user

    Raises:
        UnauthorizedError: If the credentials do not match
        ForbiddenError: If the account is not available
    """
    user = await user_service.authenticate(db, login_data.email, login_data.password)

    token = create_access_token(subject=user.id, additional_claims={"email": user.email})

    return DataResponse(
        data=LoginResponse(
            token=token,
            expires_in=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
            user=UserResponse.model_validate(user),
        ),
        message="Login successful",
    )


@router.get("/profile", response_model=DataResponse[UserResponse])
async def get_profile(
    current_user: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """Current user profile."""
    return DataResponse(data=await user_service.get_user(db, current_user.id))


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    password_data: ChangePasswordRequest,
    current_user: Principal = Depends(get_current_principal),
    db: AsyncSession = Depends(get_db)
) -> Any:
    """Change the caller's password and clear the forced-change flag."""
    await user_service.change_password(
        db,
        current_user.id,
        password_data.current_password,
        password_data.new_password,
    )
    return MessageResponse(message="Password changed successfully")

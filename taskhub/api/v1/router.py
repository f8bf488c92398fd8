"""
API Router
Main router for all /api endpoints
"""

from fastapi import APIRouter
from taskhub.api.v1.endpoints import auth, roles, tasks, users

api_router = APIRouter()

# Authentication endpoints
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["authentication"]
)

# Role management endpoints
api_router.include_router(
    roles.router,
    prefix="/role",
    tags=["roles"]
)

# User management endpoints
api_router.include_router(
    users.router,
    prefix="/user",
    tags=["users"]
)

# Task board endpoints
api_router.include_router(
    tasks.router,
    prefix="/tasks",
    tags=["tasks"]
)

"""
API error taxonomy.

Services and dependencies raise these; handlers in ``taskhub.main`` turn them
into the ``{success: false, message, code?}`` envelope.
"""

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, status


class ConfigError(Exception):
    """Raised at startup when configuration cannot be used."""


class APIError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "Internal server error"

    def __init__(
        self,
        detail: Optional[str] = None,
        *,
        code: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )
        self.code = code


class BadRequestError(APIError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request"


class UnauthorizedError(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authorized"

    def __init__(self, detail: Optional[str] = None, *, code: Optional[str] = None) -> None:
        super().__init__(detail, code=code, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(APIError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class NotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class ConflictError(APIError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict"


ACCOUNT_INACTIVE = "ACCOUNT_INACTIVE"
INACTIVE_ACCOUNT_DETAIL = "Access Denied: Your account is currently suspended or inactive."

"""
FastAPI Main Application
TaskHub API Service
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog
from contextlib import asynccontextmanager

from taskhub.core.simple_config import settings
from taskhub.core.database import AsyncSessionLocal, close_database, init_database
from taskhub.core.logging import setup_logging
from taskhub.api.v1.router import api_router
from taskhub.api.v1.endpoints import health
from taskhub.middleware.security import SecurityHeadersMiddleware
from taskhub.middleware.logging import LoggingMiddleware
from taskhub.schemas.base import ErrorResponse
from taskhub.services.bootstrap_admin import ensure_bootstrap_admin_exists

# Setup structured logging
setup_logging()
logger = structlog.get_logger()

VALUE_ERROR_PREFIX = "Value error, "


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    try:
        # Startup
        logger.info("Starting TaskHub API Service", version="1.0.0", environment=settings.ENVIRONMENT)

        await init_database()

        # Ensure bootstrap role and admin exist (idempotent)
        async with AsyncSessionLocal() as session:
            await ensure_bootstrap_admin_exists(session)

        yield

        # Shutdown
        logger.info("Shutting down TaskHub API Service")
        await close_database()
    except Exception as e:
        logger.error("Startup failed", error=str(e), exc_info=True)
        raise


# Create FastAPI application
app = FastAPI(
    title="TaskHub API",
    description="Role-based task management API",
    version="1.0.0",
    docs_url="/docs" if settings.ENVIRONMENT == "development" else None,
    redoc_url="/redoc" if settings.ENVIRONMENT == "development" else None,
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,  # Required for JWT authentication
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=[
        "Authorization",
        "Content-Type",
        "Accept",
        "X-Requested-With",
        "X-Request-ID",
        "Origin",
    ],
    max_age=600,  # Cache preflight requests for 10 minutes
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(LoggingMiddleware)

# Include API router
app.include_router(api_router, prefix="/api")
app.include_router(health.router, prefix="/health", tags=["health"])


def _error_body(message: str, **extra) -> dict:
    return ErrorResponse(message=message, **extra).model_dump(exclude_none=True)


def _validation_message(error: dict) -> str:
    if error.get("type") == "missing":
        return f"{error['loc'][-1]} is required"
    message = error.get("msg", "Invalid request")
    if message.startswith(VALUE_ERROR_PREFIX):
        message = message[len(VALUE_ERROR_PREFIX):]
    return message


def _validation_errors(errors: list) -> list:
    return [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": _validation_message(error),
        }
        for error in errors
    ]


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render APIError and framework HTTP errors in the error envelope"""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(str(exc.detail), code=getattr(exc, "code", None)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = _validation_errors(exc.errors())
    logger.info("Request validation failed", path=request.url.path, errors=errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(errors[0]["message"] if errors else "Invalid request", errors=errors),
    )


@app.exception_handler(ValidationError)
async def schema_validation_handler(request: Request, exc: ValidationError):
    """Filters built inside endpoints fail with a plain pydantic ValidationError"""
    errors = _validation_errors(exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(errors[0]["message"] if errors else "Invalid request", errors=errors),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(
        "Unhandled exception",
        path=request.url.path,
        method=request.method,
        error=str(exc),
        exc_info=True
    )

    return JSONResponse(
        status_code=500,
        content=_error_body(
            "Internal server error",
            error=str(exc) if settings.ENVIRONMENT == "development" else None,
        ),
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "taskhub.main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
        log_level=settings.LOG_LEVEL.lower()
    )

"""
Health Check Endpoints
System health and monitoring endpoints
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
import structlog
import time
import psutil
from typing import Dict, Any

from taskhub.core.database import check_database_health
from taskhub.schemas.base import HealthCheck, HealthStatus

logger = structlog.get_logger()
router = APIRouter()

SERVICE_NAME = "taskhub-api"
SERVICE_VERSION = "1.0.0"


@router.get("", response_model=HealthCheck)
async def health_check() -> Any:
    """
    Health check for load balancers and monitoring

    Returns:
        Health status with detailed checks; 503 when the database is down
    """
    checks = {}
    overall_status = HealthStatus.HEALTHY

    try:
        db_healthy = await check_database_health()
        checks["database"] = {"status": "healthy" if db_healthy else "unhealthy"}

        if not db_healthy:
            overall_status = HealthStatus.UNHEALTHY

        # Memory usage check
        memory = psutil.virtual_memory()
        checks["memory"] = {
            "status": "healthy" if memory.percent < 90 else "degraded",
            "usage_percent": memory.percent,
            "available_gb": round(memory.available / (1024**3), 2)
        }

        if memory.percent >= 90 and overall_status == HealthStatus.HEALTHY:
            overall_status = HealthStatus.DEGRADED

    except Exception as e:
        logger.error("Health check error", error=str(e))
        overall_status = HealthStatus.UNHEALTHY
        checks["error"] = {"message": str(e)}

    result = HealthCheck(
        status=overall_status,
        service=SERVICE_NAME,
        version=SERVICE_VERSION,
        checks=checks
    )
    if overall_status == HealthStatus.UNHEALTHY:
        return JSONResponse(status_code=503, content=result.model_dump(mode="json"))
    return result


@router.get("/live")
async def liveness_check() -> Dict[str, Any]:
    """
    Liveness probe endpoint

    Returns:
        Simple alive status
    """
    return {"status": "alive", "timestamp": time.time()}

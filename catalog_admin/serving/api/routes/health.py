"""
Health Check Endpoints

Liveness, readiness and a detailed report of the database and the
configured discount backend.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Response
from pydantic import BaseModel

from catalog_admin.config import get_settings
from catalog_admin.database.connection import check_database_health

settings = get_settings()
router = APIRouter()


class HealthResponse(BaseModel):
    """Detailed health report"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


def catalog_check() -> Dict[str, Any]:
    """Discount and reference-date configuration in effect for view builds"""
    reference = settings.catalog.reference_date
    return {
        "discount_backend": settings.catalog.discount_backend,
        "discount_basis": settings.catalog.discount_basis,
        "reference_date": reference.isoformat() if reference else "today",
    }


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Report database reachability alongside the catalog configuration."""
    database = await check_database_health()
    status = "healthy" if database.get("status") == "healthy" else "degraded"

    return HealthResponse(
        status=status,
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.now(timezone.utc),
        checks={"database": database, "catalog": catalog_check()},
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(response: Response) -> Dict[str, str]:
    """503 until catalog reads can reach the database."""
    database = await check_database_health()
    if database.get("status") == "healthy":
        return {"status": "ready"}

    response.status_code = 503
    return {"status": "not_ready", "reason": "database_unavailable"}

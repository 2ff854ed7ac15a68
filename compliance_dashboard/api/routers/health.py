"""Health check endpoints."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from compliance_dashboard import __version__
from compliance_dashboard.config import Settings, get_settings
from compliance_dashboard.database import get_db
from compliance_dashboard.logging_config import SERVICE_NAME, get_logger
from compliance_dashboard.models.governance_rule import GovernanceRule

logger = get_logger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
    version: str
    environment: str
    timestamp: str


class ReadinessResponse(BaseModel):
    """Readiness check response.

    ``status`` depends on the database only; an unconfigured language model
    is reported but generation endpoints simply answer 502 until it is set.
    """

    status: str
    timestamp: str
    checks: dict[str, str]
    llm_model: Optional[str] = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


async def _check_database(db: AsyncSession) -> str:
    try:
        await db.execute(text("SELECT 1"))
        # Fails when the tables were never created
        await db.execute(select(func.count()).select_from(GovernanceRule))
    except Exception as e:
        logger.warning("Readiness database check failed", error=str(e))
        return f"error: {e}"
    return "ok"


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_settings)) -> HealthResponse:
    """Is the service running."""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        version=__version__,
        environment=settings.environment,
        timestamp=_now(),
    )


@router.get("/health/ready", response_model=ReadinessResponse)
async def readiness_check(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ReadinessResponse:
    """Database reachability and schema presence, plus language model configuration."""
    checks = {
        "database": await _check_database(db),
        "llm": "configured" if settings.llm_api_key else "not_configured",
    }
    return ReadinessResponse(
        status="ready" if checks["database"] == "ok" else "not_ready",
        timestamp=_now(),
        checks=checks,
        llm_model=settings.llm_model if settings.llm_api_key else None,
    )


@router.get("/health/live")
async def liveness_check() -> dict[str, str]:
    return {"status": "alive", "timestamp": _now()}

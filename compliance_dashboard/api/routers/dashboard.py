"""Dashboard home page endpoint."""

from fastapi import APIRouter

from compliance_dashboard.api.schemas.dashboard import DashboardSummaryResponse
from compliance_dashboard.database import DbSession
from compliance_dashboard.services.dashboard import DashboardService

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummaryResponse)
async def get_dashboard_summary(db: DbSession) -> DashboardSummaryResponse:
    """Rule, artifact, suite and run counters plus the five latest runs."""
    summary = await DashboardService(db).get_summary()
    return DashboardSummaryResponse.from_service(summary)

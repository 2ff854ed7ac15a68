"""Simulated pipeline run endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, status

from compliance_dashboard.api.auth import CurrentActor
from compliance_dashboard.api.exceptions import NotFoundError
from compliance_dashboard.api.schemas.common import Pagination
from compliance_dashboard.api.schemas.pipeline_run import (
    PipelineRunDetail,
    PipelineRunListResponse,
    PipelineRunRequest,
    PipelineStatusUpdate,
)
from compliance_dashboard.database import DbSession
from compliance_dashboard.repositories import PipelineRunRepository
from compliance_dashboard.services.pipeline_gate import PipelineGateService

router = APIRouter(prefix="/pipeline-runs", tags=["pipeline-runs"])


@router.post("/run", response_model=PipelineRunDetail, status_code=status.HTTP_201_CREATED)
async def run_pipeline(
    db: DbSession,
    actor: CurrentActor,
    body: PipelineRunRequest,
) -> PipelineRunDetail:
    """Run the simulated Build, Unit Tests, Compliance Gate and Deploy stages."""
    run = await PipelineGateService(db).run(
        code_artifact_id=body.code_artifact_id,
        test_suite_id=body.test_suite_id,
        actor=actor,
    )
    await db.commit()
    return PipelineRunDetail.from_model(run)


@router.get("", response_model=PipelineRunListResponse)
async def list_pipeline_runs(
    db: DbSession,
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
) -> PipelineRunListResponse:
    """List pipeline runs, most recently started first."""
    repo = PipelineRunRepository(db)
    runs = await repo.get_all(offset=offset, limit=limit)
    total = await repo.count()
    return PipelineRunListResponse(
        data=[PipelineRunDetail.from_model(r) for r in runs],
        pagination=Pagination.build(offset, limit, total),
    )


@router.get("/{run_id}", response_model=PipelineRunDetail)
async def get_pipeline_run(db: DbSession, run_id: UUID) -> PipelineRunDetail:
    run = await PipelineRunRepository(db).get_by_id(run_id)
    if not run:
        raise NotFoundError("PipelineRun", str(run_id))
    return PipelineRunDetail.from_model(run)


@router.patch("/{run_id}/status", response_model=PipelineRunDetail)
async def update_pipeline_run_status(
    db: DbSession,
    actor: CurrentActor,
    run_id: UUID,
    body: PipelineStatusUpdate,
) -> PipelineRunDetail:
    """Change the status of a run. Stages and test results are left as they are."""
    run = await PipelineGateService(db).update_status(run_id, body.status, actor)
    await db.commit()
    return PipelineRunDetail.from_model(run)

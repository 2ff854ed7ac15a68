"""Evaluation metric endpoints."""

from uuid import UUID

from fastapi import APIRouter, status

from compliance_dashboard.api.auth import CurrentActor
from compliance_dashboard.api.schemas.evaluation_metric import (
    EvaluationMetricCreate,
    EvaluationMetricDetail,
    EvaluationMetricListResponse,
    EvaluationSummaryResponse,
)
from compliance_dashboard.database import DbSession
from compliance_dashboard.repositories import EvaluationMetricRepository
from compliance_dashboard.services.evaluation import EvaluationService

router = APIRouter(prefix="/evaluation-metrics", tags=["evaluation-metrics"])


@router.post("", response_model=EvaluationMetricDetail, status_code=status.HTTP_201_CREATED)
async def record_evaluation_metric(
    db: DbSession,
    actor: CurrentActor,
    metric: EvaluationMetricCreate,
) -> EvaluationMetricDetail:
    """Record a score between 0 and 100."""
    created = await EvaluationService(db).record(
        governance_rule_id=metric.governance_rule_id,
        metric_type=metric.metric_type,
        score=metric.score,
        evaluated_by=metric.evaluated_by,
        actor=actor,
        code_artifact_id=metric.code_artifact_id,
        test_suite_id=metric.test_suite_id,
        details=metric.details,
    )
    await db.commit()
    return EvaluationMetricDetail.from_model(created)


@router.get("", response_model=EvaluationMetricListResponse)
async def list_evaluation_metrics(db: DbSession) -> EvaluationMetricListResponse:
    metrics = await EvaluationMetricRepository(db).list_all()
    return EvaluationMetricListResponse(
        data=[EvaluationMetricDetail.from_model(m) for m in metrics],
        total=len(metrics),
    )


@router.get("/summary", response_model=EvaluationSummaryResponse)
async def get_evaluation_summary(db: DbSession) -> EvaluationSummaryResponse:
    """Total, rounded average, excellent count (score >= 90) and per-type averages."""
    summary = await EvaluationService(db).get_summary()
    return EvaluationSummaryResponse.from_service(summary)


@router.get("/by-rule/{governance_rule_id}", response_model=EvaluationMetricListResponse)
async def list_evaluation_metrics_for_rule(
    db: DbSession,
    governance_rule_id: UUID,
) -> EvaluationMetricListResponse:
    metrics = await EvaluationMetricRepository(db).get_by_rule(governance_rule_id)
    return EvaluationMetricListResponse(
        data=[EvaluationMetricDetail.from_model(m) for m in metrics],
        total=len(metrics),
    )

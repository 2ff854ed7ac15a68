"""Pydantic schemas for evaluation metrics."""

from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from compliance_dashboard.api.schemas.common import iso
from compliance_dashboard.models.evaluation_metric import (
    MAX_SCORE,
    MIN_SCORE,
    EvaluationMetric,
    MetricType,
)
from compliance_dashboard.services.evaluation import EvaluationSummary


class EvaluationMetricCreate(BaseModel):
    """Schema for recording a score."""

    governance_rule_id: UUID
    code_artifact_id: Optional[UUID] = None
    test_suite_id: Optional[UUID] = None
    metric_type: MetricType = Field(
        ...,
        description="prompt_effectiveness, rule_adherence, code_quality or test_coverage",
    )
    score: int = Field(..., ge=MIN_SCORE, le=MAX_SCORE, description="Integer score, 0 to 100")
    evaluated_by: str = Field(..., min_length=1, max_length=255, description="Evaluator name or tool")
    details: dict[str, Any] = Field(default_factory=dict)


class EvaluationMetricDetail(BaseModel):
    """Full view of an evaluation metric."""

    id: str
    governance_rule_id: str
    code_artifact_id: Optional[str] = None
    test_suite_id: Optional[str] = None
    metric_type: str
    score: int
    details: dict[str, Any]
    evaluated_by: str
    evaluated_at: str

    @classmethod
    def from_model(cls, metric: EvaluationMetric) -> "EvaluationMetricDetail":
        return cls(
            id=str(metric.id),
            governance_rule_id=str(metric.governance_rule_id),
            code_artifact_id=str(metric.code_artifact_id) if metric.code_artifact_id else None,
            test_suite_id=str(metric.test_suite_id) if metric.test_suite_id else None,
            metric_type=metric.metric_type,
            score=metric.score,
            details=dict(metric.details or {}),
            evaluated_by=metric.evaluated_by,
            evaluated_at=iso(metric.evaluated_at),
        )


class EvaluationMetricListResponse(BaseModel):
    data: list[EvaluationMetricDetail]
    total: int


class MetricTypeBreakdown(BaseModel):
    metric_type: str
    count: int
    average_score: int


class EvaluationSummaryResponse(BaseModel):
    """Aggregate of every recorded score."""

    total: int
    average_score: int
    excellent_count: int
    by_type: list[MetricTypeBreakdown]

    @classmethod
    def from_service(cls, summary: EvaluationSummary) -> "EvaluationSummaryResponse":
        return cls(
            total=summary.total,
            average_score=summary.average_score,
            excellent_count=summary.excellent_count,
            by_type=[
                MetricTypeBreakdown(
                    metric_type=item.metric_type,
                    count=item.count,
                    average_score=item.average_score,
                )
                for item in summary.by_type
            ],
        )

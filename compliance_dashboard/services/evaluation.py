"""Evaluation metrics: recording scores and summarising them."""

import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from compliance_dashboard.logging_config import get_logger
from compliance_dashboard.metrics import record_evaluation_score
from compliance_dashboard.models.audit_entry import AuditAction
from compliance_dashboard.models.evaluation_metric import (
    MAX_SCORE,
    MIN_SCORE,
    EvaluationMetric,
    MetricType,
)
from compliance_dashboard.repositories.evaluation_metric import EvaluationMetricRepository
from compliance_dashboard.services.audit import AuditRecorder

logger = get_logger(__name__)

EXCELLENT_SCORE = 90


@dataclass
class MetricTypeSummary:
    metric_type: str
    count: int
    average_score: int


@dataclass
class EvaluationSummary:
    """Aggregate view of recorded scores. Averages are rounded to integers."""

    total: int
    average_score: int
    excellent_count: int
    by_type: list[MetricTypeSummary]


class EvaluationService:
    """Records evaluation scores; metrics are never updated afterwards."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = EvaluationMetricRepository(session)
        self.audit = AuditRecorder(session)

    async def record(
        self,
        governance_rule_id: UUID,
        metric_type: MetricType | str,
        score: int,
        evaluated_by: str,
        actor: int,
        code_artifact_id: Optional[UUID] = None,
        test_suite_id: Optional[UUID] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> EvaluationMetric:
        """Store one score and record ``evaluation_recorded``.

        Raises:
            ValueError: If ``score`` is outside 0..100 or the type is unknown
        """
        if not MIN_SCORE <= score <= MAX_SCORE:
            raise ValueError(f"Score must be between {MIN_SCORE} and {MAX_SCORE}, got {score}")
        metric_type_value = MetricType(metric_type).value

        metric = await self.repo.create(
            EvaluationMetric(
                governance_rule_id=governance_rule_id,
                code_artifact_id=code_artifact_id,
                test_suite_id=test_suite_id,
                metric_type=metric_type_value,
                score=score,
                details=details or {},
                evaluated_by=evaluated_by,
            )
        )
        await self.audit.record(
            governance_rule_id=governance_rule_id,
            code_artifact_id=code_artifact_id,
            test_suite_id=test_suite_id,
            action=AuditAction.EVALUATION_RECORDED,
            actor=actor,
            details={"metricType": metric_type_value, "score": score, "evaluatedBy": evaluated_by},
        )

        record_evaluation_score(metric_type_value, score)
        logger.info(
            "Evaluation recorded",
            evaluation_metric_id=str(metric.id),
            metric_type=metric_type_value,
            score=score,
        )
        return metric

    async def get_summary(self) -> EvaluationSummary:
        metrics = await self.repo.list_all()
        return summarize_scores(metrics)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def summarize_scores(metrics: Sequence[EvaluationMetric]) -> EvaluationSummary:
    """Compute totals, rounded averages and per-type breakdown."""
    if not metrics:
        return EvaluationSummary(total=0, average_score=0, excellent_count=0, by_type=[])

    by_type: dict[str, list[int]] = {}
    for metric in metrics:
        by_type.setdefault(metric.metric_type, []).append(metric.score)

    return EvaluationSummary(
        total=len(metrics),
        average_score=round_half_up(sum(m.score for m in metrics) / len(metrics)),
        excellent_count=sum(1 for m in metrics if m.score >= EXCELLENT_SCORE),
        by_type=[
            MetricTypeSummary(
                metric_type=metric_type,
                count=len(scores),
                average_score=round_half_up(sum(scores) / len(scores)),
            )
            for metric_type, scores in sorted(by_type.items())
        ],
    )

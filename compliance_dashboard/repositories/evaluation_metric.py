"""Repository for evaluation metric data access."""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select

from compliance_dashboard.models.evaluation_metric import EvaluationMetric
from compliance_dashboard.repositories.base import AppendOnlyRepository


class EvaluationMetricRepository(AppendOnlyRepository[EvaluationMetric]):
    """Repository for evaluation metric operations."""

    model_class = EvaluationMetric
    order_column = "evaluated_at"

    async def get_by_rule(self, governance_rule_id: UUID) -> Sequence[EvaluationMetric]:
        """Get all metrics recorded for a rule, newest first."""
        stmt = (
            select(EvaluationMetric)
            .where(EvaluationMetric.governance_rule_id == governance_rule_id)
            .order_by(EvaluationMetric.evaluated_at.desc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def list_all(self) -> Sequence[EvaluationMetric]:
        """Get every metric, newest first."""
        stmt = select(EvaluationMetric).order_by(EvaluationMetric.evaluated_at.desc())
        result = await self.session.execute(stmt)
        return result.scalars().all()

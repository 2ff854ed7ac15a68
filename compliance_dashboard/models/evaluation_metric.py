"""Evaluation metric model."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import CheckConstraint, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from compliance_dashboard.models.base import (
    DashboardBase,
    JSONType,
    UUIDType,
    schema_args,
    utcnow,
)

MIN_SCORE = 0
MAX_SCORE = 100


class MetricType(str, Enum):
    """What an evaluation score measures."""

    PROMPT_EFFECTIVENESS = "prompt_effectiveness"
    RULE_ADHERENCE = "rule_adherence"
    CODE_QUALITY = "code_quality"
    TEST_COVERAGE = "test_coverage"


class EvaluationMetric(DashboardBase):
    """A single score recorded against a rule and optionally its outputs."""

    __tablename__ = "evaluation_metrics"
    __table_args__ = (
        CheckConstraint(
            f"score >= {MIN_SCORE} AND score <= {MAX_SCORE}", name="ck_evaluation_metrics_score_range"
        ),
        schema_args(),
    )

    governance_rule_id: Mapped[UUID] = mapped_column(UUIDType(), nullable=False, index=True)
    code_artifact_id: Mapped[Optional[UUID]] = mapped_column(UUIDType(), nullable=True)
    test_suite_id: Mapped[Optional[UUID]] = mapped_column(UUIDType(), nullable=True)

    metric_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    details: Mapped[dict[str, Any]] = mapped_column(JSONType(), default=dict, nullable=False)

    evaluated_by: Mapped[str] = mapped_column(String(255), nullable=False)
    evaluated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )

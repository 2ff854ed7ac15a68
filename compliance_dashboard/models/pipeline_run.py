"""Simulated CI/CD pipeline run model."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from compliance_dashboard.models.base import DashboardBase, JSONType, UUIDType, utcnow


class PipelineStatus(str, Enum):
    """Status of a pipeline run."""

    PENDING = "pending"
    RUNNING = "running"
    PASSED = "passed"
    FAILED = "failed"
    BLOCKED = "blocked"


class PipelineRun(DashboardBase):
    """One simulated execution of the compliance pipeline."""

    __tablename__ = "pipeline_runs"

    code_artifact_id: Mapped[UUID] = mapped_column(UUIDType(), nullable=False, index=True)
    test_suite_id: Mapped[UUID] = mapped_column(UUIDType(), nullable=False, index=True)
    governance_rule_id: Mapped[UUID] = mapped_column(UUIDType(), nullable=False, index=True)

    run_number: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PipelineStatus.PENDING.value, index=True
    )
    # Ordered list of {name, status, started_at, completed_at, logs}
    stages: Mapped[list[dict[str, Any]]] = mapped_column(JSONType(), default=list, nullable=False)
    compliance_gate_passed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # {total, passed, failed}
    test_results: Mapped[dict[str, int]] = mapped_column(JSONType(), default=dict, nullable=False)

    triggered_by: Mapped[int] = mapped_column(Integer, nullable=False)
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

"""Pydantic schemas for pipeline runs."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from compliance_dashboard.api.schemas.common import Pagination, iso
from compliance_dashboard.models.pipeline_run import PipelineRun, PipelineStatus


class PipelineRunRequest(BaseModel):
    """Request to run the simulated pipeline for an artifact and its suite."""

    code_artifact_id: UUID
    test_suite_id: UUID


class PipelineStatusUpdate(BaseModel):
    """Request to change the status of a run."""

    status: PipelineStatus = Field(..., description="pending, running, passed, failed or blocked")


class PipelineStage(BaseModel):
    name: str
    status: str
    started_at: str
    completed_at: str
    logs: str = ""


class PipelineTestResults(BaseModel):
    total: int = 0
    passed: int = 0
    failed: int = 0


class PipelineRunDetail(BaseModel):
    """Full view of a pipeline run."""

    id: str
    run_number: int
    code_artifact_id: str
    test_suite_id: str
    governance_rule_id: str
    status: str
    stages: list[PipelineStage]
    compliance_gate_passed: bool
    test_results: PipelineTestResults
    triggered_by: int
    started_at: str
    completed_at: Optional[str] = None

    @classmethod
    def from_model(cls, run: PipelineRun) -> "PipelineRunDetail":
        return cls(
            id=str(run.id),
            run_number=run.run_number,
            code_artifact_id=str(run.code_artifact_id),
            test_suite_id=str(run.test_suite_id),
            governance_rule_id=str(run.governance_rule_id),
            status=run.status,
            stages=[PipelineStage(**stage) for stage in run.stages or []],
            compliance_gate_passed=run.compliance_gate_passed,
            test_results=PipelineTestResults(**(run.test_results or {})),
            triggered_by=run.triggered_by,
            started_at=iso(run.started_at),
            completed_at=iso(run.completed_at),
        )


class PipelineRunSummary(BaseModel):
    """Compact view used inside other responses."""

    id: str
    run_number: int
    status: str
    compliance_gate_passed: bool
    started_at: str
    completed_at: Optional[str] = None

    @classmethod
    def from_model(cls, run: PipelineRun) -> "PipelineRunSummary":
        return cls(
            id=str(run.id),
            run_number=run.run_number,
            status=run.status,
            compliance_gate_passed=run.compliance_gate_passed,
            started_at=iso(run.started_at),
            completed_at=iso(run.completed_at),
        )


class PipelineRunListResponse(BaseModel):
    data: list[PipelineRunDetail]
    pagination: Pagination


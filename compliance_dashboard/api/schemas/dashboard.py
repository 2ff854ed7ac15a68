"""Pydantic schemas for the dashboard home page."""

from pydantic import BaseModel

from compliance_dashboard.api.schemas.pipeline_run import PipelineRunSummary
from compliance_dashboard.services.dashboard import DashboardSummary


class DashboardSummaryResponse(BaseModel):
    total_rules: int
    active_rules: int
    total_artifacts: int
    total_test_suites: int
    total_runs: int
    passed_runs: int
    pass_rate: int
    recent_runs: list[PipelineRunSummary]

    @classmethod
    def from_service(cls, summary: DashboardSummary) -> "DashboardSummaryResponse":
        return cls(
            total_rules=summary.total_rules,
            active_rules=summary.active_rules,
            total_artifacts=summary.total_artifacts,
            total_test_suites=summary.total_test_suites,
            total_runs=summary.total_runs,
            passed_runs=summary.passed_runs,
            pass_rate=summary.pass_rate,
            recent_runs=[PipelineRunSummary.from_model(run) for run in summary.recent_runs],
        )

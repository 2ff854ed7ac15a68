"""Home page counters."""

from dataclasses import dataclass
from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from compliance_dashboard.models.pipeline_run import PipelineRun, PipelineStatus
from compliance_dashboard.repositories.code_artifact import CodeArtifactRepository
from compliance_dashboard.repositories.governance_rule import GovernanceRuleRepository
from compliance_dashboard.repositories.pipeline_run import PipelineRunRepository
from compliance_dashboard.repositories.test_suite import TestSuiteRepository
from compliance_dashboard.services.evaluation import round_half_up

RECENT_RUNS_LIMIT = 5


@dataclass
class DashboardSummary:
    total_rules: int
    active_rules: int
    total_artifacts: int
    total_test_suites: int
    total_runs: int
    passed_runs: int
    pass_rate: int  # percent, rounded; 0 when there are no runs
    recent_runs: Sequence[PipelineRun]


class DashboardService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.rule_repo = GovernanceRuleRepository(session)
        self.artifact_repo = CodeArtifactRepository(session)
        self.suite_repo = TestSuiteRepository(session)
        self.run_repo = PipelineRunRepository(session)

    async def get_summary(self) -> DashboardSummary:
        runs_by_status = await self.run_repo.count_by_status()
        total_runs = sum(runs_by_status.values())
        passed_runs = runs_by_status.get(PipelineStatus.PASSED.value, 0)

        return DashboardSummary(
            total_rules=await self.rule_repo.count(),
            active_rules=await self.rule_repo.count_active(),
            total_artifacts=await self.artifact_repo.count(),
            total_test_suites=await self.suite_repo.count(),
            total_runs=total_runs,
            passed_runs=passed_runs,
            pass_rate=round_half_up(passed_runs / total_runs * 100) if total_runs else 0,
            recent_runs=await self.run_repo.get_recent(RECENT_RUNS_LIMIT),
        )

"""Simulated CI/CD pipeline with a compliance gate.

No build or test process runs. A run is four fixed stages (Build, Unit
Tests, Compliance Gate, Deploy), each marked passed and stamped two seconds
after the previous one, starting from the moment the run is requested. Test
results are copied from the suite's stored test count and the gate always
passes once both inputs resolve.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from compliance_dashboard.logging_config import get_logger
from compliance_dashboard.metrics import record_pipeline_run
from compliance_dashboard.models.audit_entry import AuditAction
from compliance_dashboard.models.base import utcnow
from compliance_dashboard.models.pipeline_run import PipelineRun, PipelineStatus
from compliance_dashboard.models.test_suite import TestSuite
from compliance_dashboard.repositories.code_artifact import CodeArtifactRepository
from compliance_dashboard.repositories.pipeline_run import PipelineRunRepository
from compliance_dashboard.repositories.test_suite import TestSuiteRepository
from compliance_dashboard.services.audit import AuditRecorder
from compliance_dashboard.services.errors import EntityNotFoundError
from compliance_dashboard.tracing import SpanAttributes, create_span

logger = get_logger(__name__)

PIPELINE_STAGES = ("Build", "Unit Tests", "Compliance Gate", "Deploy")
STAGE_DURATION = timedelta(seconds=2)


@dataclass(frozen=True)
class StageResult:
    """Outcome of one simulated stage."""

    name: str
    status: str
    started_at: datetime
    completed_at: datetime
    logs: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat(),
            "logs": self.logs,
        }


def simulate_stages(started_at: datetime) -> list[StageResult]:
    """Produce the fixed, always-passing stage sequence."""
    stages = []
    for index, name in enumerate(PIPELINE_STAGES):
        stage_start = started_at + STAGE_DURATION * index
        stages.append(
            StageResult(
                name=name,
                status=PipelineStatus.PASSED.value,
                started_at=stage_start,
                completed_at=stage_start + STAGE_DURATION,
                logs=f"{name} passed",
            )
        )
    return stages


def simulate_test_results(suite: TestSuite) -> dict[str, int]:
    """Every generated test is reported as passing."""
    return {"total": suite.test_count, "passed": suite.test_count, "failed": 0}


class PipelineGateService:
    """Runs the pipeline simulation and records its outcome."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.artifact_repo = CodeArtifactRepository(session)
        self.suite_repo = TestSuiteRepository(session)
        self.run_repo = PipelineRunRepository(session)
        self.audit = AuditRecorder(session)

    async def run(self, code_artifact_id: UUID, test_suite_id: UUID, actor: int) -> PipelineRun:
        """Simulate a pipeline run for an artifact and suite.

        Raises:
            EntityNotFoundError: If either the artifact or the suite is missing
        """
        artifact = await self.artifact_repo.get_by_id(code_artifact_id)
        if not artifact:
            raise EntityNotFoundError("CodeArtifact", code_artifact_id)

        suite = await self.suite_repo.get_by_id(test_suite_id)
        if not suite:
            raise EntityNotFoundError("TestSuite", test_suite_id)

        started_at = utcnow()
        run_number = await self.run_repo.next_run_number()

        with create_span(
            "pipeline.simulate",
            attributes={
                SpanAttributes.CODE_ARTIFACT_ID: str(artifact.id),
                SpanAttributes.TEST_SUITE_ID: str(suite.id),
                SpanAttributes.PIPELINE_RUN_NUMBER: run_number,
            },
        ) as span:
            stages = simulate_stages(started_at)
            gate_passed = True
            status = PipelineStatus.PASSED.value
            span.set_attribute(SpanAttributes.PIPELINE_STAGE_COUNT, len(stages))
            span.set_attribute(SpanAttributes.PIPELINE_GATE_PASSED, gate_passed)

        run = await self.run_repo.create(
            PipelineRun(
                code_artifact_id=artifact.id,
                test_suite_id=suite.id,
                governance_rule_id=artifact.governance_rule_id,
                run_number=run_number,
                status=status,
                stages=[stage.to_dict() for stage in stages],
                compliance_gate_passed=gate_passed,
                test_results=simulate_test_results(suite),
                triggered_by=actor,
                started_at=started_at,
                completed_at=stages[-1].completed_at,
            )
        )
        await self.audit.record(
            governance_rule_id=artifact.governance_rule_id,
            code_artifact_id=artifact.id,
            test_suite_id=suite.id,
            pipeline_run_id=run.id,
            action=AuditAction.PIPELINE_EXECUTED,
            actor=actor,
            details={"status": status, "complianceGatePassed": gate_passed},
        )

        record_pipeline_run(status)
        logger.info(
            "Pipeline run simulated",
            pipeline_run_id=str(run.id),
            run_number=run_number,
            status=status,
            compliance_gate_passed=gate_passed,
        )
        return run

    async def update_status(
        self,
        pipeline_run_id: UUID,
        status: PipelineStatus | str,
        actor: int,
    ) -> PipelineRun:
        """Change only the status of an existing run.

        Raises:
            EntityNotFoundError: If the run does not exist
        """
        new_status = PipelineStatus(status).value

        run = await self.run_repo.get_by_id(pipeline_run_id)
        if not run:
            raise EntityNotFoundError("PipelineRun", pipeline_run_id)

        previous = run.status
        run = await self.run_repo.update_status(run, new_status)
        await self.audit.record(
            governance_rule_id=run.governance_rule_id,
            code_artifact_id=run.code_artifact_id,
            test_suite_id=run.test_suite_id,
            pipeline_run_id=run.id,
            action=AuditAction.PIPELINE_STATUS_UPDATED,
            actor=actor,
            details={"from": previous, "to": new_status},
        )

        logger.info(
            "Pipeline run status updated",
            pipeline_run_id=str(run.id),
            previous_status=previous,
            status=new_status,
        )
        return run

"""Pydantic schemas for the audit trail and rule lineage."""

from typing import Any, Optional

from pydantic import BaseModel

from compliance_dashboard.api.schemas.common import iso, str_id
from compliance_dashboard.api.schemas.generation import CodeArtifactSummary, TestSuiteSummary
from compliance_dashboard.api.schemas.governance_rule import GovernanceRuleSummary
from compliance_dashboard.api.schemas.pipeline_run import PipelineRunSummary
from compliance_dashboard.models.audit_entry import AuditEntry
from compliance_dashboard.services.lineage import AuditSummary, LineageEntry, RuleLineage


class AuditEntryResponse(BaseModel):
    """One audit trail entry."""

    id: str
    governance_rule_id: str
    code_artifact_id: Optional[str] = None
    test_suite_id: Optional[str] = None
    pipeline_run_id: Optional[str] = None
    action: str
    actor: int
    details: dict[str, Any]
    timestamp: str

    @classmethod
    def from_model(cls, entry: AuditEntry) -> "AuditEntryResponse":
        return cls(
            id=str(entry.id),
            governance_rule_id=str(entry.governance_rule_id),
            code_artifact_id=str_id(entry.code_artifact_id),
            test_suite_id=str_id(entry.test_suite_id),
            pipeline_run_id=str_id(entry.pipeline_run_id),
            action=entry.action,
            actor=entry.actor,
            details=dict(entry.details or {}),
            timestamp=iso(entry.timestamp),
        )


class AuditTrailResponse(BaseModel):
    data: list[AuditEntryResponse]
    total: int


class LineageEntryResponse(AuditEntryResponse):
    """Audit entry with its references resolved.

    Missing references (never set, or since deleted) are null.
    """

    rule: Optional[GovernanceRuleSummary] = None
    code_artifact: Optional[CodeArtifactSummary] = None
    test_suite: Optional[TestSuiteSummary] = None
    pipeline_run: Optional[PipelineRunSummary] = None

    @classmethod
    def from_service(cls, item: LineageEntry) -> "LineageEntryResponse":
        base = AuditEntryResponse.from_model(item.entry).model_dump()
        return cls(
            **base,
            rule=GovernanceRuleSummary.from_model(item.rule) if item.rule else None,
            code_artifact=(
                CodeArtifactSummary.from_model(item.code_artifact) if item.code_artifact else None
            ),
            test_suite=TestSuiteSummary.from_model(item.test_suite) if item.test_suite else None,
            pipeline_run=(
                PipelineRunSummary.from_model(item.pipeline_run) if item.pipeline_run else None
            ),
        )


class RuleLineageResponse(BaseModel):
    """Every audit entry of one rule, newest first."""

    governance_rule_id: str
    rule: Optional[GovernanceRuleSummary] = None
    entry_count: int
    entries: list[LineageEntryResponse]

    @classmethod
    def from_service(cls, lineage: RuleLineage) -> "RuleLineageResponse":
        return cls(
            governance_rule_id=str(lineage.governance_rule_id),
            rule=GovernanceRuleSummary.from_model(lineage.rule) if lineage.rule else None,
            entry_count=len(lineage.entries),
            entries=[LineageEntryResponse.from_service(item) for item in lineage.entries],
        )


class LineageResponse(BaseModel):
    data: list[RuleLineageResponse]
    total: int


class AuditSummaryResponse(BaseModel):
    """Counters over the whole audit trail."""

    total_entries: int
    rules_tracked: int
    code_generations: int
    pipeline_executions: int
    by_action: dict[str, int]

    @classmethod
    def from_service(cls, summary: AuditSummary) -> "AuditSummaryResponse":
        return cls(
            total_entries=summary.total_entries,
            rules_tracked=summary.rules_tracked,
            code_generations=summary.code_generations,
            pipeline_executions=summary.pipeline_executions,
            by_action=summary.by_action,
        )

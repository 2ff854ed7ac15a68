"""Lineage aggregator over the audit trail.

Read-only composition: audit entries are grouped by governance rule, each
entry's rule, artifact, suite and run references are looked up, and entries
inside a group are ordered newest first. Everything is loaded per call.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from compliance_dashboard.logging_config import get_logger
from compliance_dashboard.models.audit_entry import AuditAction, AuditEntry
from compliance_dashboard.models.code_artifact import CodeArtifact
from compliance_dashboard.models.governance_rule import GovernanceRule
from compliance_dashboard.models.pipeline_run import PipelineRun
from compliance_dashboard.models.test_suite import TestSuite
from compliance_dashboard.repositories.audit_entry import AuditEntryRepository
from compliance_dashboard.repositories.code_artifact import CodeArtifactRepository
from compliance_dashboard.repositories.governance_rule import GovernanceRuleRepository
from compliance_dashboard.repositories.pipeline_run import PipelineRunRepository
from compliance_dashboard.repositories.test_suite import TestSuiteRepository
from compliance_dashboard.tracing import SpanAttributes, create_span

logger = get_logger(__name__)


def _timestamp_key(entry: AuditEntry) -> datetime:
    # SQLite hands back naive datetimes
    ts = entry.timestamp
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def newest_first(entries: Sequence[AuditEntry]) -> list[AuditEntry]:
    """Order audit entries by timestamp, most recent first."""
    return sorted(entries, key=_timestamp_key, reverse=True)


@dataclass
class LineageEntry:
    """An audit entry with its references resolved.

    A reference is None when the entry has none, or when the referenced row
    no longer exists (rules can be deleted).
    """

    entry: AuditEntry
    rule: Optional[GovernanceRule] = None
    code_artifact: Optional[CodeArtifact] = None
    test_suite: Optional[TestSuite] = None
    pipeline_run: Optional[PipelineRun] = None


@dataclass
class RuleLineage:
    """All audit entries of one governance rule, newest first."""

    governance_rule_id: UUID
    rule: Optional[GovernanceRule]
    entries: list[LineageEntry] = field(default_factory=list)

    @property
    def actions(self) -> list[str]:
        return [item.entry.action for item in self.entries]


@dataclass
class AuditSummary:
    """Counters shown above the audit trail."""

    total_entries: int
    rules_tracked: int
    code_generations: int
    pipeline_executions: int
    by_action: dict[str, int]


class LineageService:
    """Service for audit trail and rule lineage queries."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.audit_repo = AuditEntryRepository(session)
        self.rule_repo = GovernanceRuleRepository(session)
        self.artifact_repo = CodeArtifactRepository(session)
        self.suite_repo = TestSuiteRepository(session)
        self.run_repo = PipelineRunRepository(session)

    async def get_audit_trail(self) -> list[AuditEntry]:
        """Every audit entry, newest first."""
        return newest_first(await self.audit_repo.list_all())

    async def get_entries_for_rule(self, governance_rule_id: UUID) -> list[AuditEntry]:
        """The raw audit entries of one rule, newest first."""
        return newest_first(await self.audit_repo.get_by_rule(governance_rule_id))

    async def _resolve(self, entries: Sequence[AuditEntry]) -> list[LineageEntry]:
        """Look up every reference of ``entries`` with one query per table."""

        def ids(attr: str) -> list[UUID]:
            return list({getattr(e, attr) for e in entries if getattr(e, attr) is not None})

        rules = {r.id: r for r in await self.rule_repo.get_by_ids(ids("governance_rule_id"))}
        artifacts = {a.id: a for a in await self.artifact_repo.get_by_ids(ids("code_artifact_id"))}
        suites = {s.id: s for s in await self.suite_repo.get_by_ids(ids("test_suite_id"))}
        runs = {r.id: r for r in await self.run_repo.get_by_ids(ids("pipeline_run_id"))}

        return [
            LineageEntry(
                entry=e,
                rule=rules.get(e.governance_rule_id),
                code_artifact=artifacts.get(e.code_artifact_id) if e.code_artifact_id else None,
                test_suite=suites.get(e.test_suite_id) if e.test_suite_id else None,
                pipeline_run=runs.get(e.pipeline_run_id) if e.pipeline_run_id else None,
            )
            for e in entries
        ]

    async def get_lineage_by_rule(self, governance_rule_id: UUID) -> RuleLineage:
        """Lineage of a single rule.

        A rule with no entries (or an unknown id) yields an empty lineage
        rather than an error; the trail outlives rule deletion.
        """
        with create_span(
            "lineage.by_rule",
            attributes={SpanAttributes.GOVERNANCE_RULE_ID: str(governance_rule_id)},
        ) as span:
            entries = await self.get_entries_for_rule(governance_rule_id)
            resolved = await self._resolve(entries)
            span.set_attribute(SpanAttributes.LINEAGE_ENTRY_COUNT, len(resolved))

        rule = resolved[0].rule if resolved else await self.rule_repo.get_by_id(governance_rule_id)
        return RuleLineage(governance_rule_id=governance_rule_id, rule=rule, entries=resolved)

    async def get_lineage(self) -> list[RuleLineage]:
        """Lineage of every rule present in the trail.

        Groups are ordered by their most recent entry, newest first.
        """
        entries = await self.get_audit_trail()
        resolved = await self._resolve(entries)

        groups: dict[UUID, RuleLineage] = {}
        for item in resolved:
            rule_id = item.entry.governance_rule_id
            if rule_id not in groups:
                groups[rule_id] = RuleLineage(governance_rule_id=rule_id, rule=item.rule)
            groups[rule_id].entries.append(item)

        logger.debug("Lineage aggregated", rules=len(groups), entries=len(resolved))
        return list(groups.values())

    async def get_summary(self) -> AuditSummary:
        """Counts over the whole trail."""
        entries = await self.audit_repo.list_all()
        by_action = Counter(e.action for e in entries)
        return AuditSummary(
            total_entries=len(entries),
            rules_tracked=len({e.governance_rule_id for e in entries}),
            code_generations=by_action.get(AuditAction.CODE_GENERATED.value, 0),
            pipeline_executions=by_action.get(AuditAction.PIPELINE_EXECUTED.value, 0),
            by_action=dict(by_action),
        )

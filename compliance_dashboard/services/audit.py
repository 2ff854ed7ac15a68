"""Audit recorder: the single writer of the append-only audit trail."""

from typing import Any, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from compliance_dashboard.logging_config import get_logger
from compliance_dashboard.metrics import record_audit_entry
from compliance_dashboard.models.audit_entry import AuditAction, AuditEntry
from compliance_dashboard.repositories.audit_entry import AuditEntryRepository

logger = get_logger(__name__)


class AuditRecorder:
    """Appends audit entries in the caller's unit of work.

    The entry is flushed, not committed; it becomes durable together with the
    entity write that caused it when the caller commits.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = AuditEntryRepository(session)

    async def record(
        self,
        governance_rule_id: UUID,
        action: AuditAction | str,
        actor: int,
        details: Optional[dict[str, Any]] = None,
        code_artifact_id: Optional[UUID] = None,
        test_suite_id: Optional[UUID] = None,
        pipeline_run_id: Optional[UUID] = None,
    ) -> AuditEntry:
        action_value = action.value if isinstance(action, AuditAction) else action
        entry = AuditEntry(
            governance_rule_id=governance_rule_id,
            code_artifact_id=code_artifact_id,
            test_suite_id=test_suite_id,
            pipeline_run_id=pipeline_run_id,
            action=action_value,
            actor=actor,
            details=details or {},
        )
        entry = await self.repo.create(entry)

        record_audit_entry(action_value)
        logger.info(
            "Audit entry recorded",
            action=action_value,
            actor=actor,
            governance_rule_id=str(governance_rule_id),
            audit_entry_id=str(entry.id),
        )
        return entry

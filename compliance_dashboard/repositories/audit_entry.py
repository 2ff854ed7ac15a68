"""Repository for the append-only audit trail."""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select

from compliance_dashboard.models.audit_entry import AuditEntry
from compliance_dashboard.repositories.base import AppendOnlyRepository


class AuditEntryRepository(AppendOnlyRepository[AuditEntry]):
    """Read and insert access to audit entries. There is no update or delete."""

    model_class = AuditEntry
    order_column = "timestamp"

    async def list_all(self) -> Sequence[AuditEntry]:
        """Get the whole trail, newest first."""
        stmt = select(AuditEntry).order_by(AuditEntry.timestamp.desc())
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def get_by_rule(self, governance_rule_id: UUID) -> Sequence[AuditEntry]:
        """Get the entries of one rule, newest first."""
        stmt = (
            select(AuditEntry)
            .where(AuditEntry.governance_rule_id == governance_rule_id)
            .order_by(AuditEntry.timestamp.desc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

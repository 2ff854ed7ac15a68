"""Repository for governance rule data access."""

from typing import Optional, Sequence

from sqlalchemy import func, select

from compliance_dashboard.models.governance_rule import GovernanceRule, RuleStatus
from compliance_dashboard.repositories.base import MutableRepository


class GovernanceRuleRepository(MutableRepository[GovernanceRule]):
    """Repository for governance rule operations."""

    model_class = GovernanceRule

    async def get_by_rule_id(self, rule_id: str) -> Optional[GovernanceRule]:
        """Get rule by its external rule code."""
        stmt = select(GovernanceRule).where(GovernanceRule.rule_id == rule_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_filtered(
        self,
        status: Optional[str] = None,
        category: Optional[str] = None,
        priority: Optional[str] = None,
        offset: int = 0,
        limit: int = 100,
    ) -> tuple[Sequence[GovernanceRule], int]:
        """List rules with optional filters, newest first.

        Returns:
            Tuple of (rules, total matching count).
        """
        stmt = select(GovernanceRule)
        count_stmt = select(func.count()).select_from(GovernanceRule)

        if status:
            stmt = stmt.where(GovernanceRule.status == status)
            count_stmt = count_stmt.where(GovernanceRule.status == status)
        if category:
            stmt = stmt.where(GovernanceRule.category == category)
            count_stmt = count_stmt.where(GovernanceRule.category == category)
        if priority:
            stmt = stmt.where(GovernanceRule.priority == priority)
            count_stmt = count_stmt.where(GovernanceRule.priority == priority)

        total = (await self.session.execute(count_stmt)).scalar() or 0

        stmt = stmt.order_by(GovernanceRule.created_at.desc()).offset(offset).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all(), total

    async def count_active(self) -> int:
        """Count rules in the active status."""
        stmt = select(func.count()).select_from(GovernanceRule).where(
            GovernanceRule.status == RuleStatus.ACTIVE.value
        )
        result = await self.session.execute(stmt)
        return result.scalar() or 0


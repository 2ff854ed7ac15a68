"""Repository for code artifact data access."""

from typing import Sequence
from uuid import UUID

from sqlalchemy import select

from compliance_dashboard.models.code_artifact import CodeArtifact
from compliance_dashboard.repositories.base import AppendOnlyRepository


class CodeArtifactRepository(AppendOnlyRepository[CodeArtifact]):
    """Repository for code artifact operations."""

    model_class = CodeArtifact
    order_column = "generated_at"

    async def get_by_rule(self, governance_rule_id: UUID) -> Sequence[CodeArtifact]:
        """Get all artifacts generated for a rule, newest first."""
        stmt = (
            select(CodeArtifact)
            .where(CodeArtifact.governance_rule_id == governance_rule_id)
            .order_by(CodeArtifact.generated_at.desc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()

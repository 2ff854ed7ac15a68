"""Repository for pipeline run data access."""

from typing import Sequence

from sqlalchemy import func, select

from compliance_dashboard.models.pipeline_run import PipelineRun
from compliance_dashboard.repositories.base import AppendOnlyRepository


class PipelineRunRepository(AppendOnlyRepository[PipelineRun]):
    """Repository for pipeline run operations.

    Runs are immutable apart from their status, which is changed through
    ``update_status``.
    """

    model_class = PipelineRun
    order_column = "started_at"

    async def next_run_number(self) -> int:
        """Return the highest run number plus one (1 for the first run)."""
        stmt = select(func.max(PipelineRun.run_number))
        result = await self.session.execute(stmt)
        return (result.scalar() or 0) + 1

    async def update_status(self, run: PipelineRun, status: str) -> PipelineRun:
        """Change only the status of a run."""
        run.status = status
        await self.session.flush()
        await self.session.refresh(run)
        return run

    async def get_recent(self, limit: int = 5) -> Sequence[PipelineRun]:
        """Get the most recently started runs."""
        stmt = select(PipelineRun).order_by(PipelineRun.started_at.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def count_by_status(self) -> dict[str, int]:
        """Get run counts grouped by status."""
        stmt = select(
            PipelineRun.status,
            func.count(PipelineRun.id),
        ).group_by(PipelineRun.status)
        result = await self.session.execute(stmt)
        return {row[0]: row[1] for row in result.all()}

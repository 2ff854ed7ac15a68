"""Repository base classes.

Generated artifacts, suites, runs, metrics and audit entries are never
edited or removed through the API, so their repositories only read and
insert. Rules and context documents use ``MutableRepository``.
"""

from typing import Generic, Optional, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from compliance_dashboard.models.base import DashboardBase

ModelT = TypeVar("ModelT", bound=DashboardBase)


class AppendOnlyRepository(Generic[ModelT]):
    model_class: type[ModelT]
    # Listings are ordered on this column, newest first
    order_column: str = "created_at"

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, id: UUID) -> Optional[ModelT]:
        return await self.session.get(self.model_class, id)

    async def get_by_ids(self, ids: list[UUID]) -> Sequence[ModelT]:
        """Fetch rows for the given ids; unknown ids are simply absent."""
        if not ids:
            return []
        result = await self.session.execute(
            select(self.model_class).where(self.model_class.id.in_(ids))
        )
        return result.scalars().all()

    async def get_all(self, offset: int = 0, limit: int = 100) -> Sequence[ModelT]:
        result = await self.session.execute(
            select(self.model_class)
            .order_by(getattr(self.model_class, self.order_column).desc())
            .offset(offset)
            .limit(limit)
        )
        return result.scalars().all()

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(self.model_class))
        return result.scalar() or 0

    async def create(self, entity: ModelT) -> ModelT:
        """Insert and flush; the caller's transaction decides when to commit."""
        self.session.add(entity)
        await self.session.flush()
        await self.session.refresh(entity)
        return entity


class MutableRepository(AppendOnlyRepository[ModelT]):
    async def update(self, entity: ModelT) -> ModelT:
        """Flush attribute changes already made on ``entity``."""
        await self.session.flush()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity: ModelT) -> None:
        await self.session.delete(entity)
        await self.session.flush()

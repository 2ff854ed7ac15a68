"""Repository for context document data access."""

from typing import Optional, Sequence

from sqlalchemy import func, select

from compliance_dashboard.models.context_document import ContextDocument
from compliance_dashboard.repositories.base import MutableRepository


class ContextDocumentRepository(MutableRepository[ContextDocument]):
    """Repository for context document operations."""

    model_class = ContextDocument

    async def list_filtered(
        self,
        type: Optional[str] = None,
        tag: Optional[str] = None,
        offset: int = 0,
        limit: int = 100,
    ) -> tuple[Sequence[ContextDocument], int]:
        """List documents, optionally by type and tag, newest first.

        Tags live in a JSON column, so the tag filter is applied in Python
        after the type filter narrows the rows.
        """
        stmt = select(ContextDocument).order_by(ContextDocument.created_at.desc())
        if type:
            stmt = stmt.where(ContextDocument.type == type)

        if tag:
            result = await self.session.execute(stmt)
            matching = [doc for doc in result.scalars().all() if tag in (doc.tags or [])]
            return matching[offset:offset + limit], len(matching)

        count_stmt = select(func.count()).select_from(ContextDocument)
        if type:
            count_stmt = count_stmt.where(ContextDocument.type == type)
        total = (await self.session.execute(count_stmt)).scalar() or 0

        result = await self.session.execute(stmt.offset(offset).limit(limit))
        return result.scalars().all(), total

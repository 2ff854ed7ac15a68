"""Context document endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from compliance_dashboard.api.auth import CurrentActor
from compliance_dashboard.api.exceptions import BadRequestError, NotFoundError
from compliance_dashboard.api.schemas.common import Pagination
from compliance_dashboard.api.schemas.context_document import (
    ContextDocumentCreate,
    ContextDocumentDetail,
    ContextDocumentListResponse,
    ContextDocumentUpdate,
)
from compliance_dashboard.database import DbSession
from compliance_dashboard.models.context_document import ContextDocumentType
from compliance_dashboard.repositories import ContextDocumentRepository
from compliance_dashboard.services.governance import ContextDocumentService

router = APIRouter(prefix="/context-documents", tags=["context-documents"])


@router.get("", response_model=ContextDocumentListResponse)
async def list_context_documents(
    db: DbSession,
    type: Optional[ContextDocumentType] = Query(None, description="Filter by document type"),
    tag: Optional[str] = Query(None, description="Filter by tag"),
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
) -> ContextDocumentListResponse:
    """List context documents, newest first."""
    documents, total = await ContextDocumentRepository(db).list_filtered(
        type=type.value if type else None,
        tag=tag,
        offset=offset,
        limit=limit,
    )
    return ContextDocumentListResponse(
        data=[ContextDocumentDetail.from_model(d) for d in documents],
        pagination=Pagination.build(offset, limit, total),
    )


@router.get("/{document_id}", response_model=ContextDocumentDetail)
async def get_context_document(db: DbSession, document_id: UUID) -> ContextDocumentDetail:
    document = await ContextDocumentRepository(db).get_by_id(document_id)
    if not document:
        raise NotFoundError("ContextDocument", str(document_id))
    return ContextDocumentDetail.from_model(document)


@router.post("", response_model=ContextDocumentDetail, status_code=status.HTTP_201_CREATED)
async def create_context_document(
    db: DbSession,
    actor: CurrentActor,
    document: ContextDocumentCreate,
) -> ContextDocumentDetail:
    """Create a context document for use in generation prompts."""
    created = await ContextDocumentService(db).create(
        actor=actor,
        title=document.title,
        type=document.type,
        content=document.content,
        tags=document.tags,
        metadata=document.metadata,
    )
    await db.commit()
    return ContextDocumentDetail.from_model(created)


@router.patch("/{document_id}", response_model=ContextDocumentDetail)
async def update_context_document(
    db: DbSession,
    actor: CurrentActor,
    document_id: UUID,
    changes: ContextDocumentUpdate,
) -> ContextDocumentDetail:
    fields = changes.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        raise BadRequestError("At least one field must be provided")

    updated = await ContextDocumentService(db).update(document_id, actor, **fields)
    await db.commit()
    return ContextDocumentDetail.from_model(updated)


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_context_document(
    db: DbSession,
    actor: CurrentActor,
    document_id: UUID,
) -> Response:
    await ContextDocumentService(db).delete(document_id, actor)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Pydantic schemas for context documents."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from compliance_dashboard.api.schemas.common import Pagination, iso
from compliance_dashboard.models.context_document import ContextDocument, ContextDocumentType


class ContextDocumentCreate(BaseModel):
    """Schema for creating a context document."""

    title: str = Field(..., min_length=1, max_length=500)
    type: ContextDocumentType = Field(
        ..., description="regulatory_doc, adr, utility_signature or best_practice"
    )
    content: str = Field(..., min_length=1)
    tags: list[str] = Field(default_factory=list, description="Ordered list of tags")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Opaque key-value metadata")


class ContextDocumentUpdate(BaseModel):
    """Schema for partially updating a context document."""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    content: Optional[str] = Field(None, min_length=1)
    tags: Optional[list[str]] = None
    metadata: Optional[dict[str, Any]] = None


class ContextDocumentDetail(BaseModel):
    """Full view of a context document."""

    id: str
    title: str
    type: str
    content: str
    tags: list[str]
    metadata: dict[str, Any]
    created_by: int
    created_at: str
    updated_at: str

    @classmethod
    def from_model(cls, document: ContextDocument) -> "ContextDocumentDetail":
        return cls(
            id=str(document.id),
            title=document.title,
            type=document.type,
            content=document.content,
            tags=list(document.tags or []),
            metadata=dict(document.meta or {}),
            created_by=document.created_by,
            created_at=iso(document.created_at),
            updated_at=iso(document.updated_at),
        )


class ContextDocumentListResponse(BaseModel):
    """Response for context document list."""

    data: list[ContextDocumentDetail]
    pagination: Pagination

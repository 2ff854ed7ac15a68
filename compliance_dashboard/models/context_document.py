"""Context document model (reference material for generation prompts)."""

from enum import Enum

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from compliance_dashboard.models.base import DashboardBase, MetadataMixin, TimestampMixin


class ContextDocumentType(str, Enum):
    """Kinds of reference material."""

    REGULATORY_DOC = "regulatory_doc"
    ADR = "adr"
    UTILITY_SIGNATURE = "utility_signature"
    BEST_PRACTICE = "best_practice"


class ContextDocument(DashboardBase, TimestampMixin, MetadataMixin):
    """Regulation text, ADR, approved utility signature or best practice."""

    __tablename__ = "context_documents"

    title: Mapped[str] = mapped_column(String(500), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    created_by: Mapped[int] = mapped_column(Integer, nullable=False)

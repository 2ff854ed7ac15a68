"""Generated code artifact model."""

from datetime import datetime
from enum import Enum
from uuid import UUID

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from compliance_dashboard.models.base import DashboardBase, JSONType, UUIDType, utcnow


class ArtifactStatus(str, Enum):
    """Status of a code artifact. Only GENERATED is ever set."""

    GENERATED = "generated"
    VALIDATED = "validated"
    DEPLOYED = "deployed"


class CodeArtifact(DashboardBase):
    """Enforcement code generated for a governance rule."""

    __tablename__ = "code_artifacts"

    governance_rule_id: Mapped[UUID] = mapped_column(UUIDType(), nullable=False, index=True)

    language: Mapped[str] = mapped_column(String(50), nullable=False, default="csharp")
    class_name: Mapped[str] = mapped_column(String(255), nullable=False)
    code: Mapped[str] = mapped_column(Text, nullable=False)
    generation_prompt: Mapped[str] = mapped_column(Text, nullable=False)
    # Context document ids that resolved at generation time
    context_used: Mapped[list[str]] = mapped_column(JSONType(), default=list, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ArtifactStatus.GENERATED.value
    )

    generated_by: Mapped[int] = mapped_column(Integer, nullable=False)
    generated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )

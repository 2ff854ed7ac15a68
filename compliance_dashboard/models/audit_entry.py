"""Append-only audit trail model."""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from compliance_dashboard.models.base import DashboardBase, JSONType, UUIDType, utcnow


class AuditAction(str, Enum):
    """Actions recorded by the application.

    The column itself is free-form; these are the tags the services write.
    """

    RULE_CREATED = "rule_created"
    RULE_UPDATED = "rule_updated"
    RULE_DELETED = "rule_deleted"
    CODE_GENERATED = "code_generated"
    TESTS_GENERATED = "tests_generated"
    PIPELINE_EXECUTED = "pipeline_executed"
    PIPELINE_STATUS_UPDATED = "pipeline_status_updated"
    EVALUATION_RECORDED = "evaluation_recorded"


class AuditEntry(DashboardBase):
    """One immutable record of a mutating operation.

    Entries are only ever inserted; nothing in the application updates or
    deletes them.
    """

    __tablename__ = "audit_trail"

    governance_rule_id: Mapped[UUID] = mapped_column(UUIDType(), nullable=False, index=True)
    code_artifact_id: Mapped[Optional[UUID]] = mapped_column(UUIDType(), nullable=True)
    test_suite_id: Mapped[Optional[UUID]] = mapped_column(UUIDType(), nullable=True)
    pipeline_run_id: Mapped[Optional[UUID]] = mapped_column(UUIDType(), nullable=True)

    action: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    actor: Mapped[int] = mapped_column(Integer, nullable=False)
    details: Mapped[dict[str, Any]] = mapped_column(JSONType(), default=dict, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )

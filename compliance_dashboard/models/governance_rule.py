"""Governance rule model."""

from enum import Enum

from sqlalchemy import Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from compliance_dashboard.models.base import DashboardBase, TimestampMixin


class RulePriority(str, Enum):
    """Priority of a governance rule."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class RuleStatus(str, Enum):
    """Lifecycle status of a governance rule.

    Transitions are unconstrained; any status may be set at any time.
    """

    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


class GovernanceRule(DashboardBase, TimestampMixin):
    """A regulatory compliance statement tracked by a stable external code."""

    __tablename__ = "governance_rules"

    # Identity
    rule_id: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    statement: Mapped[str] = mapped_column(Text, nullable=False)
    source_of_truth: Mapped[str] = mapped_column(Text, nullable=False)

    # Classification
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    priority: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RuleStatus.DRAFT.value, index=True
    )

    created_by: Mapped[int] = mapped_column(Integer, nullable=False)

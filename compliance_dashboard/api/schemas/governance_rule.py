"""Pydantic schemas for governance rules."""

from typing import Optional

from pydantic import BaseModel, Field

from compliance_dashboard.api.schemas.common import Pagination, iso
from compliance_dashboard.models.governance_rule import GovernanceRule, RulePriority, RuleStatus


class GovernanceRuleBase(BaseModel):
    """Base schema for governance rules."""

    title: str = Field(..., min_length=1, max_length=500, description="Short rule title")
    statement: str = Field(..., min_length=1, description="The regulatory statement to enforce")
    source_of_truth: str = Field(..., min_length=1, description="Regulation, policy or ADR the rule comes from")
    category: str = Field(..., min_length=1, max_length=100, description="Rule category (privacy, security, ...)")
    priority: RulePriority = Field(..., description="critical, high, medium or low")
    status: RuleStatus = Field(RuleStatus.DRAFT, description="draft, active or archived")


class GovernanceRuleCreate(GovernanceRuleBase):
    """Schema for creating a governance rule."""

    rule_id: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Unique external rule code, e.g. CP-CDG-PII-001",
    )


class GovernanceRuleUpdate(BaseModel):
    """Schema for partially updating a governance rule. The rule code cannot change."""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    statement: Optional[str] = Field(None, min_length=1)
    source_of_truth: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    priority: Optional[RulePriority] = None
    status: Optional[RuleStatus] = None


class GovernanceRuleDetail(BaseModel):
    """Full view of a governance rule."""

    id: str
    rule_id: str
    title: str
    statement: str
    source_of_truth: str
    category: str
    priority: str
    status: str
    created_by: int
    created_at: str
    updated_at: str

    class Config:
        from_attributes = True

    @classmethod
    def from_model(cls, rule: GovernanceRule) -> "GovernanceRuleDetail":
        return cls(
            id=str(rule.id),
            rule_id=rule.rule_id,
            title=rule.title,
            statement=rule.statement,
            source_of_truth=rule.source_of_truth,
            category=rule.category,
            priority=rule.priority,
            status=rule.status,
            created_by=rule.created_by,
            created_at=iso(rule.created_at),
            updated_at=iso(rule.updated_at),
        )


class GovernanceRuleSummary(BaseModel):
    """Compact view used inside other responses."""

    id: str
    rule_id: str
    title: str
    priority: str
    status: str

    @classmethod
    def from_model(cls, rule: GovernanceRule) -> "GovernanceRuleSummary":
        return cls(
            id=str(rule.id),
            rule_id=rule.rule_id,
            title=rule.title,
            priority=rule.priority,
            status=rule.status,
        )


class GovernanceRuleListResponse(BaseModel):
    """Response for governance rule list."""

    data: list[GovernanceRuleDetail]
    pagination: Pagination

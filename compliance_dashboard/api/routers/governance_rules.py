"""Governance rule endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from compliance_dashboard.api.auth import CurrentActor
from compliance_dashboard.api.exceptions import BadRequestError, NotFoundError
from compliance_dashboard.api.schemas.common import Pagination
from compliance_dashboard.api.schemas.governance_rule import (
    GovernanceRuleCreate,
    GovernanceRuleDetail,
    GovernanceRuleListResponse,
    GovernanceRuleUpdate,
)
from compliance_dashboard.database import DbSession
from compliance_dashboard.models.governance_rule import RulePriority, RuleStatus
from compliance_dashboard.repositories import GovernanceRuleRepository
from compliance_dashboard.services.governance import GovernanceRuleService

router = APIRouter(prefix="/governance-rules", tags=["governance-rules"])


@router.get("", response_model=GovernanceRuleListResponse)
async def list_governance_rules(
    db: DbSession,
    status_filter: Optional[RuleStatus] = Query(None, alias="status", description="Filter by status"),
    category: Optional[str] = Query(None, description="Filter by category"),
    priority: Optional[RulePriority] = Query(None, description="Filter by priority"),
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
) -> GovernanceRuleListResponse:
    """List governance rules, newest first."""
    repo = GovernanceRuleRepository(db)
    rules, total = await repo.list_filtered(
        status=status_filter.value if status_filter else None,
        category=category,
        priority=priority.value if priority else None,
        offset=offset,
        limit=limit,
    )
    return GovernanceRuleListResponse(
        data=[GovernanceRuleDetail.from_model(r) for r in rules],
        pagination=Pagination.build(offset, limit, total),
    )


@router.get("/{rule_id}", response_model=GovernanceRuleDetail)
async def get_governance_rule(db: DbSession, rule_id: UUID) -> GovernanceRuleDetail:
    """Get a governance rule by id."""
    rule = await GovernanceRuleRepository(db).get_by_id(rule_id)
    if not rule:
        raise NotFoundError("GovernanceRule", str(rule_id))
    return GovernanceRuleDetail.from_model(rule)


@router.post("", response_model=GovernanceRuleDetail, status_code=status.HTTP_201_CREATED)
async def create_governance_rule(
    db: DbSession,
    actor: CurrentActor,
    rule: GovernanceRuleCreate,
) -> GovernanceRuleDetail:
    """Create a governance rule. The rule code must be unique."""
    service = GovernanceRuleService(db)
    created = await service.create(
        actor=actor,
        rule_id=rule.rule_id,
        title=rule.title,
        statement=rule.statement,
        source_of_truth=rule.source_of_truth,
        category=rule.category,
        priority=rule.priority,
        status=rule.status,
    )
    await db.commit()
    return GovernanceRuleDetail.from_model(created)


@router.patch("/{rule_id}", response_model=GovernanceRuleDetail)
async def update_governance_rule(
    db: DbSession,
    actor: CurrentActor,
    rule_id: UUID,
    changes: GovernanceRuleUpdate,
) -> GovernanceRuleDetail:
    """Partially update a governance rule."""
    fields = changes.model_dump(exclude_unset=True, exclude_none=True)
    if not fields:
        raise BadRequestError("At least one field must be provided")

    updated = await GovernanceRuleService(db).update(rule_id, actor, **fields)
    await db.commit()
    return GovernanceRuleDetail.from_model(updated)


@router.delete("/{rule_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_governance_rule(
    db: DbSession,
    actor: CurrentActor,
    rule_id: UUID,
) -> Response:
    """Delete a governance rule.

    Generated artifacts, suites, runs, metrics and the audit trail of the
    rule are kept.
    """
    await GovernanceRuleService(db).delete(rule_id, actor)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Audit trail and lineage endpoints (read-only)."""

from uuid import UUID

from fastapi import APIRouter

from compliance_dashboard.api.schemas.audit import (
    AuditEntryResponse,
    AuditSummaryResponse,
    AuditTrailResponse,
    LineageResponse,
    RuleLineageResponse,
)
from compliance_dashboard.database import DbSession
from compliance_dashboard.services.lineage import LineageService

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("/audit-trail", response_model=AuditTrailResponse)
async def get_audit_trail(db: DbSession) -> AuditTrailResponse:
    """Every audit entry, newest first."""
    entries = await LineageService(db).get_audit_trail()
    return AuditTrailResponse(
        data=[AuditEntryResponse.from_model(e) for e in entries],
        total=len(entries),
    )


@router.get("/by-rule/{governance_rule_id}", response_model=AuditTrailResponse)
async def get_audit_entries_for_rule(db: DbSession, governance_rule_id: UUID) -> AuditTrailResponse:
    entries = await LineageService(db).get_entries_for_rule(governance_rule_id)
    return AuditTrailResponse(
        data=[AuditEntryResponse.from_model(e) for e in entries],
        total=len(entries),
    )


@router.get("/lineage", response_model=LineageResponse)
async def get_lineage(db: DbSession) -> LineageResponse:
    """Audit entries grouped by rule with references resolved."""
    lineages = await LineageService(db).get_lineage()
    return LineageResponse(
        data=[RuleLineageResponse.from_service(item) for item in lineages],
        total=len(lineages),
    )


@router.get("/lineage/{governance_rule_id}", response_model=RuleLineageResponse)
async def get_rule_lineage(db: DbSession, governance_rule_id: UUID) -> RuleLineageResponse:
    """Lineage of one rule. Unknown or deleted rules yield their remaining entries, possibly none."""
    lineage = await LineageService(db).get_lineage_by_rule(governance_rule_id)
    return RuleLineageResponse.from_service(lineage)


@router.get("/summary", response_model=AuditSummaryResponse)
async def get_audit_summary(db: DbSession) -> AuditSummaryResponse:
    summary = await LineageService(db).get_summary()
    return AuditSummaryResponse.from_service(summary)

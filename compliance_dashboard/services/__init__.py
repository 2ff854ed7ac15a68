"""Business logic services."""

from compliance_dashboard.services.audit import AuditRecorder
from compliance_dashboard.services.dashboard import DashboardService, DashboardSummary
from compliance_dashboard.services.errors import (
    DuplicateRuleError,
    EntityNotFoundError,
    GenerationFailedError,
    RuleCatalogError,
    ServiceError,
)
from compliance_dashboard.services.evaluation import EvaluationService, EvaluationSummary
from compliance_dashboard.services.generation import (
    CodeGenerationResult,
    GenerationService,
    TestGenerationResult,
)
from compliance_dashboard.services.governance import (
    ContextDocumentService,
    GovernanceRuleService,
    RuleImportResult,
    parse_rule_catalog,
)
from compliance_dashboard.services.lineage import (
    AuditSummary,
    LineageEntry,
    LineageService,
    RuleLineage,
)
from compliance_dashboard.services.pipeline_gate import PipelineGateService

__all__ = [
    "AuditRecorder",
    "AuditSummary",
    "CodeGenerationResult",
    "ContextDocumentService",
    "DashboardService",
    "DashboardSummary",
    "DuplicateRuleError",
    "EntityNotFoundError",
    "EvaluationService",
    "EvaluationSummary",
    "GenerationFailedError",
    "GenerationService",
    "GovernanceRuleService",
    "LineageEntry",
    "LineageService",
    "PipelineGateService",
    "RuleCatalogError",
    "RuleImportResult",
    "RuleLineage",
    "ServiceError",
    "TestGenerationResult",
    "parse_rule_catalog",
]

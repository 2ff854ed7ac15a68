"""API request and response schemas."""

from compliance_dashboard.api.schemas.audit import (
    AuditEntryResponse,
    AuditSummaryResponse,
    AuditTrailResponse,
    LineageEntryResponse,
    LineageResponse,
    RuleLineageResponse,
)
from compliance_dashboard.api.schemas.common import Pagination
from compliance_dashboard.api.schemas.context_document import (
    ContextDocumentCreate,
    ContextDocumentDetail,
    ContextDocumentListResponse,
    ContextDocumentUpdate,
)
from compliance_dashboard.api.schemas.dashboard import DashboardSummaryResponse
from compliance_dashboard.api.schemas.evaluation_metric import (
    EvaluationMetricCreate,
    EvaluationMetricDetail,
    EvaluationMetricListResponse,
    EvaluationSummaryResponse,
)
from compliance_dashboard.api.schemas.generation import (
    CodeArtifactDetail,
    CodeArtifactListResponse,
    CodeGenerationRequest,
    CodeGenerationResponse,
    TestGenerationRequest,
    TestGenerationResponse,
    TestSuiteDetail,
    TestSuiteListResponse,
)
from compliance_dashboard.api.schemas.governance_rule import (
    GovernanceRuleCreate,
    GovernanceRuleDetail,
    GovernanceRuleListResponse,
    GovernanceRuleUpdate,
)
from compliance_dashboard.api.schemas.pipeline_run import (
    PipelineRunDetail,
    PipelineRunListResponse,
    PipelineRunRequest,
    PipelineStatusUpdate,
)

__all__ = [
    "AuditEntryResponse",
    "AuditSummaryResponse",
    "AuditTrailResponse",
    "CodeArtifactDetail",
    "CodeArtifactListResponse",
    "CodeGenerationRequest",
    "CodeGenerationResponse",
    "ContextDocumentCreate",
    "ContextDocumentDetail",
    "ContextDocumentListResponse",
    "ContextDocumentUpdate",
    "DashboardSummaryResponse",
    "EvaluationMetricCreate",
    "EvaluationMetricDetail",
    "EvaluationMetricListResponse",
    "EvaluationSummaryResponse",
    "GovernanceRuleCreate",
    "GovernanceRuleDetail",
    "GovernanceRuleListResponse",
    "GovernanceRuleUpdate",
    "LineageEntryResponse",
    "LineageResponse",
    "Pagination",
    "PipelineRunDetail",
    "PipelineRunListResponse",
    "PipelineRunRequest",
    "PipelineStatusUpdate",
    "RuleLineageResponse",
    "TestGenerationRequest",
    "TestGenerationResponse",
    "TestSuiteDetail",
    "TestSuiteListResponse",
]

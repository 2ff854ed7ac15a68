"""SQLAlchemy models for the compliance dashboard."""

from compliance_dashboard.models.base import Base, DashboardBase, SCHEMA
from compliance_dashboard.models.audit_entry import AuditAction, AuditEntry
from compliance_dashboard.models.code_artifact import ArtifactStatus, CodeArtifact
from compliance_dashboard.models.context_document import ContextDocument, ContextDocumentType
from compliance_dashboard.models.evaluation_metric import (
    MAX_SCORE,
    MIN_SCORE,
    EvaluationMetric,
    MetricType,
)
from compliance_dashboard.models.governance_rule import GovernanceRule, RulePriority, RuleStatus
from compliance_dashboard.models.pipeline_run import PipelineRun, PipelineStatus
from compliance_dashboard.models.test_suite import TestFramework, TestSuite, TestSuiteStatus

__all__ = [
    "Base",
    "DashboardBase",
    "SCHEMA",
    "ArtifactStatus",
    "AuditAction",
    "AuditEntry",
    "CodeArtifact",
    "ContextDocument",
    "ContextDocumentType",
    "EvaluationMetric",
    "GovernanceRule",
    "MAX_SCORE",
    "MIN_SCORE",
    "MetricType",
    "PipelineRun",
    "PipelineStatus",
    "RulePriority",
    "RuleStatus",
    "TestFramework",
    "TestSuite",
    "TestSuiteStatus",
]

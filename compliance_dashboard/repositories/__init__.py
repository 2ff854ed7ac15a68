"""Repository layer for data access."""

from compliance_dashboard.repositories.audit_entry import AuditEntryRepository
from compliance_dashboard.repositories.base import AppendOnlyRepository, MutableRepository
from compliance_dashboard.repositories.code_artifact import CodeArtifactRepository
from compliance_dashboard.repositories.context_document import ContextDocumentRepository
from compliance_dashboard.repositories.evaluation_metric import EvaluationMetricRepository
from compliance_dashboard.repositories.governance_rule import GovernanceRuleRepository
from compliance_dashboard.repositories.pipeline_run import PipelineRunRepository
from compliance_dashboard.repositories.test_suite import TestSuiteRepository

__all__ = [
    "AppendOnlyRepository",
    "AuditEntryRepository",
    "CodeArtifactRepository",
    "ContextDocumentRepository",
    "EvaluationMetricRepository",
    "GovernanceRuleRepository",
    "MutableRepository",
    "PipelineRunRepository",
    "TestSuiteRepository",
]

"""API routers for the compliance governance dashboard."""

from compliance_dashboard.api.routers import (
    audit,
    code_artifacts,
    context_documents,
    dashboard,
    evaluation_metrics,
    governance_rules,
    health,
    pipeline_runs,
    test_suites,
)

__all__ = [
    "audit",
    "code_artifacts",
    "context_documents",
    "dashboard",
    "evaluation_metrics",
    "governance_rules",
    "health",
    "pipeline_runs",
    "test_suites",
]

"""Initial schema for the compliance governance dashboard.

Revision ID: 0001
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Schema name
SCHEMA = "govdash"


def upgrade() -> None:
    op.execute(f"CREATE SCHEMA IF NOT EXISTS {SCHEMA}")

    # No foreign keys: rule deletion does not cascade

    op.create_table(
        "governance_rules",
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("rule_id", sa.String(100), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("statement", sa.Text(), nullable=False),
        sa.Column("source_of_truth", sa.Text(), nullable=False),
        sa.Column("category", sa.String(100), nullable=False),
        sa.Column("priority", sa.String(20), nullable=False),
        sa.Column("status", sa.String(20), server_default="draft", nullable=False),
        sa.Column("created_by", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        schema=SCHEMA,
    )

    op.create_table(
        "context_documents",
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("type", sa.String(50), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("meta", postgresql.JSONB(), server_default="{}", nullable=False),
        sa.Column("tags", postgresql.JSONB(), server_default="[]", nullable=False),
        sa.Column("created_by", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        schema=SCHEMA,
    )

    op.create_table(
        "code_artifacts",
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("governance_rule_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("language", sa.String(50), server_default="csharp", nullable=False),
        sa.Column("class_name", sa.String(255), nullable=False),
        sa.Column("code", sa.Text(), nullable=False),
        sa.Column("generation_prompt", sa.Text(), nullable=False),
        sa.Column("context_used", postgresql.JSONB(), server_default="[]", nullable=False),
        sa.Column("status", sa.String(20), server_default="generated", nullable=False),
        sa.Column("generated_by", sa.Integer(), nullable=False),
        sa.Column("generated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        schema=SCHEMA,
    )

    op.create_table(
        "test_suites",
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("code_artifact_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("governance_rule_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("framework", sa.String(20), server_default="xunit", nullable=False),
        sa.Column("test_code", sa.Text(), nullable=False),
        sa.Column("test_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("generation_prompt", sa.Text(), nullable=False),
        sa.Column("status", sa.String(20), server_default="generated", nullable=False),
        sa.Column("generated_by", sa.Integer(), nullable=False),
        sa.Column("generated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        schema=SCHEMA,
    )

    op.create_table(
        "pipeline_runs",
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("code_artifact_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("test_suite_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("governance_rule_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("run_number", sa.Integer(), nullable=False),
        sa.Column("status", sa.String(20), server_default="pending", nullable=False),
        sa.Column("stages", postgresql.JSONB(), server_default="[]", nullable=False),
        sa.Column("compliance_gate_passed", sa.Boolean(), server_default="false", nullable=False),
        sa.Column("test_results", postgresql.JSONB(), server_default="{}", nullable=False),
        sa.Column("triggered_by", sa.Integer(), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        schema=SCHEMA,
    )

    op.create_table(
        "evaluation_metrics",
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("governance_rule_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("code_artifact_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("test_suite_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("metric_type", sa.String(50), nullable=False),
        sa.Column("score", sa.Integer(), nullable=False),
        sa.Column("details", postgresql.JSONB(), server_default="{}", nullable=False),
        sa.Column("evaluated_by", sa.String(255), nullable=False),
        sa.Column("evaluated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("score >= 0 AND score <= 100", name="ck_evaluation_metrics_score_range"),
        schema=SCHEMA,
    )

    op.create_table(
        "audit_trail",
        sa.Column("id", postgresql.UUID(as_uuid=True), server_default=sa.text("gen_random_uuid()"), nullable=False),
        sa.Column("governance_rule_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("code_artifact_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("test_suite_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("pipeline_run_id", postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column("action", sa.String(100), nullable=False),
        sa.Column("actor", sa.Integer(), nullable=False),
        sa.Column("details", postgresql.JSONB(), server_default="{}", nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        schema=SCHEMA,
    )

    # Indexes
    op.create_index("ix_governance_rules_rule_id", "governance_rules", ["rule_id"], unique=True, schema=SCHEMA)
    op.create_index("ix_governance_rules_category", "governance_rules", ["category"], schema=SCHEMA)
    op.create_index("ix_governance_rules_priority", "governance_rules", ["priority"], schema=SCHEMA)
    op.create_index("ix_governance_rules_status", "governance_rules", ["status"], schema=SCHEMA)
    op.create_index("ix_governance_rules_created_at", "governance_rules", ["created_at"], schema=SCHEMA)

    op.create_index("ix_context_documents_type", "context_documents", ["type"], schema=SCHEMA)
    op.create_index("ix_context_documents_created_at", "context_documents", ["created_at"], schema=SCHEMA)
    op.create_index("idx_context_documents_tags", "context_documents", ["tags"], schema=SCHEMA, postgresql_using="gin")

    op.create_index("ix_code_artifacts_governance_rule_id", "code_artifacts", ["governance_rule_id"], schema=SCHEMA)
    op.create_index("ix_code_artifacts_generated_at", "code_artifacts", ["generated_at"], schema=SCHEMA)

    op.create_index("ix_test_suites_code_artifact_id", "test_suites", ["code_artifact_id"], schema=SCHEMA)
    op.create_index("ix_test_suites_governance_rule_id", "test_suites", ["governance_rule_id"], schema=SCHEMA)
    op.create_index("ix_test_suites_generated_at", "test_suites", ["generated_at"], schema=SCHEMA)

    op.create_index("ix_pipeline_runs_code_artifact_id", "pipeline_runs", ["code_artifact_id"], schema=SCHEMA)
    op.create_index("ix_pipeline_runs_test_suite_id", "pipeline_runs", ["test_suite_id"], schema=SCHEMA)
    op.create_index("ix_pipeline_runs_governance_rule_id", "pipeline_runs", ["governance_rule_id"], schema=SCHEMA)
    op.create_index("ix_pipeline_runs_status", "pipeline_runs", ["status"], schema=SCHEMA)
    op.create_index("ix_pipeline_runs_started_at", "pipeline_runs", ["started_at"], schema=SCHEMA)

    op.create_index("ix_evaluation_metrics_governance_rule_id", "evaluation_metrics", ["governance_rule_id"], schema=SCHEMA)
    op.create_index("ix_evaluation_metrics_metric_type", "evaluation_metrics", ["metric_type"], schema=SCHEMA)
    op.create_index("ix_evaluation_metrics_evaluated_at", "evaluation_metrics", ["evaluated_at"], schema=SCHEMA)

    op.create_index("ix_audit_trail_governance_rule_id", "audit_trail", ["governance_rule_id"], schema=SCHEMA)
    op.create_index("ix_audit_trail_action", "audit_trail", ["action"], schema=SCHEMA)
    op.create_index("ix_audit_trail_timestamp", "audit_trail", ["timestamp"], schema=SCHEMA)


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_table("audit_trail", schema=SCHEMA)
    op.drop_table("evaluation_metrics", schema=SCHEMA)
    op.drop_table("pipeline_runs", schema=SCHEMA)
    op.drop_table("test_suites", schema=SCHEMA)
    op.drop_table("code_artifacts", schema=SCHEMA)
    op.drop_table("context_documents", schema=SCHEMA)
    op.drop_table("governance_rules", schema=SCHEMA)

    op.execute(f"DROP SCHEMA {SCHEMA}")

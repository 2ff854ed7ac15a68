"""Tests for the audit recorder."""

from uuid import uuid4

import pytest
from prometheus_client import REGISTRY

from compliance_dashboard.models.audit_entry import AuditAction
from compliance_dashboard.repositories import AuditEntryRepository
from compliance_dashboard.services.audit import AuditRecorder


class TestAuditRecorder:
    """Tests for AuditRecorder.record."""

    @pytest.mark.asyncio
    async def test_appends_entry(self, test_session):
        rule_id = uuid4()
        artifact_id = uuid4()

        entry = await AuditRecorder(test_session).record(
            governance_rule_id=rule_id,
            action=AuditAction.CODE_GENERATED,
            actor=9,
            details={"className": "Guard"},
            code_artifact_id=artifact_id,
        )

        assert entry.id is not None
        assert entry.action == "code_generated"
        assert entry.actor == 9
        assert entry.code_artifact_id == artifact_id
        assert entry.test_suite_id is None
        assert entry.pipeline_run_id is None
        assert entry.timestamp is not None

    @pytest.mark.asyncio
    async def test_free_form_action_and_default_details(self, test_session):
        entry = await AuditRecorder(test_session).record(
            governance_rule_id=uuid4(),
            action="manual_review",
            actor=1,
        )

        assert entry.action == "manual_review"
        assert entry.details == {}

    @pytest.mark.asyncio
    async def test_entries_are_flushed_not_committed(self, test_session):
        rule_id = uuid4()
        await AuditRecorder(test_session).record(governance_rule_id=rule_id, action="rule_created", actor=1)
        assert len(await AuditEntryRepository(test_session).get_by_rule(rule_id)) == 1

        await test_session.rollback()

        assert await AuditEntryRepository(test_session).get_by_rule(rule_id) == []

    @pytest.mark.asyncio
    async def test_counts_metric(self, test_session):
        labels = {"action": "evaluation_recorded"}
        before = REGISTRY.get_sample_value("govdash_audit_entries_total", labels) or 0.0

        await AuditRecorder(test_session).record(
            governance_rule_id=uuid4(),
            action=AuditAction.EVALUATION_RECORDED,
            actor=1,
        )

        after = REGISTRY.get_sample_value("govdash_audit_entries_total", labels)
        assert after == before + 1

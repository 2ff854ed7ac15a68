"""Tests for governance rule and context document services."""

from uuid import uuid4

import pytest

from compliance_dashboard.repositories import (
    AuditEntryRepository,
    CodeArtifactRepository,
    ContextDocumentRepository,
    GovernanceRuleRepository,
)
from compliance_dashboard.services.errors import (
    DuplicateRuleError,
    EntityNotFoundError,
    RuleCatalogError,
)
from compliance_dashboard.services.generation import GenerationService
from compliance_dashboard.services.governance import (
    ContextDocumentService,
    GovernanceRuleService,
    parse_rule_catalog,
)

CATALOG_YAML = """
rules:
  - rule_id: CP-PRIV-001
    title: "Mask PII in logs"
    statement: "Customer PII must never be logged in clear text."
    source_of_truth: "GDPR Art. 32"
    category: privacy
    priority: high
    status: active
  - rule_id: CP-SEC-002
    title: "Rotate credentials"
    statement: "Service credentials rotate every 90 days."
    source_of_truth: "SOC 2 CC6.1"
    category: security
    priority: medium
"""


class TestParseRuleCatalog:
    """Tests for YAML catalog parsing."""

    def test_parses_rules_with_defaults(self):
        definitions = parse_rule_catalog(CATALOG_YAML)

        assert [d.rule_id for d in definitions] == ["CP-PRIV-001", "CP-SEC-002"]
        assert definitions[0].priority == "high"
        assert definitions[0].status == "active"
        assert definitions[1].priority == "medium"
        assert definitions[1].status == "draft"

    def test_missing_priority(self):
        content = CATALOG_YAML.replace("    priority: medium\n", "")
        with pytest.raises(RuleCatalogError, match="CP-SEC-002: missing required field .priority."):
            parse_rule_catalog(content)

    def test_invalid_yaml(self):
        with pytest.raises(RuleCatalogError, match="Invalid YAML"):
            parse_rule_catalog("rules: [unclosed")

    def test_missing_rules_key(self):
        with pytest.raises(RuleCatalogError, match="'rules' key"):
            parse_rule_catalog("policies: []")

    def test_missing_required_field(self):
        content = "rules:\n  - rule_id: CP-X\n    title: T\n    statement: S\n    category: c\n"
        with pytest.raises(RuleCatalogError, match="source_of_truth"):
            parse_rule_catalog(content)

    def test_invalid_priority(self):
        content = CATALOG_YAML.replace("priority: high", "priority: urgent")
        with pytest.raises(RuleCatalogError, match="invalid priority 'urgent'"):
            parse_rule_catalog(content)

    def test_duplicate_rule_id(self):
        content = CATALOG_YAML.replace("CP-SEC-002", "CP-PRIV-001")
        with pytest.raises(RuleCatalogError, match="duplicated"):
            parse_rule_catalog(content)


class TestGovernanceRuleService:
    """Tests for GovernanceRuleService."""

    @pytest.mark.asyncio
    async def test_create_records_rule_created(self, test_session, sample_rule_data):
        rule = await GovernanceRuleService(test_session).create(actor=5, **sample_rule_data)

        assert rule.rule_id == "CP-CDG-PII-001"
        assert rule.priority == "high"
        assert rule.created_by == 5

        entries = await AuditEntryRepository(test_session).get_by_rule(rule.id)
        assert len(entries) == 1
        assert entries[0].action == "rule_created"
        assert entries[0].actor == 5
        assert entries[0].details == {"ruleId": "CP-CDG-PII-001", "title": "Mask customer PII in logs"}

    @pytest.mark.asyncio
    async def test_create_defaults_status_to_draft(self, test_session):
        rule = await GovernanceRuleService(test_session).create(
            actor=1,
            rule_id="CP-DEF-001",
            title="Defaults",
            statement="Statement",
            source_of_truth="Policy",
            category="general",
            priority="low",
        )
        assert rule.priority == "low"
        assert rule.status == "draft"

    @pytest.mark.asyncio
    async def test_duplicate_rule_id(self, test_session, governance_rule, sample_rule_data):
        with pytest.raises(DuplicateRuleError) as exc_info:
            await GovernanceRuleService(test_session).create(actor=1, **sample_rule_data)

        assert exc_info.value.rule_id == "CP-CDG-PII-001"
        assert await GovernanceRuleRepository(test_session).count() == 1

    @pytest.mark.asyncio
    async def test_update_records_changed_fields(self, test_session, governance_rule):
        service = GovernanceRuleService(test_session)

        rule = await service.update(governance_rule.id, actor=2, status="archived", title=None)

        assert rule.status == "archived"
        assert rule.title == "Mask customer PII in logs"
        entries = await AuditEntryRepository(test_session).get_by_rule(rule.id)
        assert entries[0].action == "rule_updated"
        assert entries[0].details == {"status": "archived"}

    @pytest.mark.asyncio
    async def test_update_rejects_rule_code_change(self, test_session, governance_rule):
        with pytest.raises(ValueError, match="rule_id"):
            await GovernanceRuleService(test_session).update(governance_rule.id, actor=1, rule_id="NEW")

    @pytest.mark.asyncio
    async def test_update_missing_rule(self, test_session):
        with pytest.raises(EntityNotFoundError):
            await GovernanceRuleService(test_session).update(uuid4(), actor=1, title="x")

    @pytest.mark.asyncio
    async def test_delete_keeps_dependents(self, test_session, governance_rule, fake_generator):
        code = await GenerationService(test_session, fake_generator).generate_code(governance_rule.id, actor=1)
        await test_session.commit()

        await GovernanceRuleService(test_session).delete(governance_rule.id, actor=3)
        await test_session.commit()

        assert await GovernanceRuleRepository(test_session).get_by_id(governance_rule.id) is None
        assert await CodeArtifactRepository(test_session).get_by_id(code.artifact.id) is not None
        entries = await AuditEntryRepository(test_session).get_by_rule(governance_rule.id)
        assert [e.action for e in entries] == ["rule_deleted", "code_generated", "rule_created"]
        assert entries[0].details == {"ruleId": "CP-CDG-PII-001"}

    @pytest.mark.asyncio
    async def test_import_catalog_skips_existing(self, test_session):
        service = GovernanceRuleService(test_session)

        first = await service.import_catalog(CATALOG_YAML, actor=1)
        second = await service.import_catalog(CATALOG_YAML, actor=1)

        assert [r.rule_id for r in first.created] == ["CP-PRIV-001", "CP-SEC-002"]
        assert second.created == []
        assert second.skipped == ["CP-PRIV-001", "CP-SEC-002"]
        audit = await AuditEntryRepository(test_session).list_all()
        assert [e.action for e in audit].count("rule_created") == 2

    @pytest.mark.asyncio
    async def test_import_catalog_file(self, test_session, tmp_path):
        catalog = tmp_path / "rules.yaml"
        catalog.write_text(CATALOG_YAML)

        result = await GovernanceRuleService(test_session).import_catalog_file(str(catalog), actor=1)
        assert len(result.created) == 2

    @pytest.mark.asyncio
    async def test_import_catalog_file_missing(self, test_session, tmp_path):
        with pytest.raises(FileNotFoundError):
            await GovernanceRuleService(test_session).import_catalog_file(str(tmp_path / "nope.yaml"), actor=1)


class TestContextDocumentService:
    """Tests for ContextDocumentService."""

    @pytest.mark.asyncio
    async def test_create_keeps_tags_order_and_metadata(self, test_session, sample_document_data):
        document = await ContextDocumentService(test_session).create(actor=1, **sample_document_data)

        assert document.type == "adr"
        assert document.tags == ["logging", "privacy"]
        assert document.meta == {"owner": "platform-team"}

    @pytest.mark.asyncio
    async def test_documents_are_not_audited(self, test_session, sample_document_data):
        await ContextDocumentService(test_session).create(actor=1, **sample_document_data)
        assert await AuditEntryRepository(test_session).count() == 0

    @pytest.mark.asyncio
    async def test_partial_update(self, test_session, sample_document_data):
        service = ContextDocumentService(test_session)
        document = await service.create(actor=1, **sample_document_data)

        updated = await service.update(document.id, actor=1, tags=["privacy"])

        assert updated.tags == ["privacy"]
        assert updated.title == sample_document_data["title"]

    @pytest.mark.asyncio
    async def test_delete(self, test_session, sample_document_data):
        service = ContextDocumentService(test_session)
        document = await service.create(actor=1, **sample_document_data)

        await service.delete(document.id, actor=1)

        assert await ContextDocumentRepository(test_session).get_by_id(document.id) is None
        with pytest.raises(EntityNotFoundError):
            await service.get(document.id)

    @pytest.mark.asyncio
    async def test_list_filtered_by_tag(self, test_session, sample_document_data):
        service = ContextDocumentService(test_session)
        await service.create(actor=1, **sample_document_data)
        await service.create(actor=1, title="Other", type="best_practice", content="c", tags=["naming"])

        repo = ContextDocumentRepository(test_session)
        by_tag, total = await repo.list_filtered(tag="privacy")
        by_type, type_total = await repo.list_filtered(type="best_practice")

        assert total == 1 and by_tag[0].title == sample_document_data["title"]
        assert type_total == 1 and by_type[0].title == "Other"

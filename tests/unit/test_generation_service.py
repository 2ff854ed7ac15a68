"""Tests for the code and test generation orchestrator."""

from uuid import uuid4

import pytest

from compliance_dashboard.models.audit_entry import AuditAction
from compliance_dashboard.models.governance_rule import GovernanceRule
from compliance_dashboard.models.test_suite import TestFramework
from compliance_dashboard.repositories import (
    AuditEntryRepository,
    CodeArtifactRepository,
    TestSuiteRepository,
)
from compliance_dashboard.services.errors import EntityNotFoundError, GenerationFailedError
from compliance_dashboard.services.generation import (
    CODE_SYSTEM_PROMPT,
    GENERATION_LANGUAGE,
    GenerationService,
    build_code_prompt,
    build_test_prompt,
    format_context,
)
from compliance_dashboard.services.governance import ContextDocumentService


def _rule(**overrides) -> GovernanceRule:
    values = {
        "rule_id": "CP-SEC-001",
        "title": "Encrypt secrets at rest",
        "statement": "Secrets must be encrypted at rest.",
        "source_of_truth": "ISO 27001 A.10",
        "category": "security",
        "priority": "high",
        "created_by": 1,
    }
    values.update(overrides)
    return GovernanceRule(**values)


class TestPromptBuilding:
    """Tests for the prompt builders."""

    def test_code_prompt_contains_rule_fields(self):
        prompt = build_code_prompt(_rule())
        assert "ID: CP-SEC-001" in prompt
        assert "Title: Encrypt secrets at rest" in prompt
        assert "Statement: Secrets must be encrypted at rest." in prompt
        assert "Source: ISO 27001 A.10" in prompt
        assert "Additional Context" not in prompt
        assert prompt.endswith("Return ONLY the C# code, no explanations.")

    def test_code_prompt_includes_context_documents_in_order(self):
        from compliance_dashboard.models.context_document import ContextDocument

        first = ContextDocument(title="First", type="adr", content="one", created_by=1)
        second = ContextDocument(title="Second", type="adr", content="two", created_by=1)

        prompt = build_code_prompt(_rule(), [first, second])

        assert "Additional Context:\nFirst:\none\n\nSecond:\ntwo\n" in prompt
        assert prompt.index("First:") < prompt.index("Second:")

    def test_format_context_empty(self):
        assert format_context([]) == ""

    def test_test_prompt_mentions_framework_and_code(self):
        from compliance_dashboard.models.code_artifact import CodeArtifact

        artifact = CodeArtifact(code="public class Vault {}", class_name="Vault", generation_prompt="p")
        prompt = build_test_prompt(_rule(), artifact, "nunit")

        assert "Secrets must be encrypted at rest." in prompt
        assert "```csharp\npublic class Vault {}\n```" in prompt
        assert "comprehensive nunit test suite" in prompt
        assert "proper nunit attributes" in prompt

    def test_prompts_are_deterministic(self):
        rule = _rule()
        assert build_code_prompt(rule) == build_code_prompt(rule)


class TestGenerateCode:
    """Tests for GenerationService.generate_code."""

    @pytest.mark.asyncio
    async def test_creates_artifact_and_audit_entry(self, test_session, governance_rule, fake_generator):
        service = GenerationService(test_session, fake_generator)

        result = await service.generate_code(governance_rule.id, actor=7)
        await test_session.commit()

        artifact = result.artifact
        assert artifact.governance_rule_id == governance_rule.id
        assert artifact.language == GENERATION_LANGUAGE == "csharp"
        assert artifact.class_name == "PiiMaskingGovernor"
        assert artifact.code == fake_generator.code
        assert artifact.status == "generated"
        assert artifact.generated_by == 7
        assert artifact.context_used == []
        assert "CP-CDG-PII-001" in artifact.generation_prompt

        entry = result.audit_entry
        assert entry.action == AuditAction.CODE_GENERATED.value
        assert entry.code_artifact_id == artifact.id
        assert entry.governance_rule_id == governance_rule.id
        assert entry.actor == 7
        assert entry.details == {"className": "PiiMaskingGovernor"}

    @pytest.mark.asyncio
    async def test_single_model_call_with_system_prompt(self, test_session, governance_rule, fake_generator):
        await GenerationService(test_session, fake_generator).generate_code(governance_rule.id, actor=1)

        assert len(fake_generator.calls) == 1
        system, user = fake_generator.calls[0]
        assert system.role == "system"
        assert system.content == CODE_SYSTEM_PROMPT
        assert user.role == "user"

    @pytest.mark.asyncio
    async def test_unknown_context_documents_are_skipped(
        self, test_session, governance_rule, fake_generator, sample_document_data
    ):
        document = await ContextDocumentService(test_session).create(actor=1, **sample_document_data)
        unknown = uuid4()

        result = await GenerationService(test_session, fake_generator).generate_code(
            governance_rule.id,
            actor=1,
            context_document_ids=[unknown, document.id, document.id],
        )

        assert result.artifact.context_used == [str(document.id)]
        assert "ADR-012 Logging utilities:" in result.artifact.generation_prompt

    @pytest.mark.asyncio
    async def test_fallback_class_name(self, test_session, governance_rule, fake_generator):
        generator = type(fake_generator)(code="// nothing to see here")
        result = await GenerationService(test_session, generator).generate_code(governance_rule.id, actor=1)
        assert result.class_name == "ComplianceGovernor"

    @pytest.mark.asyncio
    async def test_missing_rule_writes_nothing(self, test_session, fake_generator):
        service = GenerationService(test_session, fake_generator)

        with pytest.raises(EntityNotFoundError):
            await service.generate_code(uuid4(), actor=1)

        assert fake_generator.calls == []
        assert await CodeArtifactRepository(test_session).count() == 0
        assert await AuditEntryRepository(test_session).count() == 0

    @pytest.mark.asyncio
    async def test_model_failure_writes_nothing(self, test_session, governance_rule, failing_generator):
        audit_before = await AuditEntryRepository(test_session).count()

        with pytest.raises(GenerationFailedError) as exc_info:
            await GenerationService(test_session, failing_generator).generate_code(governance_rule.id, actor=1)

        assert exc_info.value.kind == "code"
        assert "upstream unavailable" in exc_info.value.reason
        assert failing_generator.calls == 1
        assert await CodeArtifactRepository(test_session).count() == 0
        assert await AuditEntryRepository(test_session).count() == audit_before

    @pytest.mark.asyncio
    async def test_empty_reply_is_a_failure(self, test_session, governance_rule, empty_generator):
        with pytest.raises(GenerationFailedError):
            await GenerationService(test_session, empty_generator).generate_code(governance_rule.id, actor=1)
        assert await CodeArtifactRepository(test_session).count() == 0


class TestGenerateTests:
    """Tests for GenerationService.generate_tests."""

    @pytest.mark.asyncio
    async def test_creates_suite_and_audit_entry(self, test_session, governance_rule, fake_generator):
        service = GenerationService(test_session, fake_generator)
        code = await service.generate_code(governance_rule.id, actor=1)

        result = await service.generate_tests(code.artifact.id, actor=2)

        suite = result.suite
        assert suite.code_artifact_id == code.artifact.id
        assert suite.governance_rule_id == governance_rule.id
        assert suite.framework == "xunit"
        assert suite.test_count == 3
        assert suite.status == "generated"
        assert suite.generated_by == 2

        entry = result.audit_entry
        assert entry.action == "tests_generated"
        assert entry.test_suite_id == suite.id
        assert entry.code_artifact_id == code.artifact.id
        assert entry.details == {"framework": "xunit", "testCount": 3}

    @pytest.mark.asyncio
    async def test_nunit_framework(self, test_session, governance_rule, fake_generator):
        service = GenerationService(test_session, fake_generator)
        code = await service.generate_code(governance_rule.id, actor=1)

        result = await service.generate_tests(code.artifact.id, actor=1, framework=TestFramework.NUNIT)

        assert result.suite.framework == "nunit"
        system, _ = fake_generator.calls[-1]
        assert system.content == "You are an expert C# test engineer specializing in nunit."

    @pytest.mark.asyncio
    async def test_missing_artifact(self, test_session, fake_generator):
        with pytest.raises(EntityNotFoundError) as exc_info:
            await GenerationService(test_session, fake_generator).generate_tests(uuid4(), actor=1)

        assert exc_info.value.entity_type == "CodeArtifact"
        assert await TestSuiteRepository(test_session).count() == 0

    @pytest.mark.asyncio
    async def test_unknown_framework_rejected(self, test_session, fake_generator):
        with pytest.raises(ValueError):
            await GenerationService(test_session, fake_generator).generate_tests(uuid4(), actor=1, framework="mstest")

    @pytest.mark.asyncio
    async def test_model_failure_writes_no_suite(self, test_session, governance_rule, fake_generator, failing_generator):
        code = await GenerationService(test_session, fake_generator).generate_code(governance_rule.id, actor=1)
        await test_session.commit()

        with pytest.raises(GenerationFailedError) as exc_info:
            await GenerationService(test_session, failing_generator).generate_tests(code.artifact.id, actor=1)

        assert exc_info.value.kind == "tests"
        assert await TestSuiteRepository(test_session).count() == 0

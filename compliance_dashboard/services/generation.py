"""Code and test generation orchestrator.

Each operation resolves its inputs, builds a deterministic prompt, makes
exactly one language model call and then writes one entity row followed by
one audit entry. Nothing is written until the model has answered with
non-empty text, so a failed generation leaves no artifact, suite or audit
entry behind.
"""

from dataclasses import dataclass
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from compliance_dashboard.llm.client import ChatMessage, TextGenerator
from compliance_dashboard.logging_config import get_logger
from compliance_dashboard.metrics import track_generation
from compliance_dashboard.models.audit_entry import AuditAction, AuditEntry
from compliance_dashboard.models.code_artifact import ArtifactStatus, CodeArtifact
from compliance_dashboard.models.context_document import ContextDocument
from compliance_dashboard.models.governance_rule import GovernanceRule
from compliance_dashboard.models.test_suite import TestFramework, TestSuite, TestSuiteStatus
from compliance_dashboard.repositories.code_artifact import CodeArtifactRepository
from compliance_dashboard.repositories.context_document import ContextDocumentRepository
from compliance_dashboard.repositories.governance_rule import GovernanceRuleRepository
from compliance_dashboard.repositories.test_suite import TestSuiteRepository
from compliance_dashboard.services.audit import AuditRecorder
from compliance_dashboard.services.errors import EntityNotFoundError, GenerationFailedError
from compliance_dashboard.services.extraction import count_test_annotations, extract_class_name
from compliance_dashboard.tracing import SpanAttributes, create_span

logger = get_logger(__name__)

GENERATION_LANGUAGE = "csharp"

CODE_SYSTEM_PROMPT = "You are an expert C# developer. Generate clean, production-ready code."

CODE_PROMPT_TEMPLATE = """You are an expert C# developer specializing in compliance-by-design patterns.

Governance Rule:
ID: {rule_id}
Title: {title}
Statement: {statement}
Source: {source_of_truth}

{context_block}

Generate production-ready C# code that enforces this governance rule. The code should:
1. Be a complete, compilable C# class
2. Follow best practices and ADR-approved patterns
3. Include proper error handling
4. Use approved internal utilities where applicable
5. Include XML documentation comments

Return ONLY the C# code, no explanations."""

TEST_SYSTEM_PROMPT_TEMPLATE = "You are an expert C# test engineer specializing in {framework}."

TEST_PROMPT_TEMPLATE = """You are an expert in C# testing and compliance validation.

Governance Rule:
{statement}

Generated Code:
```csharp
{code}
```

Generate a comprehensive {framework} test suite that:
1. Tests that the governance rule is properly enforced
2. Includes positive test cases (compliance)
3. Includes negative test cases (violations should be caught)
4. Tests edge cases
5. Uses proper {framework} attributes and assertions
6. Is production-ready and compilable

Return ONLY the test code, no explanations."""


def format_context(documents: Sequence[ContextDocument]) -> str:
    """Join documents as ``title:\\ncontent`` blocks separated by blank lines."""
    return "\n\n".join(f"{doc.title}:\n{doc.content}" for doc in documents)


def build_code_prompt(rule: GovernanceRule, documents: Sequence[ContextDocument] = ()) -> str:
    """Build the user prompt for code generation."""
    context = format_context(documents)
    context_block = f"Additional Context:\n{context}\n" if context else ""
    return CODE_PROMPT_TEMPLATE.format(
        rule_id=rule.rule_id,
        title=rule.title,
        statement=rule.statement,
        source_of_truth=rule.source_of_truth,
        context_block=context_block,
    )


def build_test_prompt(rule: GovernanceRule, artifact: CodeArtifact, framework: str) -> str:
    """Build the user prompt for test generation."""
    return TEST_PROMPT_TEMPLATE.format(
        statement=rule.statement,
        code=artifact.code,
        framework=framework,
    )


@dataclass
class CodeGenerationResult:
    """Outcome of a code generation."""

    artifact: CodeArtifact
    audit_entry: AuditEntry

    @property
    def code(self) -> str:
        return self.artifact.code

    @property
    def class_name(self) -> str:
        return self.artifact.class_name


@dataclass
class TestGenerationResult:
    """Outcome of a test suite generation."""

    __test__ = False

    suite: TestSuite
    audit_entry: AuditEntry

    @property
    def test_code(self) -> str:
        return self.suite.test_code

    @property
    def test_count(self) -> int:
        return self.suite.test_count


class GenerationService:
    """Orchestrates language-model generation of enforcement code and tests."""

    def __init__(self, session: AsyncSession, generator: TextGenerator):
        self.session = session
        self.generator = generator
        self.rule_repo = GovernanceRuleRepository(session)
        self.document_repo = ContextDocumentRepository(session)
        self.artifact_repo = CodeArtifactRepository(session)
        self.suite_repo = TestSuiteRepository(session)
        self.audit = AuditRecorder(session)

    async def _resolve_context(self, document_ids: Sequence[UUID]) -> list[ContextDocument]:
        """Load context documents in request order, skipping unknown ids."""
        unique_ids = list(dict.fromkeys(document_ids))
        found = {doc.id: doc for doc in await self.document_repo.get_by_ids(unique_ids)}
        missing = [str(i) for i in unique_ids if i not in found]
        if missing:
            logger.debug("Skipping unknown context documents", document_ids=missing)
        return [found[i] for i in unique_ids if i in found]

    async def _complete(self, kind: str, system_prompt: str, prompt: str) -> str:
        messages = [
            ChatMessage(role="system", content=system_prompt),
            ChatMessage(role="user", content=prompt),
        ]
        try:
            text = await self.generator.generate(messages)
        except Exception as e:
            logger.warning("Generation call failed", kind=kind, error=str(e))
            raise GenerationFailedError(kind, str(e)) from e

        if not text or not text.strip():
            logger.warning("Generation returned empty content", kind=kind)
            raise GenerationFailedError(kind, "language model returned empty content")
        return text

    @track_generation("code")
    async def _complete_code(self, prompt: str) -> str:
        return await self._complete("code", CODE_SYSTEM_PROMPT, prompt)

    @track_generation("tests")
    async def _complete_tests(self, prompt: str, framework: str) -> str:
        system_prompt = TEST_SYSTEM_PROMPT_TEMPLATE.format(framework=framework)
        return await self._complete("tests", system_prompt, prompt)

    async def generate_code(
        self,
        governance_rule_id: UUID,
        actor: int,
        context_document_ids: Optional[Sequence[UUID]] = None,
    ) -> CodeGenerationResult:
        """Generate enforcement code for a rule.

        Raises:
            EntityNotFoundError: If the rule does not exist
            GenerationFailedError: If the model call fails or returns nothing
        """
        rule = await self.rule_repo.get_by_id(governance_rule_id)
        if not rule:
            raise EntityNotFoundError("GovernanceRule", governance_rule_id)

        documents = await self._resolve_context(context_document_ids or [])
        prompt = build_code_prompt(rule, documents)

        with create_span(
            "generation.code",
            attributes={
                SpanAttributes.GENERATION_KIND: "code",
                SpanAttributes.GOVERNANCE_RULE_ID: str(rule.id),
            },
        ) as span:
            code = await self._complete_code(prompt)
            class_name = extract_class_name(code)
            span.set_attribute(SpanAttributes.GENERATION_CLASS_NAME, class_name)

        artifact = await self.artifact_repo.create(
            CodeArtifact(
                governance_rule_id=rule.id,
                language=GENERATION_LANGUAGE,
                class_name=class_name,
                code=code,
                generation_prompt=prompt,
                context_used=[str(doc.id) for doc in documents],
                status=ArtifactStatus.GENERATED.value,
                generated_by=actor,
            )
        )
        entry = await self.audit.record(
            governance_rule_id=rule.id,
            code_artifact_id=artifact.id,
            action=AuditAction.CODE_GENERATED,
            actor=actor,
            details={"className": class_name},
        )

        logger.info(
            "Code generated",
            governance_rule_id=str(rule.id),
            code_artifact_id=str(artifact.id),
            class_name=class_name,
            context_documents=len(documents),
        )
        return CodeGenerationResult(artifact=artifact, audit_entry=entry)

    async def generate_tests(
        self,
        code_artifact_id: UUID,
        actor: int,
        framework: TestFramework | str = TestFramework.XUNIT,
    ) -> TestGenerationResult:
        """Generate a test suite for a code artifact.

        Raises:
            EntityNotFoundError: If the artifact or its rule does not exist
            GenerationFailedError: If the model call fails or returns nothing
        """
        framework_value = TestFramework(framework).value

        artifact = await self.artifact_repo.get_by_id(code_artifact_id)
        if not artifact:
            raise EntityNotFoundError("CodeArtifact", code_artifact_id)

        rule = await self.rule_repo.get_by_id(artifact.governance_rule_id)
        if not rule:
            raise EntityNotFoundError("GovernanceRule", artifact.governance_rule_id)

        prompt = build_test_prompt(rule, artifact, framework_value)

        with create_span(
            "generation.tests",
            attributes={
                SpanAttributes.GENERATION_KIND: "tests",
                SpanAttributes.CODE_ARTIFACT_ID: str(artifact.id),
            },
        ) as span:
            test_code = await self._complete_tests(prompt, framework_value)
            test_count = count_test_annotations(test_code)
            span.set_attribute(SpanAttributes.GENERATION_TEST_COUNT, test_count)

        suite = await self.suite_repo.create(
            TestSuite(
                code_artifact_id=artifact.id,
                governance_rule_id=artifact.governance_rule_id,
                framework=framework_value,
                test_code=test_code,
                test_count=test_count,
                generation_prompt=prompt,
                status=TestSuiteStatus.GENERATED.value,
                generated_by=actor,
            )
        )
        entry = await self.audit.record(
            governance_rule_id=artifact.governance_rule_id,
            code_artifact_id=artifact.id,
            test_suite_id=suite.id,
            action=AuditAction.TESTS_GENERATED,
            actor=actor,
            details={"framework": framework_value, "testCount": test_count},
        )

        logger.info(
            "Tests generated",
            code_artifact_id=str(artifact.id),
            test_suite_id=str(suite.id),
            framework=framework_value,
            test_count=test_count,
        )
        return TestGenerationResult(suite=suite, audit_entry=entry)

"""Pydantic schemas for generated code artifacts and test suites."""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from compliance_dashboard.api.schemas.common import Pagination, iso
from compliance_dashboard.models.code_artifact import CodeArtifact
from compliance_dashboard.models.test_suite import TestFramework, TestSuite


class CodeGenerationRequest(BaseModel):
    """Request to generate enforcement code for a rule."""

    governance_rule_id: UUID
    context_document_ids: list[UUID] = Field(
        default_factory=list,
        description="Context documents to include; unknown ids are skipped",
    )


class CodeGenerationResponse(BaseModel):
    """Result of a code generation."""

    id: str
    governance_rule_id: str
    class_name: str
    code: str
    context_used: list[str]


class CodeArtifactDetail(BaseModel):
    """Full view of a code artifact."""

    id: str
    governance_rule_id: str
    language: str
    class_name: str
    code: str
    generation_prompt: str
    context_used: list[str]
    status: str
    generated_by: int
    generated_at: str

    @classmethod
    def from_model(cls, artifact: CodeArtifact) -> "CodeArtifactDetail":
        return cls(
            id=str(artifact.id),
            governance_rule_id=str(artifact.governance_rule_id),
            language=artifact.language,
            class_name=artifact.class_name,
            code=artifact.code,
            generation_prompt=artifact.generation_prompt,
            context_used=list(artifact.context_used or []),
            status=artifact.status,
            generated_by=artifact.generated_by,
            generated_at=iso(artifact.generated_at),
        )


class CodeArtifactSummary(BaseModel):
    """Compact view used inside other responses."""

    id: str
    class_name: str
    language: str
    status: str
    generated_at: str

    @classmethod
    def from_model(cls, artifact: CodeArtifact) -> "CodeArtifactSummary":
        return cls(
            id=str(artifact.id),
            class_name=artifact.class_name,
            language=artifact.language,
            status=artifact.status,
            generated_at=iso(artifact.generated_at),
        )


class CodeArtifactListResponse(BaseModel):
    data: list[CodeArtifactDetail]
    pagination: Pagination


class TestGenerationRequest(BaseModel):
    """Request to generate a test suite for a code artifact."""

    __test__ = False

    code_artifact_id: UUID
    framework: Optional[TestFramework] = Field(None, description="xunit (default) or nunit")


class TestGenerationResponse(BaseModel):
    """Result of a test suite generation."""

    __test__ = False

    id: str
    code_artifact_id: str
    framework: str
    test_code: str
    test_count: int


class TestSuiteDetail(BaseModel):
    """Full view of a test suite."""

    __test__ = False

    id: str
    code_artifact_id: str
    governance_rule_id: str
    framework: str
    test_code: str
    test_count: int
    generation_prompt: str
    status: str
    generated_by: int
    generated_at: str

    @classmethod
    def from_model(cls, suite: TestSuite) -> "TestSuiteDetail":
        return cls(
            id=str(suite.id),
            code_artifact_id=str(suite.code_artifact_id),
            governance_rule_id=str(suite.governance_rule_id),
            framework=suite.framework,
            test_code=suite.test_code,
            test_count=suite.test_count,
            generation_prompt=suite.generation_prompt,
            status=suite.status,
            generated_by=suite.generated_by,
            generated_at=iso(suite.generated_at),
        )


class TestSuiteSummary(BaseModel):
    """Compact view used inside other responses."""

    __test__ = False

    id: str
    framework: str
    test_count: int
    status: str
    generated_at: str

    @classmethod
    def from_model(cls, suite: TestSuite) -> "TestSuiteSummary":
        return cls(
            id=str(suite.id),
            framework=suite.framework,
            test_count=suite.test_count,
            status=suite.status,
            generated_at=iso(suite.generated_at),
        )


class TestSuiteListResponse(BaseModel):
    __test__ = False

    data: list[TestSuiteDetail]
    pagination: Pagination

"""Code artifact endpoints, including LLM code generation."""

from uuid import UUID

from fastapi import APIRouter, Query, Request, Response, status

from compliance_dashboard.api.auth import CurrentActor
from compliance_dashboard.api.dependencies import TextGeneratorDep
from compliance_dashboard.api.exceptions import NotFoundError
from compliance_dashboard.api.rate_limit import expensive_limit
from compliance_dashboard.api.schemas.common import Pagination
from compliance_dashboard.api.schemas.generation import (
    CodeArtifactDetail,
    CodeArtifactListResponse,
    CodeGenerationRequest,
    CodeGenerationResponse,
)
from compliance_dashboard.database import DbSession
from compliance_dashboard.repositories import CodeArtifactRepository
from compliance_dashboard.services.generation import GenerationService

router = APIRouter(prefix="/code-artifacts", tags=["code-artifacts"])


@router.post("/generate", response_model=CodeGenerationResponse, status_code=status.HTTP_201_CREATED)
@expensive_limit()
async def generate_code(
    request: Request,
    response: Response,
    db: DbSession,
    actor: CurrentActor,
    generator: TextGeneratorDep,
    body: CodeGenerationRequest,
) -> CodeGenerationResponse:
    """Generate enforcement code for a governance rule.

    Context document ids that do not resolve are skipped. The artifact and
    its ``code_generated`` audit entry are committed together; a failed
    model call stores nothing.
    """
    result = await GenerationService(db, generator).generate_code(
        governance_rule_id=body.governance_rule_id,
        actor=actor,
        context_document_ids=body.context_document_ids,
    )
    await db.commit()

    artifact = result.artifact
    return CodeGenerationResponse(
        id=str(artifact.id),
        governance_rule_id=str(artifact.governance_rule_id),
        class_name=result.class_name,
        code=result.code,
        context_used=list(artifact.context_used or []),
    )


@router.get("", response_model=CodeArtifactListResponse)
async def list_code_artifacts(
    db: DbSession,
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
) -> CodeArtifactListResponse:
    """List code artifacts, most recently generated first."""
    repo = CodeArtifactRepository(db)
    artifacts = await repo.get_all(offset=offset, limit=limit)
    total = await repo.count()
    return CodeArtifactListResponse(
        data=[CodeArtifactDetail.from_model(a) for a in artifacts],
        pagination=Pagination.build(offset, limit, total),
    )


@router.get("/by-rule/{governance_rule_id}", response_model=list[CodeArtifactDetail])
async def list_code_artifacts_for_rule(
    db: DbSession,
    governance_rule_id: UUID,
) -> list[CodeArtifactDetail]:
    """Artifacts generated for one rule. Still served after the rule is deleted."""
    artifacts = await CodeArtifactRepository(db).get_by_rule(governance_rule_id)
    return [CodeArtifactDetail.from_model(a) for a in artifacts]


@router.get("/{artifact_id}", response_model=CodeArtifactDetail)
async def get_code_artifact(db: DbSession, artifact_id: UUID) -> CodeArtifactDetail:
    artifact = await CodeArtifactRepository(db).get_by_id(artifact_id)
    if not artifact:
        raise NotFoundError("CodeArtifact", str(artifact_id))
    return CodeArtifactDetail.from_model(artifact)

"""Test suite endpoints, including LLM test generation."""

from uuid import UUID

from fastapi import APIRouter, Query, Request, Response, status

from compliance_dashboard.api.auth import CurrentActor
from compliance_dashboard.api.dependencies import TextGeneratorDep
from compliance_dashboard.api.exceptions import NotFoundError
from compliance_dashboard.api.rate_limit import expensive_limit
from compliance_dashboard.api.schemas.common import Pagination
from compliance_dashboard.api.schemas.generation import (
    TestGenerationRequest,
    TestGenerationResponse,
    TestSuiteDetail,
    TestSuiteListResponse,
)
from compliance_dashboard.database import DbSession
from compliance_dashboard.models.test_suite import TestFramework
from compliance_dashboard.repositories import TestSuiteRepository
from compliance_dashboard.services.generation import GenerationService

router = APIRouter(prefix="/test-suites", tags=["test-suites"])


@router.post("/generate", response_model=TestGenerationResponse, status_code=status.HTTP_201_CREATED)
@expensive_limit()
async def generate_tests(
    request: Request,
    response: Response,
    db: DbSession,
    actor: CurrentActor,
    generator: TextGeneratorDep,
    body: TestGenerationRequest,
) -> TestGenerationResponse:
    """Generate a test suite for a code artifact (xunit unless told otherwise)."""
    result = await GenerationService(db, generator).generate_tests(
        code_artifact_id=body.code_artifact_id,
        actor=actor,
        framework=body.framework or TestFramework.XUNIT,
    )
    await db.commit()

    suite = result.suite
    return TestGenerationResponse(
        id=str(suite.id),
        code_artifact_id=str(suite.code_artifact_id),
        framework=suite.framework,
        test_code=result.test_code,
        test_count=result.test_count,
    )


@router.get("", response_model=TestSuiteListResponse)
async def list_test_suites(
    db: DbSession,
    offset: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
) -> TestSuiteListResponse:
    repo = TestSuiteRepository(db)
    suites = await repo.get_all(offset=offset, limit=limit)
    total = await repo.count()
    return TestSuiteListResponse(
        data=[TestSuiteDetail.from_model(s) for s in suites],
        pagination=Pagination.build(offset, limit, total),
    )


@router.get("/by-artifact/{code_artifact_id}", response_model=list[TestSuiteDetail])
async def list_test_suites_for_artifact(
    db: DbSession,
    code_artifact_id: UUID,
) -> list[TestSuiteDetail]:
    suites = await TestSuiteRepository(db).get_by_code_artifact(code_artifact_id)
    return [TestSuiteDetail.from_model(s) for s in suites]


@router.get("/{suite_id}", response_model=TestSuiteDetail)
async def get_test_suite(db: DbSession, suite_id: UUID) -> TestSuiteDetail:
    suite = await TestSuiteRepository(db).get_by_id(suite_id)
    if not suite:
        raise NotFoundError("TestSuite", str(suite_id))
    return TestSuiteDetail.from_model(suite)

"""Pytest configuration and fixtures."""

import os

# Must be set before the application modules read their settings
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"
os.environ["AUTH_ENABLED"] = "false"
os.environ["RATE_LIMIT_EXPENSIVE"] = "1000/minute"
os.environ["LOG_LEVEL"] = "WARNING"

from collections.abc import AsyncGenerator, Sequence
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from compliance_dashboard.api.dependencies import get_text_generator
from compliance_dashboard.api.main import app
from compliance_dashboard.config import Settings, get_settings
from compliance_dashboard.database import Base, get_db
from compliance_dashboard.llm.client import ChatMessage

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_API_KEY = "test-api-key-12345"
TEST_ACTOR_ID = 1

FAKE_CODE = """using System;
using System.Text.RegularExpressions;

namespace Compliance.Privacy
{
    /// <summary>Masks customer PII before it reaches the logs.</summary>
    public class PiiMaskingGovernor
    {
        public string Mask(string input) => Regex.Replace(input, @"\\d", "*");
    }
}
"""

FAKE_TESTS = """using Xunit;

public class PiiMaskingGovernorTests
{
    [Fact]
    public void Masks_digits() { }

    [Fact]
    public void Leaves_letters() { }

    [Fact]
    public void Handles_empty_input() { }
}
"""


class FakeTextGenerator:
    """Deterministic stand-in for the language model.

    Answers test prompts with ``FAKE_TESTS`` and everything else with
    ``FAKE_CODE``; every call is kept in ``calls``.
    """

    def __init__(self, code: str = FAKE_CODE, tests: str = FAKE_TESTS):
        self.code = code
        self.tests = tests
        self.calls: list[list[ChatMessage]] = []

    async def generate(self, messages: Sequence[ChatMessage]) -> str:
        self.calls.append(list(messages))
        if "test engineer" in messages[0].content:
            return self.tests
        return self.code


class FailingTextGenerator:
    """A language model that is always unavailable."""

    def __init__(self, error: Exception | None = None):
        self.error = error or RuntimeError("upstream unavailable")
        self.calls = 0

    async def generate(self, messages: Sequence[ChatMessage]) -> str:
        self.calls += 1
        raise self.error


def get_test_settings() -> Settings:
    """Override settings for testing."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        api_keys=[TEST_API_KEY],
        auth_enabled=False,
        rate_limit_enabled=False,
        environment="test",
        log_level="WARNING",
    )


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    session_maker = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_maker() as session:
        yield session


@pytest.fixture
def fake_generator() -> FakeTextGenerator:
    return FakeTextGenerator()


@pytest_asyncio.fixture(scope="function")
async def client(
    test_session: AsyncSession,
    fake_generator: FakeTextGenerator,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client acting as user 1, backed by the test session and fake model."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        try:
            yield test_session
        except Exception:
            await test_session.rollback()
            raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = get_test_settings
    app.dependency_overrides[get_text_generator] = lambda: fake_generator

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport,
        base_url="http://test",
        headers={"X-Actor-Id": str(TEST_ACTOR_ID)},
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def anonymous_client(test_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that sends no actor header."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield test_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = get_test_settings

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def api_key() -> str:
    """Return the test API key."""
    return TEST_API_KEY


@pytest.fixture
def sample_rule_data() -> dict[str, Any]:
    """Sample governance rule payload."""
    return {
        "rule_id": "CP-CDG-PII-001",
        "title": "Mask customer PII in logs",
        "statement": "Customer PII must never be written to application logs in clear text.",
        "source_of_truth": "GDPR Art. 32",
        "category": "privacy",
        "priority": "high",
        "status": "active",
    }


@pytest.fixture
def sample_document_data() -> dict[str, Any]:
    """Sample context document payload."""
    return {
        "title": "ADR-012 Logging utilities",
        "type": "adr",
        "content": "All logging goes through SafeLogger.Write(string message).",
        "tags": ["logging", "privacy"],
        "metadata": {"owner": "platform-team"},
    }


@pytest.fixture
def failing_generator() -> FailingTextGenerator:
    return FailingTextGenerator()


@pytest.fixture
def empty_generator() -> FakeTextGenerator:
    """A language model that answers with whitespace only."""
    return FakeTextGenerator(code="   \n", tests="")


@pytest_asyncio.fixture
async def governance_rule(test_session: AsyncSession, sample_rule_data: dict[str, Any]):
    """A committed governance rule created by user 1."""
    from compliance_dashboard.services.governance import GovernanceRuleService

    rule = await GovernanceRuleService(test_session).create(actor=TEST_ACTOR_ID, **sample_rule_data)
    await test_session.commit()
    return rule

"""Tests for API authentication and actor identity."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from compliance_dashboard.api.auth import (
    APIKeyAuthMiddleware,
    is_path_exempt,
    parse_actor_id,
    verify_api_key,
)
from compliance_dashboard.config import Settings


class TestAPIKeyValidation:
    """Tests for API key validation functions."""

    def test_verify_valid_api_key(self):
        valid_keys = ["key-123", "key-456"]
        assert verify_api_key("key-123", valid_keys) is True
        assert verify_api_key("key-456", valid_keys) is True

    def test_verify_invalid_api_key(self):
        valid_keys = ["key-123", "key-456"]
        assert verify_api_key("wrong-key", valid_keys) is False
        assert verify_api_key("", valid_keys) is False
        assert verify_api_key("key-12", valid_keys) is False  # Partial match

    def test_verify_empty_valid_keys(self):
        assert verify_api_key("any-key", []) is False


class TestPathExemption:
    """Tests for path exemption checking."""

    def test_exact_match_exempt(self):
        exempt_paths = ["/api/v1/health", "/api/v1/docs"]
        assert is_path_exempt("/api/v1/health", exempt_paths) is True
        assert is_path_exempt("/api/v1/docs", exempt_paths) is True

    def test_non_exempt_path(self):
        exempt_paths = ["/api/v1/health"]
        assert is_path_exempt("/api/v1/governance-rules", exempt_paths) is False

    def test_wildcard_exempt(self):
        exempt_paths = ["/api/v1/health*"]
        assert is_path_exempt("/api/v1/health/live", exempt_paths) is True

    def test_trailing_slash_handling(self):
        assert is_path_exempt("/api/v1/health/", ["/api/v1/health"]) is True


class TestActorParsing:
    """Tests for the actor header parser."""

    @pytest.mark.parametrize("raw,expected", [("1", 1), ("42", 42), (" 7 ", 7)])
    def test_positive_integers(self, raw, expected):
        assert parse_actor_id(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "0", "-3", "abc", "1.5"])
    def test_rejected_values(self, raw):
        assert parse_actor_id(raw) is None


def _protected_app(settings: Settings) -> FastAPI:
    app = FastAPI()

    @app.get("/api/v1/health")
    async def health():
        return {"status": "healthy"}

    @app.get("/api/v1/governance-rules")
    async def rules():
        return {"data": []}

    app.add_middleware(APIKeyAuthMiddleware, settings=settings)
    return app


@pytest.fixture
def auth_settings(api_key) -> Settings:
    return Settings(environment="staging", auth_enabled=True, api_keys=[api_key])


class TestAPIKeyAuthMiddleware:
    """Tests for the ASGI authentication middleware."""

    @pytest.mark.asyncio
    async def test_rejects_missing_key(self, auth_settings):
        transport = ASGITransport(app=_protected_app(auth_settings))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/api/v1/governance-rules")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"
        assert response.headers["www-authenticate"] == "ApiKey"

    @pytest.mark.asyncio
    async def test_rejects_invalid_key(self, auth_settings):
        transport = ASGITransport(app=_protected_app(auth_settings))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/api/v1/governance-rules", headers={"X-API-Key": "nope"})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_accepts_valid_key(self, auth_settings, api_key):
        transport = ASGITransport(app=_protected_app(auth_settings))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/api/v1/governance-rules", headers={"X-API-Key": api_key})

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_exempt_path_needs_no_key(self, auth_settings):
        transport = ASGITransport(app=_protected_app(auth_settings))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/api/v1/health")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_disabled_auth_passes_through(self):
        settings = Settings(environment="development", auth_enabled=False)
        transport = ASGITransport(app=_protected_app(settings))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            response = await ac.get("/api/v1/governance-rules")

        assert response.status_code == 200

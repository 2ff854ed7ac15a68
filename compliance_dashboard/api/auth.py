"""Caller identity: service API keys and the acting user.

Two separate concerns are handled here:

* ``APIKeyAuthMiddleware`` admits or rejects the calling client by its
  ``X-API-Key`` header (skipped in development when auth is disabled).
* ``CurrentActor`` resolves the numeric id of the user on whose behalf a
  mutating request is made. The id ends up in ``created_by``,
  ``generated_by``, ``triggered_by`` and every audit entry's ``actor``.
"""

import fnmatch
import json
import secrets
from typing import Annotated, Optional

import structlog
from fastapi import Depends, HTTPException, Request, status

from compliance_dashboard.api.exceptions import create_error_response
from compliance_dashboard.config import Settings, get_settings
from compliance_dashboard.logging_config import get_logger

logger = get_logger(__name__)


class AuthenticationError(HTTPException):
    """The caller could not be identified."""

    def __init__(self, detail: str, scheme: str = "ApiKey"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": scheme},
        )


def is_path_exempt(path: str, exempt_paths: list[str]) -> bool:
    """Check a request path against exempt patterns (``*`` wildcards, trailing slash ignored)."""
    candidates = {path, path.rstrip("/") or "/"}
    return any(
        fnmatch.fnmatch(candidate, pattern.rstrip("/") or "/") or fnmatch.fnmatch(candidate, pattern)
        for pattern in exempt_paths
        for candidate in candidates
    )


def verify_api_key(api_key: str, valid_keys: list[str]) -> bool:
    """Constant-time membership check of ``api_key`` in ``valid_keys``."""
    return any(secrets.compare_digest(api_key, valid) for valid in valid_keys)


def parse_actor_id(raw: Optional[str]) -> Optional[int]:
    """Parse an actor header value into a positive user id, or None."""
    if raw is None:
        return None
    raw = raw.strip()
    if not raw.isdigit():
        return None
    actor = int(raw)
    return actor if actor > 0 else None


async def get_current_actor(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> int:
    """Resolve the acting user for a mutating operation.

    The id is also bound to the logging context so every log line of the
    request names the actor.

    Raises:
        AuthenticationError: If the header is missing or not a positive integer
    """
    actor = parse_actor_id(request.headers.get(settings.actor_header))
    if actor is None:
        logger.warning("Missing or invalid actor identity", path=request.url.path)
        raise AuthenticationError(
            f"Authenticated actor required. Provide a numeric user id via {settings.actor_header} header.",
            scheme="Actor",
        )
    structlog.contextvars.bind_contextvars(actor=actor)
    return actor


CurrentActor = Annotated[int, Depends(get_current_actor)]


def _unauthorized_body() -> bytes:
    return json.dumps(
        create_error_response(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error_code="UNAUTHORIZED",
            message="Invalid or missing API key",
        )
    ).encode()


class APIKeyAuthMiddleware:
    """ASGI middleware rejecting requests without a valid API key.

    Settings are read lazily so the middleware can be built before the
    environment is final.
    """

    def __init__(self, app, settings: Optional[Settings] = None):
        self.app = app
        self._settings = settings

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    def _is_admitted(self, scope) -> bool:
        if not self.settings.auth_required:
            return True
        if is_path_exempt(scope.get("path", ""), self.settings.auth_exempt_paths):
            return True
        header = self.settings.api_key_header.lower().encode()
        raw = dict(scope.get("headers", [])).get(header)
        return bool(raw) and verify_api_key(raw.decode(), self.settings.api_keys)

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http" or self._is_admitted(scope):
            await self.app(scope, receive, send)
            return

        logger.warning("Rejected request without a valid API key", path=scope.get("path", ""))
        await send({
            "type": "http.response.start",
            "status": status.HTTP_401_UNAUTHORIZED,
            "headers": [
                [b"content-type", b"application/json"],
                [b"www-authenticate", b"ApiKey"],
            ],
        })
        await send({"type": "http.response.body", "body": _unauthorized_body()})

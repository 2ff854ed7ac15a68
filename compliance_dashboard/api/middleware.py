"""Request logging and response hardening middleware."""

import time
from typing import Callable
from uuid import uuid4

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from compliance_dashboard.config import get_settings
from compliance_dashboard.logging_config import get_logger

logger = get_logger(__name__)

# Probes and scrapes are logged at debug level only
QUIET_PATH_SUFFIXES = ("/health/live", "/health/ready", "/metrics")

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Cache-Control": "no-store",
}


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Binds a request id (and the claimed actor, if any) to the log context.

    The id is taken from ``X-Request-ID`` when the caller sends one and is
    echoed back with the response time.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or uuid4().hex[:12]
        request.state.request_id = request_id

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)
        claimed_actor = request.headers.get(get_settings().actor_header)
        if claimed_actor:
            structlog.contextvars.bind_contextvars(claimed_actor=claimed_actor)

        log = logger.debug if request.url.path.endswith(QUIET_PATH_SUFFIXES) else logger.info
        started = time.perf_counter()

        response = await call_next(request)

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        log(
            "Request handled",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds static security headers; API docs pages keep their CDN assets."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)
        response.headers.update(SECURITY_HEADERS)
        if not request.url.path.endswith(("/docs", "/redoc")):
            response.headers["Content-Security-Policy"] = "default-src 'self'"
        return response

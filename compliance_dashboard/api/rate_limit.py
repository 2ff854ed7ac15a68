"""Rate limiting.

Limits are counted per acting user when the request names one, then per API
key, then per client address. Generation endpoints call the language model
and carry a tighter limit than the default.
"""

from typing import Callable, Optional

from fastapi import FastAPI, Request, Response, status
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from compliance_dashboard.api.auth import parse_actor_id
from compliance_dashboard.api.exceptions import create_error_response
from compliance_dashboard.config import Settings, get_settings
from compliance_dashboard.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_RETRY_AFTER_SECONDS = 60

_limiter: Optional[Limiter] = None


def get_client_identifier(request: Request) -> str:
    """Rate limit key: ``actor:<id>``, ``key:<prefix>`` or ``ip:<address>``."""
    settings = get_settings()

    actor = parse_actor_id(request.headers.get(settings.actor_header))
    if actor is not None:
        return f"actor:{actor}"

    api_key = request.headers.get(settings.api_key_header)
    if api_key:
        return f"key:{api_key[:8]}"

    return f"ip:{get_remote_address(request)}"


def create_limiter(settings: Optional[Settings] = None) -> Limiter:
    settings = settings or get_settings()
    return Limiter(
        key_func=get_client_identifier,
        default_limits=[settings.rate_limit_default],
        storage_uri=settings.rate_limit_storage_uri or "memory://",
        strategy="fixed-window",
        headers_enabled=True,
        enabled=settings.rate_limit_enabled,
    )


def get_limiter() -> Limiter:
    """Get the process-wide limiter."""
    global _limiter
    if _limiter is None:
        _limiter = create_limiter()
    return _limiter


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Answer 429 in the standard error envelope."""
    retry_after = getattr(exc, "retry_after", None) or DEFAULT_RETRY_AFTER_SECONDS
    logger.warning(
        "Rate limit exceeded",
        path=request.url.path,
        client=get_client_identifier(request),
        limit=str(exc.detail),
    )
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content=create_error_response(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            error_code="RATE_LIMITED",
            message=f"Rate limit exceeded: {exc.detail}",
            details={"retry_after": retry_after},
            request_id=getattr(request.state, "request_id", None),
        ),
        headers={"Retry-After": str(retry_after)},
    )


def expensive_limit() -> Callable:
    """Limit for language-model backed endpoints.

    Decorated endpoints must accept ``request: Request`` and
    ``response: Response`` parameters.
    """
    return get_limiter().limit(get_settings().rate_limit_expensive)


def configure_rate_limiting(app: FastAPI) -> None:
    """Attach the limiter and its 429 handler to the application."""
    settings = get_settings()
    app.state.limiter = get_limiter()
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    logger.info(
        "Rate limiting configured" if settings.rate_limit_enabled else "Rate limiting is disabled",
        default_limit=settings.rate_limit_default,
        expensive_limit=settings.rate_limit_expensive,
    )

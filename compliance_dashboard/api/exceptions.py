"""Error envelope and exception handlers.

Every failure leaves the API as::

    {"error": {"code": "...", "message": "...", "status": 404,
               "details": {...}, "request_id": "..."}}

Services raise ``ServiceError`` subclasses; routers may raise ``ApiError``
directly for conditions that only exist at the HTTP layer.
"""

from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from compliance_dashboard.logging_config import get_logger
from compliance_dashboard.services.errors import (
    DuplicateRuleError,
    EntityNotFoundError,
    GenerationFailedError,
    RuleCatalogError,
    ServiceError,
)

logger = get_logger(__name__)


class ApiError(Exception):
    """An error with a fixed HTTP status and machine-readable code."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details or {}


class NotFoundError(ApiError):
    def __init__(self, resource_type: str, identifier: str):
        super().__init__(
            f"{resource_type} not found: {identifier}",
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="NOT_FOUND",
            details={"resource_type": resource_type, "identifier": identifier},
        )


class BadRequestError(ApiError):
    """Well-formed input that still cannot be acted on."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(
            message,
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="BAD_REQUEST",
            details=details,
        )


def api_error_from(exc: ServiceError) -> ApiError:
    """Translate a service layer error into its HTTP form."""
    if isinstance(exc, EntityNotFoundError):
        return NotFoundError(exc.entity_type, exc.identifier)
    if isinstance(exc, DuplicateRuleError):
        return ApiError(
            str(exc),
            status_code=status.HTTP_409_CONFLICT,
            error_code="CONFLICT",
            details={"rule_id": exc.rule_id},
        )
    if isinstance(exc, GenerationFailedError):
        return ApiError(
            str(exc),
            status_code=status.HTTP_502_BAD_GATEWAY,
            error_code="GENERATION_FAILED",
            details={"kind": exc.kind, "reason": exc.reason},
        )
    if isinstance(exc, RuleCatalogError):
        return BadRequestError(str(exc))
    return ApiError(str(exc))


def create_error_response(
    status_code: int,
    error_code: str,
    message: str,
    details: Optional[dict[str, Any]] = None,
    request_id: Optional[str] = None,
) -> dict[str, Any]:
    """Build the error envelope; empty details and request id are omitted."""
    error: dict[str, Any] = {"code": error_code, "message": message, "status": status_code}
    if details:
        error["details"] = details
    if request_id:
        error["request_id"] = request_id
    return {"error": error}


def _respond(
    request: Request,
    status_code: int,
    error_code: str,
    message: str,
    details: Optional[dict[str, Any]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=create_error_response(
            status_code=status_code,
            error_code=error_code,
            message=message,
            details=details,
            request_id=getattr(request.state, "request_id", None),
        ),
    )


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    logger.warning(
        "Request failed",
        error_code=exc.error_code,
        message=exc.message,
        details=exc.details,
        path=request.url.path,
    )
    return _respond(request, exc.status_code, exc.error_code, exc.message, exc.details)


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    return await api_error_handler(request, api_error_from(exc))


async def validation_error_handler(
    request: Request, exc: ValidationError | RequestValidationError
) -> JSONResponse:
    """Flatten pydantic errors into ``{field, message, type}`` entries."""
    errors = [
        {
            "field": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in exc.errors()
    ]
    logger.warning("Validation error", errors=errors, path=request.url.path)
    return _respond(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "VALIDATION_ERROR",
        "Request validation failed",
        {"errors": errors},
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error", error=str(exc), path=request.url.path, exc_info=True)
    if isinstance(exc, IntegrityError):
        return _respond(
            request,
            status.HTTP_409_CONFLICT,
            "INTEGRITY_ERROR",
            "Database integrity constraint violated",
        )
    return _respond(
        request,
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "DATABASE_ERROR",
        "Database operation failed. Please try again later.",
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unexpected error", error=str(exc), path=request.url.path, exc_info=True)
    return _respond(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An unexpected error occurred. Please try again later.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    # Catch-all, registered last
    app.add_exception_handler(Exception, unhandled_error_handler)

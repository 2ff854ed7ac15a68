"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from compliance_dashboard.api.auth import APIKeyAuthMiddleware
from compliance_dashboard.api.exceptions import register_exception_handlers
from compliance_dashboard.api.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from compliance_dashboard.api.rate_limit import configure_rate_limiting
from compliance_dashboard.api.routers import (
    audit,
    code_artifacts,
    context_documents,
    dashboard,
    evaluation_metrics,
    governance_rules,
    health,
    pipeline_runs,
    test_suites,
)
from compliance_dashboard.config import get_settings, validate_config
from compliance_dashboard.database import close_db, engine, init_db
from compliance_dashboard.logging_config import configure_logging, get_logger
from compliance_dashboard.metrics import configure_prometheus_metrics

settings = get_settings()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Validate config and create tables on startup; flush tracing and dispose the engine on shutdown."""
    configure_logging()
    logger.info("Starting Compliance Governance Dashboard", environment=settings.environment)

    # Strict in production: critical issues abort startup
    validate_config(settings, strict=settings.is_production)
    logger.info("Configuration validated")

    await init_db()
    logger.info("Database initialized")

    if settings.tracing_enabled:
        from compliance_dashboard.tracing import setup_tracing

        setup_tracing(app, settings, engine=engine)

    yield

    logger.info("Shutting down Compliance Governance Dashboard")

    if settings.tracing_enabled:
        from compliance_dashboard.tracing import shutdown_tracing

        shutdown_tracing()
        logger.info("Tracing shutdown complete")

    await close_db()
    logger.info("Database connections closed")


API_DESCRIPTION = """
# Compliance Governance Dashboard API

Turns regulatory governance rules into enforcement code and tests, gates them
through a simulated CI/CD pipeline and keeps an append-only audit trail of
every step.

## Features

- **Governance Rules**: Catalog of regulatory rules with priority and lifecycle status
- **Context Documents**: Regulations, ADRs, utility signatures and best practices fed into prompts
- **Code Generation**: LLM-generated C# enforcement classes per rule
- **Test Generation**: LLM-generated xUnit or NUnit suites per artifact
- **Pipeline Gate**: Simulated Build, Unit Tests, Compliance Gate and Deploy stages
- **Audit & Lineage**: Every mutation recorded and grouped per rule
- **Evaluation Metrics**: 0-100 scores for prompts, adherence, quality and coverage

## Authentication

Outside development every request needs a service key in the `X-API-Key` header.
Mutating endpoints additionally require the acting user's numeric id in the `X-Actor-Id` header.

No key is needed for:
- Health checks (`/health`, `/health/live`, `/health/ready`)
- Documentation (`/docs`, `/redoc`, `/openapi.json`)
- Prometheus metrics (`/metrics`)

## Rate Limits

Limits are counted per acting user (`X-Actor-Id`), falling back to the API key
and then the client address:
- **Default**: `RATE_LIMIT_DEFAULT` (100/minute)
- **Generation endpoints** (language model calls): `RATE_LIMIT_EXPENSIVE` (10/minute)

A 429 response carries `Retry-After` and `error.details.retry_after`.
"""

OPENAPI_TAGS = [
    {"name": "health", "description": "Health check endpoints for monitoring"},
    {"name": "governance-rules", "description": "Governance rule catalog - create, filter, update, delete"},
    {"name": "context-documents", "description": "Context documents used to enrich generation prompts"},
    {"name": "code-artifacts", "description": "Generated enforcement code"},
    {"name": "test-suites", "description": "Generated test suites"},
    {"name": "pipeline-runs", "description": "Simulated CI/CD runs with a compliance gate"},
    {"name": "evaluation-metrics", "description": "Scores recorded against rules and their outputs"},
    {"name": "audit", "description": "Audit trail, per-rule lineage and summary counters"},
    {"name": "dashboard", "description": "Home page counters and recent runs"},
]


def create_app() -> FastAPI:
    """Build the application: middleware stack, limiter, metrics, routers, error handlers."""
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description=API_DESCRIPTION,
        docs_url=f"{settings.api_prefix}/docs",
        redoc_url=f"{settings.api_prefix}/redoc",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        openapi_tags=OPENAPI_TAGS,
        lifespan=lifespan,
        license_info={"name": "MIT"},
    )

    # Starlette runs middleware in reverse order of registration: CORS first,
    # then request logging, key check, security headers.
    app.add_middleware(SecurityHeadersMiddleware)

    if settings.auth_required:
        app.add_middleware(APIKeyAuthMiddleware, settings=settings)
        logger.info("API key authentication enabled")

    app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    configure_rate_limiting(app)
    configure_prometheus_metrics(app)

    app.include_router(health.router, prefix=settings.api_prefix, tags=["health"])
    for module in (
        governance_rules,
        context_documents,
        code_artifacts,
        test_suites,
        pipeline_runs,
        evaluation_metrics,
        audit,
        dashboard,
    ):
        app.include_router(module.router, prefix=settings.api_prefix)

    register_exception_handlers(app)

    return app


app = create_app()

"""Structured logging for the compliance dashboard.

Every log line carries the service name and environment. Request-scoped
values (request id, acting user) are bound through structlog contextvars by
the request middleware and the actor dependency.
"""

import logging
import sys
from typing import Any

import structlog

from compliance_dashboard.config import get_settings

SERVICE_NAME = "compliance-dashboard"

# Prompts and generated sources can be several kilobytes
MAX_FIELD_CHARS = 500
TRUNCATED_FIELDS = ("prompt", "code", "test_code", "content", "reason")


def add_service_context(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Stamp each event with the service name and environment."""
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("environment", get_settings().environment)
    return event_dict


def truncate_large_fields(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Shorten prompt and source fields so model output does not flood the logs."""
    for key in TRUNCATED_FIELDS:
        value = event_dict.get(key)
        if isinstance(value, str) and len(value) > MAX_FIELD_CHARS:
            event_dict[key] = f"{value[:MAX_FIELD_CHARS]}... ({len(value)} chars)"
    return event_dict


def configure_logging() -> None:
    """Configure structlog and the stdlib root logger."""
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_context,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        truncate_large_fields,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]

    if settings.is_production:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level)

    for noisy in ("uvicorn.access", "httpx", "httpcore", "aiosqlite"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.database_echo else logging.WARNING
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a logger instance."""
    return structlog.get_logger(name)

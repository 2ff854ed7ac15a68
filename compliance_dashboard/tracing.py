"""OpenTelemetry tracing.

Tracing is off unless ``TRACING_ENABLED`` is set. When it is off,
``create_span`` still works against the no-op global tracer, so services
can open spans unconditionally:

    with create_span("pipeline.simulate", attributes={...}) as span:
        span.set_attribute(SpanAttributes.PIPELINE_GATE_PASSED, True)
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Span, SpanKind, Status, StatusCode
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from compliance_dashboard import __version__
from compliance_dashboard.config import Settings
from compliance_dashboard.logging_config import get_logger

logger = get_logger(__name__)

INSTRUMENTATION_NAME = "compliance_dashboard"


class SpanAttributes:
    """Span attribute names used by the services."""

    GOVERNANCE_RULE_ID = "govdash.rule.id"
    CODE_ARTIFACT_ID = "govdash.artifact.id"
    TEST_SUITE_ID = "govdash.suite.id"

    LLM_MODEL = "govdash.llm.model"
    LLM_PROMPT_CHARS = "govdash.llm.prompt_chars"
    LLM_RESPONSE_CHARS = "govdash.llm.response_chars"

    GENERATION_KIND = "govdash.generation.kind"
    GENERATION_CLASS_NAME = "govdash.generation.class_name"
    GENERATION_TEST_COUNT = "govdash.generation.test_count"

    PIPELINE_RUN_NUMBER = "govdash.pipeline.run_number"
    PIPELINE_STAGE_COUNT = "govdash.pipeline.stage_count"
    PIPELINE_GATE_PASSED = "govdash.pipeline.gate_passed"

    LINEAGE_ENTRY_COUNT = "govdash.lineage.entry_count"


def setup_tracing(app: Any, settings: Settings, engine: Optional[Any] = None) -> None:
    """Install the tracer provider and instrument FastAPI, httpx and SQLAlchemy.

    Args:
        app: FastAPI application instance
        settings: Application settings (service name, OTLP endpoint, console export)
        engine: Async SQLAlchemy engine whose queries should be traced
    """
    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": settings.tracing_service_name,
                "service.namespace": "compliance",
                "service.version": __version__,
                "deployment.environment": settings.environment,
            }
        )
    )

    if settings.tracing_otlp_endpoint:
        exporter = OTLPSpanExporter(endpoint=settings.tracing_otlp_endpoint, insecure=True)
        provider.add_span_processor(BatchSpanProcessor(exporter))
    if settings.tracing_console_export:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    set_global_textmap(TraceContextTextMapPropagator())

    FastAPIInstrumentor.instrument_app(app)
    # Language model calls go out through httpx
    HTTPXClientInstrumentor().instrument()
    if engine is not None:
        SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine, enable_commenter=True)

    logger.info(
        "Tracing enabled",
        otlp_endpoint=settings.tracing_otlp_endpoint,
        console_export=settings.tracing_console_export,
    )


def shutdown_tracing() -> None:
    """Flush and stop the SDK provider, if one was installed."""
    provider = trace.get_tracer_provider()
    if isinstance(provider, TracerProvider):
        provider.shutdown()


@contextmanager
def create_span(
    name: str,
    kind: SpanKind = SpanKind.INTERNAL,
    attributes: Optional[Dict[str, Any]] = None,
) -> Iterator[Span]:
    """Open a span; an exception escaping the block marks it as errored."""
    tracer = trace.get_tracer(INSTRUMENTATION_NAME, __version__)
    with tracer.start_as_current_span(name, kind=kind, attributes=attributes) as span:
        try:
            yield span
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise

"""Prometheus metrics for the compliance dashboard.

HTTP metrics come from prometheus-fastapi-instrumentator; business metrics
(generations, pipeline runs, audit entries, evaluation scores) are kept in
a small registry wrapper so services do not touch prometheus_client
directly.
"""

import time
from functools import wraps
from typing import Any, Callable, Optional

from fastapi import FastAPI
from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram
from prometheus_fastapi_instrumentator import Instrumentator

from compliance_dashboard.config import get_settings
from compliance_dashboard.logging_config import get_logger

logger = get_logger(__name__)
settings = get_settings()

# Global metrics registry
_metrics: Optional["MetricsRegistry"] = None


class MetricsRegistry:
    """Named business metrics backed by prometheus_client."""

    def __init__(self, prefix: str = "govdash", registry: CollectorRegistry = REGISTRY):
        self.prefix = prefix
        self.registry = registry
        self._counters: dict[str, Counter] = {}
        self._gauges: dict[str, Gauge] = {}
        self._histograms: dict[str, Histogram] = {}
        self._instrumentator: Optional[Instrumentator] = None
        self._register()

    def _register(self) -> None:
        self._counters["generations"] = Counter(
            f"{self.prefix}_generations_total",
            "Total number of code and test generation requests",
            ["kind", "status"],  # kind: code, tests
            registry=self.registry,
        )
        self._counters["pipeline_runs"] = Counter(
            f"{self.prefix}_pipeline_runs_total",
            "Total number of simulated pipeline runs",
            ["status"],
            registry=self.registry,
        )
        self._counters["audit_entries"] = Counter(
            f"{self.prefix}_audit_entries_total",
            "Total number of audit entries recorded",
            ["action"],
            registry=self.registry,
        )

        self._gauges["active_generations"] = Gauge(
            f"{self.prefix}_active_generations",
            "Number of generation requests currently waiting on the language model",
            registry=self.registry,
        )

        self._histograms["generation_duration"] = Histogram(
            f"{self.prefix}_generation_duration_seconds",
            "Language model generation duration in seconds",
            ["kind"],
            buckets=[0.5, 1, 2, 5, 10, 30, 60, 120],
            registry=self.registry,
        )
        self._histograms["evaluation_scores"] = Histogram(
            f"{self.prefix}_evaluation_scores",
            "Recorded evaluation scores (0-100)",
            ["metric_type"],
            buckets=[10, 20, 30, 40, 50, 60, 70, 80, 90, 100],
            registry=self.registry,
        )

    # Counter methods
    def inc_counter(self, name: str, value: int = 1, **labels: str) -> None:
        """Increment a counter."""
        counter = self._counters[name]
        if labels:
            counter.labels(**labels).inc(value)
        else:
            counter.inc(value)

    def get_counter(self, name: str, **labels: str) -> float:
        """Get the current value of a counter sample."""
        value = self.registry.get_sample_value(
            f"{self.prefix}_{name}_total", labels or None
        )
        return value or 0.0

    # Gauge methods
    def inc_gauge(self, name: str, value: float = 1) -> None:
        self._gauges[name].inc(value)

    def dec_gauge(self, name: str, value: float = 1) -> None:
        self._gauges[name].dec(value)

    # Histogram methods
    def observe_histogram(self, name: str, value: float, **labels: str) -> None:
        """Record a histogram observation."""
        histogram = self._histograms[name]
        if labels:
            histogram.labels(**labels).observe(value)
        else:
            histogram.observe(value)

    def time_histogram(self, name: str, **labels: str):
        """Context manager to time a block and record in histogram."""
        outer_self = self

        class Timer:
            def __init__(self):
                self.start: float = 0.0

            def __enter__(self):
                self.start = time.perf_counter()
                return self

            def __exit__(self, *args):
                duration = time.perf_counter() - self.start
                outer_self.observe_histogram(name, duration, **labels)

        return Timer()


def get_metrics() -> MetricsRegistry:
    """Get the global metrics registry."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsRegistry(prefix=settings.metrics_prefix)
    return _metrics


def configure_prometheus_metrics(app: FastAPI) -> None:
    """Instrument HTTP handlers and expose ``/metrics``."""
    if not settings.metrics_enabled:
        logger.info("Metrics disabled")
        return

    metrics = get_metrics()

    instrumentator = Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        should_respect_env_var=True,
        should_instrument_requests_inprogress=True,
        excluded_handlers=["/metrics", f"{settings.api_prefix}/health/live"],
        env_var_name="ENABLE_METRICS",
        inprogress_name=f"{settings.metrics_prefix}_http_requests_inprogress",
        inprogress_labels=True,
    )
    instrumentator.instrument(app).expose(
        app,
        include_in_schema=True,
        endpoint="/metrics",
        tags=["monitoring"],
    )

    metrics._instrumentator = instrumentator
    logger.info("Prometheus HTTP metrics enabled via instrumentator")


# Decorators for tracking business metrics
def track_generation(kind: str):
    """Decorator counting and timing a language-model generation call."""

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any):
            metrics = get_metrics()
            metrics.inc_gauge("active_generations")
            try:
                with metrics.time_histogram("generation_duration", kind=kind):
                    result = await func(*args, **kwargs)
                metrics.inc_counter("generations", kind=kind, status="success")
                return result
            except Exception:
                metrics.inc_counter("generations", kind=kind, status="error")
                raise
            finally:
                metrics.dec_gauge("active_generations")

        return wrapper

    return decorator


def record_pipeline_run(status: str) -> None:
    """Record a completed pipeline simulation."""
    get_metrics().inc_counter("pipeline_runs", status=status)


def record_audit_entry(action: str) -> None:
    """Record an appended audit entry."""
    get_metrics().inc_counter("audit_entries", action=action)


def record_evaluation_score(metric_type: str, score: int) -> None:
    """Record an evaluation score."""
    get_metrics().observe_histogram("evaluation_scores", float(score), metric_type=metric_type)

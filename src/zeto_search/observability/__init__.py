"""Observability module for logging, tracing and metrics."""

from __future__ import annotations

from zeto_search.config import ObservabilitySettings
from zeto_search.observability.context import bound_context, get_trace_context, set_trace_context, trace_context
from zeto_search.observability.logging import JsonFormatter, configure_logging
from zeto_search.observability.metrics import (
    DOCUMENT_COUNT,
    INDEX_TERM_COUNT,
    SEARCH_COUNT,
    SEARCH_LATENCY,
    SKIPPED_DOCUMENTS,
    get_metrics,
    get_metrics_content_type,
    init_metrics,
    track_latency,
)
from zeto_search.observability.tracing import create_span, get_tracer, init_tracing


def configure_observability(settings: ObservabilitySettings | None = None) -> ObservabilitySettings:
    """Apply logging, tracing and metrics setup from settings (environment by default)."""
    settings = settings or ObservabilitySettings()
    configure_logging(settings.log_level, settings.log_json)
    if settings.tracing_enabled:
        init_tracing(settings.service_name)
    if settings.metrics_enabled:
        init_metrics(settings.service_name)
    return settings


__all__ = [
    "DOCUMENT_COUNT",
    "INDEX_TERM_COUNT",
    "SEARCH_COUNT",
    "SEARCH_LATENCY",
    "SKIPPED_DOCUMENTS",
    "JsonFormatter",
    "bound_context",
    "configure_logging",
    "configure_observability",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_metrics",
    "init_tracing",
    "set_trace_context",
    "trace_context",
    "track_latency",
]

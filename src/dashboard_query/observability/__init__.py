"""Observability module for logging, tracing and metrics."""

from dashboard_query.observability.context import get_trace_context, set_trace_context, trace_context
from dashboard_query.observability.logging import JsonFormatter, configure_logging, setup_logging
from dashboard_query.observability.metrics import (
    QUERY_RUNS,
    QUERY_STAGE_LATENCY,
    SAVED_SEARCH_OPERATIONS,
    get_metrics,
    get_metrics_content_type,
    track_latency,
)
from dashboard_query.observability.tracing import create_span, get_tracer, init_tracing


__all__ = [
    "QUERY_RUNS",
    "QUERY_STAGE_LATENCY",
    "SAVED_SEARCH_OPERATIONS",
    "JsonFormatter",
    "configure_logging",
    "create_span",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "get_tracer",
    "init_tracing",
    "set_trace_context",
    "setup_logging",
    "trace_context",
    "track_latency",
]

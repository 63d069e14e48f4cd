"""Prometheus metrics for the query pipeline and saved searches."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


QUERY_STAGE_LATENCY = Histogram(
    "query_stage_latency_seconds",
    "Latency of one query pipeline stage",
    ["stage"],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5),
)

QUERY_RUNS = Counter(
    "query_pipeline_runs_total",
    "Completed query pipeline runs",
)

SAVED_SEARCH_OPERATIONS = Counter(
    "saved_search_operations_total",
    "Saved search store operations",
    ["operation"],
)


@contextmanager
def track_latency(histogram: Histogram, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        histogram.labels(**labels).observe(time.perf_counter() - start)


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST

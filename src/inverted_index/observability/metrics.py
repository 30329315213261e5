"""Prometheus metrics for index builds and searches."""

from __future__ import annotations

from contextlib import contextmanager
import time
from typing import TYPE_CHECKING

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest


if TYPE_CHECKING:
    from collections.abc import Generator


INDEX_BUILDS = Counter(
    "inverted_index_builds_total",
    "Index build attempts",
    ["status"],
)

INDEX_BUILD_LATENCY = Histogram(
    "inverted_index_build_latency_seconds",
    "Time spent fetching and indexing a document source",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)

SEARCH_LATENCY = Histogram(
    "inverted_index_search_latency_seconds",
    "Search query latency",
    ["entry_point"],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1),
)

INDEX_DOC_COUNT = Gauge(
    "inverted_index_document_count",
    "Documents in index",
    ["source"],
)

INDEX_TERM_COUNT = Gauge(
    "inverted_index_term_count",
    "Distinct terms in index",
    ["source"],
)


@contextmanager
def track_latency(histogram: Histogram, **labels: str) -> Generator[None, None, None]:
    """Context manager to track operation latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        target = histogram.labels(**labels) if labels else histogram
        target.observe(time.perf_counter() - start)


def record_index_size(source: str, doc_count: int, term_count: int) -> None:
    INDEX_DOC_COUNT.labels(source=source).set(doc_count)
    INDEX_TERM_COUNT.labels(source=source).set(term_count)


def forget_index(source: str) -> None:
    """Drop per-source series once an index is removed."""
    for gauge in (INDEX_DOC_COUNT, INDEX_TERM_COUNT):
        try:
            gauge.remove(source)
        except KeyError:
            continue


def get_metrics() -> bytes:
    """Generate Prometheus metrics output."""
    return generate_latest()


def get_metrics_content_type() -> str:
    """Get content type for metrics endpoint."""
    return CONTENT_TYPE_LATEST

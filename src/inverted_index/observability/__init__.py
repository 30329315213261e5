"""Observability module for structured logging, trace context, and metrics."""

from inverted_index.observability.context import get_trace_context, source_context
from inverted_index.observability.logging import JsonFormatter, configure_logging, configure_logging_from_settings
from inverted_index.observability.metrics import (
    INDEX_BUILD_LATENCY,
    INDEX_BUILDS,
    INDEX_DOC_COUNT,
    INDEX_TERM_COUNT,
    SEARCH_LATENCY,
    forget_index,
    get_metrics,
    get_metrics_content_type,
    record_index_size,
    track_latency,
)


__all__ = [
    "INDEX_BUILDS",
    "INDEX_BUILD_LATENCY",
    "INDEX_DOC_COUNT",
    "INDEX_TERM_COUNT",
    "SEARCH_LATENCY",
    "JsonFormatter",
    "configure_logging",
    "configure_logging_from_settings",
    "forget_index",
    "get_metrics",
    "get_metrics_content_type",
    "get_trace_context",
    "record_index_size",
    "source_context",
    "track_latency",
]

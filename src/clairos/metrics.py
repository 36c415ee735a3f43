"""Prometheus metrics definitions for ClairOS."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "clairos_http_requests_total",
    "Total number of HTTP requests processed by the ClairOS API",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "clairos_http_request_duration_seconds",
    "Latency of HTTP requests processed by the ClairOS API",
    ["method", "path"],
)

UPLOADS = Counter(
    "clairos_uploads_total",
    "Number of upload attempts by result",
    ["result"],
)

TIMER_COMPLETIONS = Counter(
    "clairos_timer_completions_total",
    "Number of timers completed by the background sweep",
)

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "UPLOADS",
    "TIMER_COMPLETIONS",
]

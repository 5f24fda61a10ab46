"""
Observability module for Pollguard.

Provides metrics, structured logging, and request tracing.
"""
from .metrics import (
    rate_limited_total,
    validation_failures_total,
    request_duration_seconds,
    get_metrics,
)
from .logging import redact, setup_logging
from .middleware import RequestTracingMiddleware, MetricsMiddleware

__all__ = [
    "rate_limited_total",
    "validation_failures_total",
    "request_duration_seconds",
    "get_metrics",
    "setup_logging",
    "redact",
    "RequestTracingMiddleware",
    "MetricsMiddleware",
]

"""
Prometheus metrics for Pollguard.

Provides counters, histograms, and gauges for request traffic, rate
limiting and input validation.
"""
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST


# Request metrics
request_duration_seconds = Histogram(
    "pollguard_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint", "status"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

request_total = Counter(
    "pollguard_request_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

active_connections_gauge = Gauge(
    "pollguard_active_connections",
    "Current number of active HTTP connections",
)

# Security metrics
rate_limited_total = Counter(
    "pollguard_rate_limited_total",
    "Requests rejected by the rate limiter",
    ["policy"],
)

validation_failures_total = Counter(
    "pollguard_validation_failures_total",
    "Form submissions rejected by input validation",
    ["field"],
)

# Poll metrics
polls_created_total = Counter(
    "pollguard_polls_created_total",
    "Total number of polls created",
)

votes_total = Counter(
    "pollguard_votes_total",
    "Total number of votes recorded",
)


def get_metrics() -> bytes:
    """
    Generate Prometheus metrics output.

    Returns:
        Prometheus metrics in text format
    """
    return generate_latest()


def get_metrics_content_type() -> str:
    return CONTENT_TYPE_LATEST


def record_rate_limited(policy: str) -> None:
    """Record a rate limit rejection."""
    rate_limited_total.labels(policy=policy).inc()


def record_validation_failure(field: str) -> None:
    """Record a rejected form field."""
    validation_failures_total.labels(field=field).inc()


def record_poll_created() -> None:
    polls_created_total.inc()


def record_vote() -> None:
    votes_total.inc()

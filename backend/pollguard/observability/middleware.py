"""
Middleware for request tracing and metrics collection.
"""
import logging
import re
import time
from typing import Callable
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .metrics import (
    active_connections_gauge,
    request_duration_seconds,
    request_total,
)

logger = logging.getLogger("pollguard.middleware")

_UUID_SEGMENT = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)
_NUMERIC_SEGMENT = re.compile(r"/\d+(?=/|$)")


def normalize_path(path: str) -> str:
    """Replace poll ids in a path with a placeholder to bound label cardinality."""
    path = _UUID_SEGMENT.sub("{id}", path)
    return _NUMERIC_SEGMENT.sub("/{id}", path)


class RequestTracingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds trace IDs to requests.

    Reuses X-Trace-ID or X-Request-ID from the client, or generates one.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        trace_id = (
            request.headers.get("X-Trace-ID")
            or request.headers.get("X-Request-ID")
            or str(uuid4())
        )
        request.state.trace_id = trace_id

        response = await call_next(request)
        response.headers["X-Trace-ID"] = trace_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Middleware that collects request metrics.

    Records request duration, request count by method/endpoint/status,
    and active connections. Rate limited requests are counted too,
    with status 429.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path == "/metrics":
            return await call_next(request)

        active_connections_gauge.inc()
        start_time = time.perf_counter()
        status_code = 500

        try:
            response = await call_next(request)
            status_code = response.status_code
        finally:
            duration = time.perf_counter() - start_time
            endpoint = normalize_path(request.url.path)

            request_duration_seconds.labels(
                method=request.method,
                endpoint=endpoint,
                status=str(status_code),
            ).observe(duration)
            request_total.labels(
                method=request.method,
                endpoint=endpoint,
                status=str(status_code),
            ).inc()
            active_connections_gauge.dec()

            if status_code >= 500:
                logger.error(
                    "Request failed",
                    extra={
                        "trace_id": getattr(request.state, "trace_id", None),
                        "path": request.url.path,
                    },
                )

        return response

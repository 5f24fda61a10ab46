"""
Request-intercepting security middleware.

Rate limits every request, then adds the security headers and the
Content Security Policy to allowed responses.
"""
import logging
from typing import Callable, Iterable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from ..observability.metrics import record_rate_limited
from .headers import apply_security_headers
from .rate_limit import RateLimiter, get_client_identifier, rate_limit_response

logger = logging.getLogger("pollguard.security.middleware")

DEFAULT_EXEMPT_PATHS = ("/healthz", "/metrics")


class SecurityMiddleware(BaseHTTPMiddleware):
    """
    Rate limiting and security headers for every request.

    The limiter is read from app.state.rate_limiter so it can be swapped
    at startup or in tests.
    """

    def __init__(self, app, exempt_paths: Iterable[str] = DEFAULT_EXEMPT_PATHS):
        super().__init__(app)
        self.exempt_paths = frozenset(exempt_paths)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path

        if path not in self.exempt_paths:
            limiter: RateLimiter = request.app.state.rate_limiter
            client = get_client_identifier(request)
            rejected = await limiter.evaluate(client, path)

            if rejected is not None:
                logger.warning(
                    f"Rate limit exceeded for {client}",
                    extra={
                        "client": client,
                        "path": path,
                        "policy": rejected.name,
                    },
                )
                record_rate_limited(rejected.name)
                return rate_limit_response(rejected)

        response = await call_next(request)
        apply_security_headers(response.headers)
        return response

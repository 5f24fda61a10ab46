"""
Fixed-window rate limiting for Pollguard.

Each request is counted against a general policy, and requests to
authentication routes are first counted against a stricter auth policy.
The two policies are independent counters keyed by (policy, client).

Counting is done by the limits library that backs slowapi: in process
memory for a single worker, or in Redis when RATE_LIMIT_STORAGE_URL is
set so that every worker shares the same windows.
"""
import logging
from typing import Optional

from fastapi import Request
from limits import RateLimitItem, RateLimitItemPerSecond
from limits.aio.storage import Storage
from limits.aio.strategies import FixedWindowRateLimiter
from limits.storage import storage_from_string
from slowapi.util import get_remote_address
from starlette.responses import PlainTextResponse, Response

from .policy import (
    AUTH_RATE_LIMIT,
    AUTH_ROUTE_PREFIXES,
    GENERAL_RATE_LIMIT,
    RateLimitPolicy,
)

logger = logging.getLogger("pollguard.security.rate_limit")

MEMORY_STORAGE_URI = "async+memory://"
NAMESPACE = "POLLGUARD"


def rate_limit_item(policy: RateLimitPolicy) -> RateLimitItem:
    """The limits item for a policy: max_requests per window_seconds."""
    return RateLimitItemPerSecond(
        policy.max_requests,
        policy.window_seconds,
        namespace=NAMESPACE,
    )


def build_rate_limit_storage(settings) -> Storage:
    """
    Create the counter storage selected by RATE_LIMIT_STORAGE_URL.

    Any limits storage URL is accepted; redis:// URLs are served by the
    async redis-py client.
    """
    url = settings.rate_limit_storage_url
    if not url:
        return storage_from_string(MEMORY_STORAGE_URI)

    if not url.startswith("async+"):
        url = f"async+{url}"
    logger.info("Using shared rate limit storage", extra={"scheme": url.split("://", 1)[0]})
    return storage_from_string(url, implementation="redispy")


class RateLimiter:
    """
    Applies the auth and general policies to a request.

    Usage:
        limiter = RateLimiter(build_rate_limit_storage(settings))
        policy = await limiter.evaluate(client_key, request.url.path)
        if policy is not None:
            return rate_limit_response(policy)
    """

    def __init__(
        self,
        storage: Optional[Storage] = None,
        general_policy: RateLimitPolicy = GENERAL_RATE_LIMIT,
        auth_policy: RateLimitPolicy = AUTH_RATE_LIMIT,
        auth_prefixes: tuple[str, ...] = AUTH_ROUTE_PREFIXES,
    ):
        self.storage = storage if storage is not None else storage_from_string(MEMORY_STORAGE_URI)
        self.strategy = FixedWindowRateLimiter(self.storage)
        self.general_policy = general_policy
        self.auth_policy = auth_policy
        self.auth_prefixes = auth_prefixes

    def is_auth_route(self, path: str) -> bool:
        return path.startswith(self.auth_prefixes)

    async def check(self, policy: RateLimitPolicy, client_key: str) -> bool:
        """
        Count one request against a single policy.

        A client already at the limit is rejected without being counted
        again, so the window keeps the count it reached.

        Returns:
            True if the request is allowed
        """
        item = rate_limit_item(policy)
        if not await self.strategy.test(item, policy.name, client_key):
            return False
        return await self.strategy.hit(item, policy.name, client_key)

    async def evaluate(self, client_key: str, path: str) -> Optional[RateLimitPolicy]:
        """
        Count a request against every policy that applies to its path.

        Returns:
            The policy that rejected the request, or None if it is allowed
        """
        if self.is_auth_route(path):
            if not await self.check(self.auth_policy, client_key):
                return self.auth_policy

        if not await self.check(self.general_policy, client_key):
            return self.general_policy

        return None


def get_client_identifier(request: Request) -> str:
    """
    Get a rate limit key for the client.

    Uses the first X-Forwarded-For entry, then X-Real-IP, and falls
    back to the socket peer address.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        client = forwarded.split(",")[0].strip()
        if client:
            return client

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return get_remote_address(request)


def rate_limit_response(policy: RateLimitPolicy) -> Response:
    """Plain-text 429 response for a request rejected by policy."""
    return PlainTextResponse(
        policy.message,
        status_code=429,
        headers={"Retry-After": str(policy.retry_after)},
    )

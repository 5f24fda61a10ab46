"""
Integration tests for rate limiting and security headers on live routes.
"""
from uuid import uuid4

import pytest

from pollguard.security.headers import generate_csp


SECURITY_HEADER_NAMES = [
    "X-Content-Type-Options",
    "X-Frame-Options",
    "X-XSS-Protection",
    "Referrer-Policy",
    "Permissions-Policy",
    "Content-Security-Policy",
]


class TestSecurityHeaders:
    """Security headers on allowed responses."""

    @pytest.mark.integration
    async def test_headers_on_success(self, client):
        response = await client.get("/healthz")

        assert response.status_code == 200
        assert response.headers["X-Frame-Options"] == "DENY"
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["Content-Security-Policy"] == generate_csp()

    @pytest.mark.integration
    async def test_headers_on_error_responses(self, client):
        response = await client.get(f"/api/polls/{uuid4()}")

        assert response.status_code == 404
        for name in SECURITY_HEADER_NAMES:
            assert name in response.headers

    @pytest.mark.integration
    async def test_trace_id_echoed(self, client):
        response = await client.get("/healthz", headers={"X-Request-ID": "req-42"})
        assert response.headers["X-Trace-ID"] == "req-42"


class TestAuthRateLimit:
    """The stricter policy on authentication routes."""

    @pytest.mark.integration
    async def test_sixth_login_attempt_rejected(self, client):
        for _ in range(5):
            response = await client.post("/auth/login", json={})
            assert response.status_code == 400

        response = await client.post("/auth/login", json={})

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "300"
        assert response.text == "Too many authentication attempts. Please try again later."
        assert "Content-Security-Policy" not in response.headers

    @pytest.mark.integration
    async def test_register_shares_the_auth_counter(self, client):
        for _ in range(5):
            await client.post("/auth/login", json={})

        response = await client.post("/auth/register", json={})
        assert response.status_code == 429

    @pytest.mark.integration
    async def test_other_routes_unaffected(self, client):
        for _ in range(6):
            await client.post("/auth/login", json={})

        response = await client.get(f"/api/polls/{uuid4()}")
        assert response.status_code == 404

    @pytest.mark.integration
    async def test_clients_counted_separately(self, client):
        for _ in range(6):
            await client.post("/auth/login", json={}, headers={"X-Forwarded-For": "203.0.113.1"})

        response = await client.post(
            "/auth/login", json={}, headers={"X-Forwarded-For": "203.0.113.2, 10.0.0.1"}
        )
        assert response.status_code == 400


class TestGeneralRateLimit:
    """The general policy applied to every route."""

    @pytest.mark.integration
    async def test_hundred_and_first_request_rejected(self, client):
        for _ in range(100):
            response = await client.get("/api/polls")
            assert response.status_code == 401

        response = await client.get("/api/polls")

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "900"
        assert response.text == "Too many requests. Please try again later."

    @pytest.mark.integration
    async def test_health_check_exempt(self, client):
        for _ in range(101):
            await client.get("/api/polls")

        response = await client.get("/healthz")
        assert response.status_code == 200

    @pytest.mark.integration
    async def test_rejections_are_counted(self, client):
        for _ in range(6):
            await client.post("/auth/login", json={})

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert 'pollguard_rate_limited_total{policy="auth"}' in response.text

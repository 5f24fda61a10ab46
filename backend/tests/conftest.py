"""
Global pytest fixtures for Pollguard backend tests.
"""
import time
from typing import AsyncGenerator, Optional
from uuid import uuid4

import jwt
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from pollguard import models
from pollguard.auth import AuthProvider, AuthSession, AuthUser, get_auth_provider
from pollguard.config import Settings, get_settings
from pollguard.database import Base, get_session
from pollguard.errors import ProviderError
from pollguard.main import app
from pollguard.security.rate_limit import RateLimiter


# Test database URL (SQLite in-memory for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
TEST_JWT_SECRET = "test-secret-for-pollguard-tests"


class FakeClock:
    """Manually advanced stand-in for time.time in rate limit tests."""

    def __init__(self, start: float):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeAuthProvider(AuthProvider):
    """In-memory auth provider recording what it was handed."""

    def __init__(self):
        self.users: dict[str, dict] = {}
        self.signed_out: list[str] = []

    async def sign_in(self, email: str, password: str) -> AuthSession:
        user = self.users.get(email)
        if user is None or user["password"] != password:
            raise ProviderError("Invalid login credentials", status_code=400)
        auth_user = AuthUser(id=user["id"], email=email, name=user["name"])
        return AuthSession(
            access_token=make_token(auth_user.id, email),
            refresh_token="refresh",
            expires_in=3600,
            user=auth_user,
        )

    async def sign_up(self, email: str, password: str, name: str) -> AuthUser:
        if email in self.users:
            raise ProviderError("User already registered", status_code=400)
        user_id = str(uuid4())
        self.users[email] = {"id": user_id, "password": password, "name": name}
        return AuthUser(id=user_id, email=email, name=name)

    async def sign_out(self, access_token: str) -> None:
        self.signed_out.append(access_token)


def make_token(
    user_id: str,
    email: str = "user@example.com",
    secret: str = TEST_JWT_SECRET,
    expires_in: int = 3600,
) -> str:
    now = int(time.time())
    return jwt.encode(
        {
            "sub": user_id,
            "email": email,
            "aud": "authenticated",
            "role": "authenticated",
            "iat": now,
            "exp": now + expires_in,
        },
        secret,
        algorithm="HS256",
    )


@pytest.fixture
def clock(monkeypatch) -> FakeClock:
    """Freeze time.time at the current instant until advanced."""
    fake = FakeClock(start=time.time())
    monkeypatch.setattr(time, "time", fake)
    return fake


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        database_url=TEST_DATABASE_URL,
        auth_jwt_secret=TEST_JWT_SECRET,
        allowed_origins=["*"],
    )


@pytest.fixture
async def async_engine():
    """Create async engine for tests using SQLite in-memory."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def async_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new database session for each test."""
    session_factory = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session


@pytest.fixture
def auth_provider() -> FakeAuthProvider:
    return FakeAuthProvider()


@pytest.fixture
def rate_limiter() -> RateLimiter:
    """Fresh limiter per test so counters never leak between tests."""
    return RateLimiter()


@pytest.fixture
async def client(async_engine, test_settings, auth_provider, rate_limiter) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API testing."""
    session_factory = async_sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_auth_provider] = lambda: auth_provider

    previous_limiter = app.state.rate_limiter
    app.state.rate_limiter = rate_limiter

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.state.rate_limiter = previous_limiter
    app.dependency_overrides.clear()


@pytest.fixture
def user_id() -> str:
    return str(uuid4())


@pytest.fixture
def auth_headers(user_id) -> dict:
    """Headers with a valid access token."""
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def other_auth_headers() -> dict:
    return {"Authorization": f"Bearer {make_token(str(uuid4()), 'other@example.com')}"}


class PollFactory:
    """Factory for creating poll rows directly in the store."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        user_id: str,
        question: str = "Favourite colour?",
        options: Optional[list[str]] = None,
    ) -> models.Poll:
        poll = models.Poll(
            user_id=user_id,
            question=question,
            options=options or ["Red", "Blue"],
        )
        self.session.add(poll)
        await self.session.commit()
        await self.session.refresh(poll)
        return poll

    async def make_admin(self, user_id: str) -> None:
        self.session.add(models.Profile(id=user_id, role="admin"))
        await self.session.commit()


@pytest.fixture
def poll_factory(async_session) -> PollFactory:
    return PollFactory(async_session)

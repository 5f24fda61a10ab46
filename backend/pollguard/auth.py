"""
Authentication hand-off to the hosted auth provider.

Sign-in, sign-up and sign-out are forwarded to a GoTrue-compatible
auth service. Access tokens it issues are verified locally with the
shared JWT secret on every request.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx
import jwt
from fastapi import Cookie, Depends, Header

from .config import Settings, get_settings
from .errors import NotAuthenticated, ProviderError

logger = logging.getLogger("pollguard.auth")

ACCESS_TOKEN_COOKIE = "access_token"


@dataclass
class AuthUser:
    """Identity decoded from a provider access token."""
    id: str
    email: str = ""
    name: Optional[str] = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class AuthSession:
    """Tokens returned by a successful sign-in."""
    access_token: str
    refresh_token: Optional[str]
    expires_in: int
    user: AuthUser


class AuthProvider(ABC):
    """Abstract client for the hosted auth provider."""

    @abstractmethod
    async def sign_in(self, email: str, password: str) -> AuthSession:
        pass

    @abstractmethod
    async def sign_up(self, email: str, password: str, name: str) -> AuthUser:
        pass

    @abstractmethod
    async def sign_out(self, access_token: str) -> None:
        pass

    async def close(self) -> None:
        pass


def _provider_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Auth provider returned {response.status_code}"
    return (
        body.get("error_description")
        or body.get("msg")
        or body.get("message")
        or body.get("error")
        or f"Auth provider returned {response.status_code}"
    )


def _user_from_payload(payload: dict) -> AuthUser:
    metadata = payload.get("user_metadata") or {}
    return AuthUser(
        id=str(payload["id"]),
        email=payload.get("email", ""),
        name=metadata.get("name"),
        metadata=metadata,
    )


class GoTrueAuthProvider(AuthProvider):
    """Auth provider speaking the GoTrue REST API over httpx."""

    def __init__(self, base_url: str, api_key: Optional[str] = None, timeout: float = 10.0):
        headers = {"apikey": api_key} if api_key else {}
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
        )

    async def _post(self, path: str, json: Optional[dict] = None, **kwargs) -> httpx.Response:
        try:
            response = await self._client.post(path, json=json, **kwargs)
        except httpx.HTTPError as exc:
            logger.error(f"Auth provider request failed: {exc}", extra={"path": path})
            raise ProviderError("Authentication service unavailable.", status_code=503) from exc

        if response.is_error:
            message = _provider_message(response)
            status = 400 if response.status_code < 500 else 502
            if response.status_code == 429:
                status = 429
            raise ProviderError(message, status_code=status)
        return response

    async def sign_in(self, email: str, password: str) -> AuthSession:
        response = await self._post(
            "/token",
            json={"email": email, "password": password},
            params={"grant_type": "password"},
        )
        body = response.json()
        return AuthSession(
            access_token=body["access_token"],
            refresh_token=body.get("refresh_token"),
            expires_in=int(body.get("expires_in", 3600)),
            user=_user_from_payload(body["user"]),
        )

    async def sign_up(self, email: str, password: str, name: str) -> AuthUser:
        response = await self._post(
            "/signup",
            json={"email": email, "password": password, "data": {"name": name}},
        )
        body = response.json()
        # Autoconfirm deployments answer with a session instead of a user
        return _user_from_payload(body.get("user", body))

    async def sign_out(self, access_token: str) -> None:
        await self._post("/logout", headers={"Authorization": f"Bearer {access_token}"})

    async def close(self) -> None:
        await self._client.aclose()


class TokenVerifier:
    """Verifies provider-issued HS256 access tokens."""

    def __init__(self, secret: str, audience: str):
        self.secret = secret
        self.audience = audience

    def verify(self, token: str) -> AuthUser:
        """Decode a token. Raises NotAuthenticated if it is invalid."""
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=["HS256"],
                audience=self.audience,
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise NotAuthenticated("Session expired. Please log in again.")
        except jwt.InvalidTokenError as e:
            logger.info(f"Rejected access token: {e}")
            raise NotAuthenticated("Invalid session. Please log in again.")

        metadata = payload.get("user_metadata") or {}
        return AuthUser(
            id=str(payload["sub"]),
            email=payload.get("email", ""),
            name=metadata.get("name"),
            metadata=metadata,
        )


_provider: Optional[AuthProvider] = None


def get_auth_provider() -> AuthProvider:
    """Get or create the auth provider singleton."""
    global _provider
    if _provider is None:
        settings = get_settings()
        _provider = GoTrueAuthProvider(
            settings.auth_url,
            api_key=settings.auth_api_key,
            timeout=settings.auth_timeout_seconds,
        )
    return _provider


async def close_auth_provider() -> None:
    global _provider
    if _provider is not None:
        await _provider.close()
        _provider = None


def get_token_verifier(settings: Settings = Depends(get_settings)) -> TokenVerifier:
    return TokenVerifier(settings.auth_jwt_secret, settings.auth_jwt_audience)


def get_access_token(
    authorization: Optional[str] = Header(default=None),
    access_token: Optional[str] = Cookie(default=None, alias=ACCESS_TOKEN_COOKIE),
) -> Optional[str]:
    """Bearer token from the Authorization header, else the session cookie."""
    if authorization and authorization.startswith("Bearer "):
        return authorization.split(" ", 1)[1].strip() or None
    return access_token


async def get_optional_user(
    token: Optional[str] = Depends(get_access_token),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Optional[AuthUser]:
    """Current user if a valid token was sent, None otherwise."""
    if not token:
        return None
    try:
        return verifier.verify(token)
    except NotAuthenticated:
        return None

"""
Login, registration and logout routes.

All live under /auth so the rate limiter applies the stricter
authentication policy to them.
"""
from fastapi import APIRouter, Depends, Response

from .. import schemas
from ..actions import auth_actions
from ..auth import ACCESS_TOKEN_COOKIE, AuthProvider, get_access_token, get_auth_provider
from ..config import Settings, get_settings

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=schemas.ActionOut)
async def login(
    payload: schemas.LoginIn,
    response: Response,
    provider: AuthProvider = Depends(get_auth_provider),
    settings: Settings = Depends(get_settings),
):
    session = await auth_actions.login(provider, payload.email, payload.password)
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        session.access_token,
        httponly=True,
        secure=settings.environment == "production",
        samesite="lax",
        max_age=session.expires_in,
    )
    return {"error": None}


@router.post("/register", response_model=schemas.ActionOut, status_code=201)
async def register(
    payload: schemas.RegisterIn,
    provider: AuthProvider = Depends(get_auth_provider),
):
    await auth_actions.register(provider, payload.name, payload.email, payload.password)
    return {"error": None}


@router.post("/logout", response_model=schemas.ActionOut)
async def logout(
    response: Response,
    token: str | None = Depends(get_access_token),
    provider: AuthProvider = Depends(get_auth_provider),
):
    await auth_actions.logout(provider, token)
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return {"error": None}

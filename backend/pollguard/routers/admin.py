from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas
from ..actions import poll_actions
from ..auth import AuthUser, get_optional_user
from ..database import get_session

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/polls", response_model=schemas.PollListOut)
async def list_all_polls(
    session: AsyncSession = Depends(get_session),
    user: Optional[AuthUser] = Depends(get_optional_user),
):
    """Every poll, for moderation. Deletion goes through DELETE /polls/{id}."""
    polls = await poll_actions.get_all_polls(session, user)
    return {"polls": polls, "error": None}

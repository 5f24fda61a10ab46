"""
Poll REST routes.

Create and update take form data (question, repeated options); votes
take JSON ({"pollId", "optionIndex"}).
"""
from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from .. import schemas
from ..actions import poll_actions
from ..auth import AuthUser, get_optional_user
from ..config import Settings, get_settings
from ..database import get_session

router = APIRouter(prefix="/polls", tags=["polls"])


async def _read_poll_form(request: Request) -> tuple[Optional[str], list[str]]:
    form = await request.form()
    return form.get("question"), list(form.getlist("options"))


@router.post("", response_model=schemas.ActionOut, status_code=201)
async def create_poll(
    request: Request,
    session: AsyncSession = Depends(get_session),
    user: Optional[AuthUser] = Depends(get_optional_user),
):
    question, options = await _read_poll_form(request)
    await poll_actions.create_poll(session, user, question, options)
    return {"error": None}


@router.get("", response_model=schemas.PollListOut)
async def list_my_polls(
    session: AsyncSession = Depends(get_session),
    user: Optional[AuthUser] = Depends(get_optional_user),
):
    polls = await poll_actions.get_user_polls(session, user)
    return {"polls": polls, "error": None}


@router.post("/vote", response_model=schemas.ActionOut)
async def vote(
    payload: schemas.VoteIn,
    session: AsyncSession = Depends(get_session),
    user: Optional[AuthUser] = Depends(get_optional_user),
    settings: Settings = Depends(get_settings),
):
    await poll_actions.submit_vote(
        session,
        user,
        payload.poll_id,
        payload.option_index,
        max_options=settings.max_vote_options,
    )
    return {"error": None}


@router.get("/{poll_id}", response_model=schemas.PollResultOut)
async def get_poll(poll_id: str, session: AsyncSession = Depends(get_session)):
    poll = await poll_actions.get_poll_by_id(session, poll_id)
    return {"poll": poll, "error": None}


@router.put("/{poll_id}", response_model=schemas.ActionOut)
async def update_poll(
    poll_id: str,
    request: Request,
    session: AsyncSession = Depends(get_session),
    user: Optional[AuthUser] = Depends(get_optional_user),
):
    question, options = await _read_poll_form(request)
    await poll_actions.update_poll(session, user, poll_id, question, options)
    return {"error": None}


@router.delete("/{poll_id}", response_model=schemas.ActionOut)
async def delete_poll(
    poll_id: str,
    session: AsyncSession = Depends(get_session),
    user: Optional[AuthUser] = Depends(get_optional_user),
):
    await poll_actions.delete_poll(session, user, poll_id)
    return {"error": None}

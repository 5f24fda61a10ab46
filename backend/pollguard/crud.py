from typing import Optional
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from . import models


async def create_poll(
    session: AsyncSession,
    user_id: str,
    question: str,
    options: list[str],
) -> models.Poll:
    poll = models.Poll(user_id=user_id, question=question, options=options)
    session.add(poll)
    await session.commit()
    await session.refresh(poll)
    return poll


async def list_polls(session: AsyncSession, user_id: Optional[str] = None) -> list[models.Poll]:
    stmt = select(models.Poll)
    if user_id is not None:
        stmt = stmt.where(models.Poll.user_id == user_id)
    stmt = stmt.order_by(models.Poll.created_at.desc())
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_poll(session: AsyncSession, poll_id: UUID) -> Optional[models.Poll]:
    result = await session.execute(select(models.Poll).where(models.Poll.id == poll_id))
    return result.scalar_one_or_none()


async def update_poll(
    session: AsyncSession,
    poll_id: UUID,
    user_id: str,
    question: str,
    options: list[str],
) -> int:
    # Owner filter in the statement itself, as row-level security would apply it
    result = await session.execute(
        update(models.Poll)
        .where(models.Poll.id == poll_id, models.Poll.user_id == user_id)
        .values(question=question, options=options)
    )
    await session.commit()
    return result.rowcount


async def delete_poll(session: AsyncSession, poll_id: UUID) -> None:
    await session.execute(delete(models.Vote).where(models.Vote.poll_id == poll_id))
    await session.execute(delete(models.Poll).where(models.Poll.id == poll_id))
    await session.commit()


async def create_vote(
    session: AsyncSession,
    poll_id: UUID,
    user_id: Optional[str],
    option_index: int,
) -> models.Vote:
    vote = models.Vote(poll_id=poll_id, user_id=user_id, option_index=option_index)
    session.add(vote)
    await session.commit()
    await session.refresh(vote)
    return vote


async def get_profile_role(session: AsyncSession, user_id: str) -> Optional[str]:
    result = await session.execute(select(models.Profile.role).where(models.Profile.id == user_id))
    return result.scalar_one_or_none()

"""
Poll management actions.

Every user-supplied string is sanitized and length-checked against
INPUT_LIMITS before it is handed to the poll store.
"""
import logging
from typing import Any, Iterable, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from .. import crud, models
from ..auth import AuthUser
from ..errors import InvalidInput, NotAuthenticated, PermissionDenied, PollNotFound
from ..observability.metrics import record_poll_created, record_validation_failure, record_vote
from ..security.policy import INPUT_LIMITS, FieldKind
from ..security.validators import is_valid_option_index, sanitize_input, validate_length

logger = logging.getLogger("pollguard.actions.polls")

ADMIN_ROLE = "admin"


def _reject(message: str, field: str) -> InvalidInput:
    record_validation_failure(field)
    logger.info("Rejected poll input", extra={"field": field})
    return InvalidInput(message, field=field)


def clean_poll_form(question: Any, options: Iterable[Any]) -> tuple[str, list[str]]:
    """
    Sanitize and validate a poll question and its options.

    Empty options are dropped before the two-option minimum is checked.

    Returns:
        (question, options) as they should be stored

    Raises:
        InvalidInput: If a value is missing or out of bounds
    """
    options = [option for option in options if option]

    if not question or len(options) < 2:
        raise _reject("Please provide a question and at least two options.", "options")

    clean_question = sanitize_input(question)
    clean_options = [sanitize_input(option) for option in options]

    question_policy = INPUT_LIMITS[FieldKind.QUESTION]
    if not validate_length(clean_question, question_policy.min_length, question_policy.max_length):
        raise _reject(question_policy.length_error(), FieldKind.QUESTION.value)

    option_policy = INPUT_LIMITS[FieldKind.OPTION]
    if any(
        not validate_length(option, option_policy.min_length, option_policy.max_length)
        for option in clean_options
    ):
        raise _reject(option_policy.length_error(plural=True), FieldKind.OPTION.value)

    return clean_question, clean_options


def parse_poll_id(poll_id: Any) -> UUID:
    """
    Validate a poll identifier.

    Raises:
        InvalidInput: If the identifier is empty or too long
        PollNotFound: If it cannot name any poll
    """
    policy = INPUT_LIMITS[FieldKind.POLL_ID]
    if not poll_id or not validate_length(poll_id, policy.min_length, policy.max_length):
        raise _reject("Invalid poll ID.", FieldKind.POLL_ID.value)

    try:
        return UUID(poll_id.strip())
    except ValueError:
        raise PollNotFound()


async def is_admin(session: AsyncSession, user: AuthUser) -> bool:
    return await crud.get_profile_role(session, user.id) == ADMIN_ROLE


async def create_poll(
    session: AsyncSession,
    user: Optional[AuthUser],
    question: Any,
    options: Iterable[Any],
) -> models.Poll:
    clean_question, clean_options = clean_poll_form(question, options)

    if user is None:
        raise NotAuthenticated("You must be logged in to create a poll.")

    poll = await crud.create_poll(session, user.id, clean_question, clean_options)
    record_poll_created()
    logger.info("Poll created", extra={"poll_id": str(poll.id), "user_id": user.id})
    return poll


async def get_user_polls(session: AsyncSession, user: Optional[AuthUser]) -> list[models.Poll]:
    if user is None:
        raise NotAuthenticated("Not authenticated")
    return await crud.list_polls(session, user_id=user.id)


async def get_poll_by_id(session: AsyncSession, poll_id: Any) -> models.Poll:
    poll = await crud.get_poll(session, parse_poll_id(poll_id))
    if poll is None:
        raise PollNotFound()
    return poll


async def submit_vote(
    session: AsyncSession,
    user: Optional[AuthUser],
    poll_id: Any,
    option_index: Any,
    max_options: int = 100,
) -> models.Vote:
    """
    Record a vote. Anonymous votes are stored without a user id.
    """
    policy = INPUT_LIMITS[FieldKind.POLL_ID]
    if not poll_id or not validate_length(poll_id, policy.min_length, policy.max_length):
        raise _reject("Invalid poll ID.", FieldKind.POLL_ID.value)

    if not is_valid_option_index(option_index, max_options):
        raise _reject("Invalid option index.", "option_index")

    poll = await get_poll_by_id(session, poll_id)
    if option_index >= len(poll.options):
        raise _reject("Invalid option index.", "option_index")

    vote = await crud.create_vote(
        session,
        poll.id,
        user.id if user else None,
        int(option_index),
    )
    record_vote()
    return vote


async def update_poll(
    session: AsyncSession,
    user: Optional[AuthUser],
    poll_id: Any,
    question: Any,
    options: Iterable[Any],
) -> None:
    """Update a poll the user owns. Polls owned by others are left untouched."""
    clean_question, clean_options = clean_poll_form(question, options)

    if user is None:
        raise NotAuthenticated("You must be logged in to update a poll.")

    updated = await crud.update_poll(
        session, parse_poll_id(poll_id), user.id, clean_question, clean_options
    )
    if not updated:
        logger.info(
            "Poll update matched no owned poll",
            extra={"poll_id": str(poll_id), "user_id": user.id},
        )


async def delete_poll(session: AsyncSession, user: Optional[AuthUser], poll_id: Any) -> None:
    """Delete a poll owned by the user, or any poll for an admin."""
    parsed_id = parse_poll_id(poll_id)

    if user is None:
        raise NotAuthenticated("You must be logged in to delete a poll.")

    poll = await crud.get_poll(session, parsed_id)
    if poll is None:
        raise PollNotFound()

    if poll.user_id != user.id and not await is_admin(session, user):
        raise PermissionDenied("You can only delete your own polls.")

    await crud.delete_poll(session, parsed_id)
    logger.info("Poll deleted", extra={"poll_id": str(parsed_id), "user_id": user.id})


async def get_all_polls(session: AsyncSession, user: Optional[AuthUser]) -> list[models.Poll]:
    """Moderation listing of every poll."""
    if user is None:
        raise NotAuthenticated("Not authenticated")
    if not await is_admin(session, user):
        raise PermissionDenied("Admin access required.")
    return await crud.list_polls(session)

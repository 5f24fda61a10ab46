"""
Authentication actions.

Emails and display names are sanitized and validated before they reach
the auth provider. Passwords are passed through untouched so the
provider hashes exactly what the user typed.
"""
import logging
from typing import Any

from ..auth import AuthProvider, AuthSession, AuthUser
from ..errors import InvalidInput
from ..observability.metrics import record_validation_failure
from ..security.policy import INPUT_LIMITS, FieldKind
from ..security.validators import (
    is_strong_password,
    is_valid_email,
    sanitize_input,
    validate_length,
)

logger = logging.getLogger("pollguard.actions.auth")

WEAK_PASSWORD_MESSAGE = (
    "Password must be at least 8 characters long and contain at least one "
    "uppercase letter, one lowercase letter, and one number."
)


def _reject(message: str, field: FieldKind) -> InvalidInput:
    record_validation_failure(field.value)
    return InvalidInput(message, field=field.value)


def _clean_email(email: Any) -> str:
    clean_email = sanitize_input(email)

    if not is_valid_email(clean_email):
        raise _reject("Please enter a valid email address.", FieldKind.EMAIL)

    policy = INPUT_LIMITS[FieldKind.EMAIL]
    if not validate_length(clean_email, policy.min_length, policy.max_length):
        raise _reject(policy.length_error(), FieldKind.EMAIL)

    return clean_email


async def login(provider: AuthProvider, email: Any, password: Any) -> AuthSession:
    if not email or not password:
        raise InvalidInput("Email and password are required.")

    clean_email = _clean_email(email)

    if not isinstance(password, str) or len(password) < 1:
        raise _reject("Password is required.", FieldKind.PASSWORD)

    session = await provider.sign_in(clean_email, password)
    logger.info("User logged in", extra={"user_id": session.user.id})
    return session


async def register(provider: AuthProvider, name: Any, email: Any, password: Any) -> AuthUser:
    if not name or not email or not password:
        raise InvalidInput("Name, email, and password are required.")

    clean_name = sanitize_input(name)

    name_policy = INPUT_LIMITS[FieldKind.NAME]
    if not validate_length(clean_name, name_policy.min_length, name_policy.max_length):
        raise _reject(name_policy.length_error(), FieldKind.NAME)

    clean_email = _clean_email(email)

    password_policy = INPUT_LIMITS[FieldKind.PASSWORD]
    if not is_strong_password(password) or not validate_length(
        password, password_policy.min_length, password_policy.max_length
    ):
        raise _reject(WEAK_PASSWORD_MESSAGE, FieldKind.PASSWORD)

    user = await provider.sign_up(clean_email, password, clean_name)
    logger.info("User registered", extra={"user_id": user.id})
    return user


async def logout(provider: AuthProvider, access_token: str | None) -> None:
    if access_token:
        await provider.sign_out(access_token)

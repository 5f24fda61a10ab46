"""
Input validation and sanitization utilities for Pollguard.

Every function here is total: wrong-typed or malformed input yields
False (or an empty string), never an exception. Callers pull the
bounds from INPUT_LIMITS and surface their own messages.
"""
import math
import re
from typing import Any

from .policy import DANGEROUS_PATTERNS, PASSWORD_REQUIREMENTS

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

# Versions 1-5, RFC 4122 variant
UUID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-[1-5][0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}",
    re.IGNORECASE,
)

UPPERCASE = re.compile(r"[A-Z]")
LOWERCASE = re.compile(r"[a-z]")
DIGIT = re.compile(r"[0-9]")


def _strip_patterns(value: str) -> str:
    for pattern in DANGEROUS_PATTERNS:
        value = pattern.sub("", value)
    return value


def sanitize_input(value: Any) -> str:
    """
    Remove active-content markup from free text.

    Trims the value and strips every dangerous pattern. The pass is
    repeated until the text is stable, so removing one match cannot
    leave a newly spliced match behind.

    Args:
        value: User-supplied value

    Returns:
        Sanitized string, empty for non-string input
    """
    if not isinstance(value, str):
        return ""

    previous = None
    sanitized = value
    while sanitized != previous:
        previous = sanitized
        sanitized = _strip_patterns(sanitized.strip())

    return sanitized


def is_valid_email(value: Any) -> bool:
    """Check that a value has the local@domain.tld shape."""
    if not isinstance(value, str):
        return False
    return EMAIL_PATTERN.fullmatch(value.strip()) is not None


def is_strong_password(value: Any) -> bool:
    """
    Check password strength against PASSWORD_REQUIREMENTS.

    Only the minimum length is checked here; the maximum is enforced
    with validate_length by the caller.
    """
    if not isinstance(value, str):
        return False

    rules = PASSWORD_REQUIREMENTS
    if len(value) < rules.min_length:
        return False
    if rules.require_uppercase and not UPPERCASE.search(value):
        return False
    if rules.require_lowercase and not LOWERCASE.search(value):
        return False
    if rules.require_number and not DIGIT.search(value):
        return False

    return True


def validate_length(value: Any, min_length: int, max_length: int) -> bool:
    """
    Validate the trimmed length of a string.

    Args:
        value: String to check
        min_length: Inclusive lower bound
        max_length: Inclusive upper bound

    Returns:
        True if min_length <= len(value.strip()) <= max_length
    """
    if not isinstance(value, str):
        return False
    return min_length <= len(value.strip()) <= max_length


def is_valid_uuid(value: Any) -> bool:
    """Validate a canonical 8-4-4-4-12 UUID string."""
    if not isinstance(value, str):
        return False
    return UUID_PATTERN.fullmatch(value) is not None


def is_valid_option_index(index: Any, max_options: int) -> bool:
    """
    Validate a vote option index.

    Integral floats are accepted because JSON numbers decode to float
    when written as 1.0; booleans are rejected.
    """
    if isinstance(index, bool):
        return False
    if isinstance(index, float):
        if not math.isfinite(index) or not index.is_integer():
            return False
    elif not isinstance(index, int):
        return False
    return 0 <= index < max_options

"""
Security module for Pollguard.

Provides input sanitization, validation, rate limiting and response
security headers.
"""
from .headers import apply_security_headers, generate_csp
from .middleware import SecurityMiddleware
from .policy import (
    AUTH_RATE_LIMIT,
    GENERAL_RATE_LIMIT,
    INPUT_LIMITS,
    SECURITY_CONFIG,
    FieldKind,
    FieldPolicy,
    RateLimitPolicy,
)
from .rate_limit import (
    RateLimiter,
    build_rate_limit_storage,
    get_client_identifier,
    rate_limit_item,
)
from .validators import (
    is_strong_password,
    is_valid_email,
    is_valid_option_index,
    is_valid_uuid,
    sanitize_input,
    validate_length,
)

__all__ = [
    "AUTH_RATE_LIMIT",
    "GENERAL_RATE_LIMIT",
    "INPUT_LIMITS",
    "SECURITY_CONFIG",
    "FieldKind",
    "FieldPolicy",
    "RateLimitPolicy",
    "RateLimiter",
    "build_rate_limit_storage",
    "get_client_identifier",
    "rate_limit_item",
    "SecurityMiddleware",
    "apply_security_headers",
    "generate_csp",
    "is_strong_password",
    "is_valid_email",
    "is_valid_option_index",
    "is_valid_uuid",
    "sanitize_input",
    "validate_length",
]

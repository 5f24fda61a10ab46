"""
Static security configuration for Pollguard.

Holds the field length bounds, password rules, rate limit policies,
Content Security Policy directives and response security headers.
Everything here is immutable and read by the validators, the CSP
generator and the rate limiter.
"""
import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class FieldKind(str, Enum):
    """Kinds of user-supplied fields with configured length bounds."""

    NAME = "name"
    EMAIL = "email"
    PASSWORD = "password"
    QUESTION = "question"
    OPTION = "option"
    POLL_ID = "poll_id"


@dataclass(frozen=True)
class FieldPolicy:
    """Inclusive character-length bounds for one field kind."""

    label: str
    min_length: int
    max_length: int

    def __post_init__(self):
        if self.min_length < 0 or self.max_length < 0:
            raise ValueError(f"{self.label} bounds must be non-negative")
        if self.min_length > self.max_length:
            raise ValueError(f"{self.label} min_length exceeds max_length")

    def length_error(self, plural: bool = False) -> str:
        """User-facing message for a value outside the bounds."""
        label = f"{self.label}s" if plural else self.label
        return f"{label} must be between {self.min_length} and {self.max_length} characters."


@dataclass(frozen=True)
class PasswordRequirements:
    min_length: int = 8
    require_uppercase: bool = True
    require_lowercase: bool = True
    require_number: bool = True


@dataclass(frozen=True)
class RateLimitPolicy:
    """Fixed-window limit applied to one class of routes."""

    name: str
    window_seconds: int
    max_requests: int
    message: str

    @property
    def retry_after(self) -> int:
        return self.window_seconds


INPUT_LIMITS: Mapping[FieldKind, FieldPolicy] = MappingProxyType({
    FieldKind.NAME: FieldPolicy("Name", 2, 100),
    FieldKind.EMAIL: FieldPolicy("Email", 3, 254),
    FieldKind.PASSWORD: FieldPolicy("Password", 8, 128),
    FieldKind.QUESTION: FieldPolicy("Question", 3, 500),
    FieldKind.OPTION: FieldPolicy("Option", 1, 200),
    FieldKind.POLL_ID: FieldPolicy("Poll ID", 1, 100),
})

PASSWORD_REQUIREMENTS = PasswordRequirements()

GENERAL_RATE_LIMIT = RateLimitPolicy(
    name="general",
    window_seconds=15 * 60,
    max_requests=100,
    message="Too many requests. Please try again later.",
)

AUTH_RATE_LIMIT = RateLimitPolicy(
    name="auth",
    window_seconds=5 * 60,
    max_requests=5,
    message="Too many authentication attempts. Please try again later.",
)

# Path prefixes that get the stricter authentication policy
AUTH_ROUTE_PREFIXES = ("/login", "/register", "/auth")

# Insertion order is the rendered order of the header
CSP_DIRECTIVES: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "default_src": ("'self'",),
    "script_src": ("'self'", "'unsafe-inline'", "'unsafe-eval'"),
    "style_src": ("'self'", "'unsafe-inline'"),
    "img_src": ("'self'", "data:", "https:"),
    "font_src": ("'self'",),
    "connect_src": ("'self'", "https://*.supabase.co"),
    "frame_ancestors": ("'none'",),
})

SECURITY_HEADERS: Mapping[str, str] = MappingProxyType({
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
})

# Applied in this order by the sanitizer
DANGEROUS_PATTERNS: tuple[re.Pattern, ...] = (
    re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE),
    re.compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.IGNORECASE),
    re.compile(r"<object\b[^<]*(?:(?!</object>)<[^<]*)*</object>", re.IGNORECASE),
    re.compile(r"<embed\b[^<]*(?:(?!</embed>)<[^<]*)*</embed>", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"vbscript:", re.IGNORECASE),
    re.compile(r"data:", re.IGNORECASE),
)


@dataclass(frozen=True)
class SecurityConfig:
    """Aggregate view of the security configuration."""

    # Mapping proxies are unhashable, which dataclasses reject as plain defaults
    input_limits: Mapping[FieldKind, FieldPolicy] = field(default_factory=lambda: INPUT_LIMITS)
    password: PasswordRequirements = PASSWORD_REQUIREMENTS
    general_rate_limit: RateLimitPolicy = GENERAL_RATE_LIMIT
    auth_rate_limit: RateLimitPolicy = AUTH_RATE_LIMIT
    auth_route_prefixes: tuple[str, ...] = AUTH_ROUTE_PREFIXES
    csp: Mapping[str, tuple[str, ...]] = field(default_factory=lambda: CSP_DIRECTIVES)
    headers: Mapping[str, str] = field(default_factory=lambda: SECURITY_HEADERS)
    dangerous_patterns: tuple[re.Pattern, ...] = DANGEROUS_PATTERNS


SECURITY_CONFIG = SecurityConfig()

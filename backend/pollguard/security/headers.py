"""
Content Security Policy rendering and response security headers.
"""
import re
from typing import Mapping, MutableMapping, Sequence

from .policy import CSP_DIRECTIVES, SECURITY_HEADERS

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def to_kebab_case(name: str) -> str:
    """Convert a snake_case or camelCase directive key to its wire form."""
    return _CAMEL_BOUNDARY.sub("-", name).replace("_", "-").lower()


def generate_csp(directives: Mapping[str, Sequence[str]] = CSP_DIRECTIVES) -> str:
    """
    Render a Content-Security-Policy header value.

    Directives are emitted in the mapping's insertion order, one
    "name source source..." clause each, joined with "; ".
    """
    clauses = []
    for directive, sources in directives.items():
        clauses.append(f"{to_kebab_case(directive)} {' '.join(sources)}")
    return "; ".join(clauses)


def apply_security_headers(headers: MutableMapping[str, str]) -> None:
    """Set the static security headers and the CSP on a response."""
    for name, value in SECURITY_HEADERS.items():
        headers[name] = value
    headers["Content-Security-Policy"] = generate_csp()

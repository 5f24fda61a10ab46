"""
Exceptions raised by Pollguard request handling.

Each carries the user-facing message returned in the {"error": ...}
body and the HTTP status it maps to.
"""


class PollguardError(Exception):
    """Base exception for request-level failures."""

    status_code = 400

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)


class InvalidInput(PollguardError):
    """Raised when submitted form values fail validation."""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class NotAuthenticated(PollguardError):
    status_code = 401


class PermissionDenied(PollguardError):
    status_code = 403


class PollNotFound(PollguardError):
    status_code = 404

    def __init__(self, message: str = "Poll not found."):
        super().__init__(message)


class ProviderError(PollguardError):
    """Raised when the auth provider or the poll store reports a failure."""

    status_code = 500

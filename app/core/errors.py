"""Domain exceptions raised by services and mapped to HTTP responses in app.api.errors."""


class ServiceError(Exception):
    """Base class for errors that are reported to the client as `{error, message}`."""

    status_code = 500
    error = "Internal server error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthFailed(ServiceError):
    """Missing, wrong or expired credentials (401)."""

    status_code = 401
    error = "Authentication failed"


class Forbidden(ServiceError):
    """Authenticated, but not allowed to perform the operation (403)."""

    status_code = 403
    error = "Access denied"


class NotFound(ServiceError):
    status_code = 404
    error = "Not found"


class ValidationFailed(ServiceError):
    """Bad enum value or entity constraint violation (400). Carries per-field messages."""

    status_code = 400
    error = "Validation failed"

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        self.errors = errors or [message]
        super().__init__(message)


class Conflict(ServiceError):
    """Unique constraint violation, e.g. a taken username (409)."""

    status_code = 409
    error = "Conflict"


class InvalidToken(Exception):
    """Raised by the token codec for tampered, malformed or expired tokens."""

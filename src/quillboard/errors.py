"""Domain errors raised by services and the auth gate.

Each error carries the HTTP status it maps to and a client-safe message.
The exception handlers in quillboard.api.envelope turn them into the
uniform {success: false, error} envelope, so routes never build error
responses by hand.
"""

from typing import Any, Optional


class AppError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[list[dict[str, Any]]] = None,
    ):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    """Request is well-formed JSON but its values are not acceptable."""

    status_code = 400
    default_message = "Validation failed"


class ConstraintViolationError(ValidationError):
    """A write referenced a row that does not exist or broke a constraint."""

    default_message = "Referenced record does not exist"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Authentication required"


class AuthorizationError(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class ConflictError(AppError):
    status_code = 409
    default_message = "Resource already exists"


class InternalError(AppError):
    status_code = 500


class ConfigurationError(RuntimeError):
    """Server is missing required configuration (e.g. the JWT secret)."""

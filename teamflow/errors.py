"""
TEAMFLOW Core API - Error Taxonomy

Every error raised by the service layer is an AppError carrying an explicit
ErrorKind and HTTP status. Transport layers switch on ``kind``.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Closed set of domain error kinds."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DUPLICATE_IDENTITY = "DUPLICATE_IDENTITY"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    AUTHENTICATION_REQUIRED = "AUTHENTICATION_REQUIRED"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL_ERROR = "INTERNAL_ERROR"


def rest_status_code(error: "AppError") -> int:
    """HTTP status for the REST surface.

    REST clients get 400 for a duplicate identity, like any other rejected
    registration; GraphQL extensions keep the taxonomy status.
    """
    if error.kind == ErrorKind.DUPLICATE_IDENTITY:
        return 400
    return error.status_code


class AppError(Exception):
    """Base class for domain errors."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR
    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def extensions(self) -> dict[str, Any]:
        """GraphQL error extensions (picked up by graphql-core)."""
        return {"code": self.kind.value, "status": self.status_code}


class ValidationError(AppError):
    kind = ErrorKind.VALIDATION_ERROR
    status_code = 400
    default_message = "Invalid input"


class DuplicateIdentity(AppError):
    kind = ErrorKind.DUPLICATE_IDENTITY
    status_code = 409
    default_message = "User with this email or username already exists"


class InvalidCredentials(AppError):
    kind = ErrorKind.INVALID_CREDENTIALS
    status_code = 401
    default_message = "Invalid credentials"


class AuthenticationRequired(AppError):
    kind = ErrorKind.AUTHENTICATION_REQUIRED
    status_code = 401
    default_message = "Authentication required"


class InvalidToken(AuthenticationRequired):
    default_message = "Invalid or expired token"


class NotFound(AppError):
    kind = ErrorKind.NOT_FOUND
    status_code = 404
    default_message = "Not found"


class InternalError(AppError):
    pass

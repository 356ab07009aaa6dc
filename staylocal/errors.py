"""Domain errors raised by services and converted to HTTP responses.

Each subclass carries the HTTP status and a stable machine-readable code so
that ``staylocal.api.exceptions`` can translate it without a lookup table.
Business-rule violations are always reported synchronously; nothing here is
retried.
"""

from fastapi import status


class StayLocalError(Exception):
    """Base class for all expected, caller-facing failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(StayLocalError):
    """A referenced resource id does not resolve."""

    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class UnauthorizedError(StayLocalError):
    """Missing, invalid or expired credential, or a deactivated account."""

    status_code = status.HTTP_401_UNAUTHORIZED
    code = "unauthorized"


class ForbiddenError(StayLocalError):
    """Authenticated, but lacking the required role or resource ownership."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class ConflictError(StayLocalError):
    """Date overlap, duplicate review, or an invalid state transition."""

    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class ValidationFailure(StayLocalError):
    """Input that is well-formed but violates a business rule."""

    status_code = 422
    code = "validation_failed"

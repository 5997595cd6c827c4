"""
Error taxonomy shared by the service layer.

Services raise these exceptions and never build HTTP responses
themselves.  ``main.create_app`` installs a handler that turns any
``ServiceError`` into the uniform JSON error body using ``status_code``
and ``message``.

``NotFoundError`` deliberately covers both "absent" and "present but
hidden from this caller": a private playlist looks exactly like a
missing one to anybody but its owner.
"""

from fastapi import status


class ServiceError(Exception):
    """Base class for errors reported to API callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "not found"


class ValidationError(ServiceError):
    """Malformed identifiers, out-of-range lengths, bad song lists."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "bad request"


class ConflictError(ServiceError):
    # Reported as 400, the status clients of this API already expect.
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "already exists"


class UnauthorizedError(ServiceError):
    """No usable identity.  Never used for ownership mismatches."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "login required"


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "forbidden"


class InternalError(ServiceError):
    """Storage failure.  The message never carries driver details."""

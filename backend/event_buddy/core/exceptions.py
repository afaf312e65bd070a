"""
Application error taxonomy.

Every error is an HTTPException so services can raise them the same way
FastAPI code raises HTTPException, while the API layer renders one
`{success: false, message, error}` envelope for all of them.
"""

from typing import Optional

from fastapi import HTTPException, status


class AppError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Unexpected error"

    def __init__(self, message: Optional[str] = None, headers: Optional[dict] = None):
        super().__init__(
            status_code=self.status_code,
            detail=message or self.default_message,
            headers=headers,
        )

    @property
    def code(self) -> str:
        return type(self).__name__

    @property
    def message(self) -> str:
        return self.detail


class InvalidInput(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthRequired(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "You must be signed in"


class InvalidCredentials(AppError):
    # Same message for unknown email and wrong password
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You are not allowed to do that"


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


class DuplicateAccount(Conflict):
    default_message = "Email already registered"


class AlreadyJoined(Conflict):
    default_message = "You have already joined this event"


class NotJoined(Conflict):
    default_message = "You have not joined this event"


class OwnerCannotJoin(Conflict):
    default_message = "You cannot join an event you created"


class EventFull(Conflict):
    default_message = "This event is full"


class PayloadTooLarge(AppError):
    status_code = status.HTTP_413_CONTENT_TOO_LARGE
    default_message = "Upload is too large"


class PersistenceInconsistency(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "The change could not be verified, please try again"


class UpstreamError(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Upstream service failed"


class DatabaseError(UpstreamError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Database operation failed"


class ServiceUnavailable(AppError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "Service unavailable"

"""
Booking error taxonomy

Every failure the booking flow can surface is a BookingError subclass
carrying the HTTP status it maps to and whether the user may retry.
"""
from typing import Optional

from fastapi import HTTPException, status


class BookingError(Exception):
    """Base class for user-visible booking failures"""

    status_code: int = status.HTTP_400_BAD_REQUEST
    retryable: bool = False

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_http(self) -> HTTPException:
        """Translate into the HTTPException returned to the client"""
        detail = {
            "error": type(self).__name__,
            "message": self.message,
            "retryable": self.retryable,
        }
        if self.field:
            detail["field"] = self.field
        return HTTPException(status_code=self.status_code, detail=detail)


class ValidationError(BookingError):
    """A form field or guard constraint was violated"""
    status_code = 422


class CapacityExceeded(BookingError):
    """Passenger count does not fit the selected seats"""
    status_code = status.HTTP_409_CONFLICT


class AuthorizationError(BookingError):
    """Caller is not the owner of the resource or is not signed in"""
    status_code = status.HTTP_403_FORBIDDEN


class StoreWriteFailure(BookingError):
    """Firestore write failed; the user may retry manually"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    retryable = True


class NotFound(BookingError):
    """Booking, session or train does not exist"""
    status_code = status.HTTP_404_NOT_FOUND


class InvalidTransition(BookingError):
    """Operation is not allowed in the current booking state"""
    status_code = status.HTTP_409_CONFLICT


class PromptServiceError(BookingError):
    """Prompt-completion service failed or returned output off-schema"""
    status_code = status.HTTP_502_BAD_GATEWAY

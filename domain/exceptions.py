"""Domain Exceptions

Each error class carries the HTTP status the API layer answers with, so the
domain and application layers can raise without knowing about FastAPI.
"""
from typing import Optional


class BookingError(Exception):
    """Base class for all booking subsystem errors"""

    status_code = 500
    default_message = "Booking operation failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidArgumentError(BookingError, ValueError):
    """Malformed input; the caller can resubmit corrected data"""

    status_code = 400
    default_message = "Invalid argument"


class MissingFieldError(InvalidArgumentError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required field: {field}")


class NotFoundError(BookingError):
    status_code = 404

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__(f"{entity} not found")


class ConflictError(BookingError):
    status_code = 409
    default_message = "Room is already booked for the selected dates"


class RoomNotInPropertyError(ConflictError):
    # Answered with 400 to keep the established contract of the booking form.
    status_code = 400
    default_message = "Room does not belong to the specified property"


class InvalidStateError(ConflictError):
    default_message = "Booking status can no longer be changed"


class ConcurrentModificationError(ConflictError):
    default_message = "Booking was modified by another request"


class DuplicateBookingCodeError(ConflictError):
    default_message = "Booking code already exists"


class UnauthorizedError(BookingError):
    status_code = 401
    default_message = "Authentication required"

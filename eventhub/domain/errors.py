"""Domain error codes for the eventhub module."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_DATE = "INVALID_DATE"
    INVALID_TIME = "INVALID_TIME"
    INVALID_EMAIL = "INVALID_EMAIL"
    INVALID_EVENT_ID = "INVALID_EVENT_ID"
    INVALID_BOOKING_ID = "INVALID_BOOKING_ID"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    REFERENCED_EVENT_MISSING = "REFERENCED_EVENT_MISSING"
    EVENT_HAS_BOOKINGS = "EVENT_HAS_BOOKINGS"
    SLUG_CONFLICT = "SLUG_CONFLICT"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationFailedError(DomainError):
    """Raised when input does not satisfy the record schema."""

    def __init__(self, errors: dict[str, Any]) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION_FAILED,
            message="Validation failed: " + ", ".join(sorted(errors)),
        )
        self.errors = errors


class InvalidDateError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_DATE,
            message="Invalid date format; expected a valid date",
        )


class InvalidTimeError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_TIME,
            message="Invalid time format; expected HH:MM or a common human time format",
        )


class InvalidEmailError(DomainError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EMAIL,
            message="Invalid email address",
        )


class InvalidEventIdError(DomainError):
    """Raised when an event ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_EVENT_ID,
            message="Invalid event ID format",
        )


class InvalidBookingIdError(DomainError):
    """Raised when a booking ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_BOOKING_ID,
            message="Invalid booking ID format",
        )


class EventNotFoundError(DomainError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class BookingNotFoundError(DomainError):
    """Raised when a booking is not found."""

    def __init__(self, booking_id: str) -> None:
        super().__init__(
            code=ErrorCode.BOOKING_NOT_FOUND,
            message="Booking not found",
        )
        self.booking_id = booking_id


class ReferencedEventMissingError(DomainError):
    """Raised when a booking points at an event that does not exist."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.REFERENCED_EVENT_MISSING,
            message="Referenced event does not exist",
        )
        self.event_id = event_id


class EventHasBookingsError(DomainError):
    """Raised when deleting an event that still has bookings."""

    def __init__(self, event_id: str, booking_count: int) -> None:
        super().__init__(
            code=ErrorCode.EVENT_HAS_BOOKINGS,
            message="Event has existing bookings",
        )
        self.event_id = event_id
        self.booking_count = booking_count


class SlugConflictError(DomainError):
    """Raised when the storage unique index rejects a slug."""

    def __init__(self, slug: str) -> None:
        super().__init__(
            code=ErrorCode.SLUG_CONFLICT,
            message="Slug already in use",
        )
        self.slug = slug

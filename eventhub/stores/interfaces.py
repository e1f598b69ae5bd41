"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod

from eventhub.domain import Booking, BookingId, Event, EventId


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    async def list_events(self) -> list[Event]:
        """Return all events ordered by created_at descending."""
        ...

    @abstractmethod
    async def get_event(self, event_id: EventId) -> Event | None:
        """Return an event by ID, or None if not found."""
        ...

    @abstractmethod
    async def get_event_by_slug(self, slug: str) -> Event | None:
        """Return an event by slug, or None if not found."""
        ...

    @abstractmethod
    async def event_exists(self, event_id: EventId) -> bool:
        """Check if an event exists."""
        ...

    @abstractmethod
    async def slug_taken(self, slug: str, exclude_id: EventId | None = None) -> bool:
        """Check if another event (not ``exclude_id``) already uses ``slug``."""
        ...

    @abstractmethod
    async def insert_event(self, event: Event) -> None:
        """Persist a new event.

        Raises:
            SlugConflictError: If the slug unique constraint rejects the write.
        """
        ...

    @abstractmethod
    async def replace_event(self, event: Event) -> bool:
        """Overwrite a stored event. Return False if it no longer exists.

        Raises:
            SlugConflictError: If the slug unique constraint rejects the write.
        """
        ...

    @abstractmethod
    async def delete_event(self, event_id: EventId) -> bool:
        """Delete an event. Return False if it did not exist."""
        ...


class BookingStore(ABC):
    """Interface for booking persistence operations."""

    @abstractmethod
    async def get_booking(self, booking_id: BookingId) -> Booking | None:
        """Return a booking by ID, or None if not found."""
        ...

    @abstractmethod
    async def list_bookings_for_event(self, event_id: EventId) -> list[Booking]:
        """Return bookings for an event ordered by created_at ascending."""
        ...

    @abstractmethod
    async def count_bookings_for_event(self, event_id: EventId) -> int:
        ...

    @abstractmethod
    async def insert_booking(self, booking: Booking) -> None:
        ...

    @abstractmethod
    async def delete_booking(self, booking_id: BookingId) -> bool:
        """Delete a booking. Return False if it did not exist."""
        ...

    @abstractmethod
    async def delete_bookings_for_event(self, event_id: EventId) -> int:
        """Delete every booking of an event and return how many were removed."""
        ...

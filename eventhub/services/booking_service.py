"""Booking service.

A booking may only be written while the event it references exists. The
check is point-in-time; EventService.delete_event guards the other side.
"""

import logging
from collections.abc import Mapping
from typing import Any

from eventhub.domain import Booking, BookingId, Email, EventId
from eventhub.domain.errors import (
    BookingNotFoundError,
    EventNotFoundError,
    ReferencedEventMissingError,
)
from eventhub.serializers import BookingInputSerializer, validate_input
from eventhub.services import clock
from eventhub.stores.interfaces import BookingStore, EventStore

logger = logging.getLogger(__name__)


class BookingService:
    """Service for booking operations."""

    def __init__(self, store: BookingStore, event_store: EventStore) -> None:
        self._store = store
        self._event_store = event_store

    async def create_booking(self, data: Mapping[str, Any]) -> Booking:
        """Validate and insert a booking for an existing event.

        Raises:
            ValidationFailedError: If eventId or email is missing or malformed.
            InvalidEventIdError: If eventId is not a valid ObjectId.
            ReferencedEventMissingError: If the event does not exist.
        """
        fields = validate_input(BookingInputSerializer(data=data))
        event_id = EventId.from_string(fields["event_id"])
        if not await self._event_store.event_exists(event_id):
            logger.info("Rejected booking for missing event %s", event_id)
            raise ReferencedEventMissingError(str(event_id))

        now = clock.now()
        booking = Booking(
            id=BookingId.new(),
            event_id=event_id,
            email=Email(fields["email"]),
            created_at=now,
            updated_at=now,
        )
        await self._store.insert_booking(booking)
        return booking

    async def get_booking(self, booking_id: str) -> Booking:
        """Return a booking by ID.

        Raises:
            InvalidBookingIdError: If the booking_id is not a valid ObjectId.
            BookingNotFoundError: If the booking does not exist.
        """
        booking = await self._store.get_booking(BookingId.from_string(booking_id))
        if booking is None:
            raise BookingNotFoundError(booking_id)
        return booking

    async def list_bookings_for_event(self, event_id: str) -> list[Booking]:
        """Return bookings for an event.

        Raises:
            InvalidEventIdError: If the event_id is not a valid ObjectId.
            EventNotFoundError: If the event does not exist.
        """
        parsed = EventId.from_string(event_id)
        if not await self._event_store.event_exists(parsed):
            raise EventNotFoundError(event_id)
        return await self._store.list_bookings_for_event(parsed)

    async def delete_booking(self, booking_id: str) -> None:
        if not await self._store.delete_booking(BookingId.from_string(booking_id)):
            raise BookingNotFoundError(booking_id)

from eventhub.domain.models import Booking, Event
from eventhub.domain.value_objects import (
    BookingId,
    Email,
    EventDate,
    EventId,
    EventTime,
    Slug,
    slugify,
)

__all__ = [
    "Event",
    "Booking",
    "EventId",
    "BookingId",
    "Slug",
    "EventDate",
    "EventTime",
    "Email",
    "slugify",
]

"""Domain models representing persisted state.

These are pure domain objects with no input rules. Schema validation lives
in eventhub/serializers.py; document mapping lives in eventhub/stores.
"""

from dataclasses import dataclass
from datetime import datetime

from eventhub.domain.value_objects import BookingId, Email, EventId

# Scalar string fields that must be non-blank on every Event.
EVENT_TEXT_FIELDS = (
    "title",
    "description",
    "overview",
    "image",
    "venue",
    "location",
    "date",
    "time",
    "mode",
    "audience",
    "organizer",
)
EVENT_LIST_FIELDS = ("agenda", "tags")
EVENT_INPUT_FIELDS = EVENT_TEXT_FIELDS + EVENT_LIST_FIELDS


@dataclass(frozen=True)
class Event:
    """Domain representation of an Event."""

    id: EventId
    title: str
    slug: str
    description: str
    overview: str
    image: str
    venue: str
    location: str
    date: str
    time: str
    mode: str
    audience: str
    agenda: tuple[str, ...]
    organizer: str
    tags: tuple[str, ...]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Booking:
    """Domain representation of a Booking."""

    id: BookingId
    event_id: EventId
    email: Email
    created_at: datetime
    updated_at: datetime

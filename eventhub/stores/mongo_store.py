"""MongoDB implementation of the stores, built on Motor.

Documents keep the field names of the existing ``events`` and ``bookings``
collections (camelCase timestamps, ``eventId``).
"""

import logging
from datetime import datetime, timezone
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError

from eventhub.domain import Booking, BookingId, Email, Event, EventId
from eventhub.domain.errors import SlugConflictError
from eventhub.stores.interfaces import BookingStore, EventStore

logger = logging.getLogger(__name__)

EVENTS_COLLECTION = "events"
BOOKINGS_COLLECTION = "bookings"


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create the unique slug index and the booking eventId index."""
    await db[EVENTS_COLLECTION].create_index([("slug", ASCENDING)], unique=True)
    await db[BOOKINGS_COLLECTION].create_index([("eventId", ASCENDING)])
    logger.debug("Indexes ensured on %s", db.name)


def event_to_document(event: Event) -> dict[str, Any]:
    return {
        "_id": event.id.value,
        "title": event.title,
        "slug": event.slug,
        "description": event.description,
        "overview": event.overview,
        "image": event.image,
        "venue": event.venue,
        "location": event.location,
        "date": event.date,
        "time": event.time,
        "mode": event.mode,
        "audience": event.audience,
        "agenda": list(event.agenda),
        "organizer": event.organizer,
        "tags": list(event.tags),
        "createdAt": event.created_at,
        "updatedAt": event.updated_at,
    }


def event_from_document(doc: dict[str, Any]) -> Event:
    return Event(
        id=EventId(value=doc["_id"]),
        title=doc["title"],
        slug=doc["slug"],
        description=doc["description"],
        overview=doc["overview"],
        image=doc["image"],
        venue=doc["venue"],
        location=doc["location"],
        date=doc["date"],
        time=doc["time"],
        mode=doc["mode"],
        audience=doc["audience"],
        agenda=tuple(doc.get("agenda", ())),
        organizer=doc["organizer"],
        tags=tuple(doc.get("tags", ())),
        created_at=_utc(doc["createdAt"]),
        updated_at=_utc(doc["updatedAt"]),
    )


def booking_to_document(booking: Booking) -> dict[str, Any]:
    return {
        "_id": booking.id.value,
        "eventId": booking.event_id.value,
        "email": str(booking.email),
        "createdAt": booking.created_at,
        "updatedAt": booking.updated_at,
    }


def booking_from_document(doc: dict[str, Any]) -> Booking:
    return Booking(
        id=BookingId(value=doc["_id"]),
        event_id=EventId(value=doc["eventId"]),
        email=Email(value=doc["email"]),
        created_at=_utc(doc["createdAt"]),
        updated_at=_utc(doc["updatedAt"]),
    )


def _utc(value: datetime) -> datetime:
    # Clients opened without tz_aware hand back naive UTC datetimes.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _is_slug_conflict(err: DuplicateKeyError) -> bool:
    key_pattern = (err.details or {}).get("keyPattern") or {}
    if key_pattern:
        return "slug" in key_pattern
    return "slug" in str(err)


class MongoEventStore(EventStore):
    """MongoDB-backed event store."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db[EVENTS_COLLECTION]

    async def list_events(self) -> list[Event]:
        cursor = self._collection.find().sort("createdAt", DESCENDING)
        return [event_from_document(doc) async for doc in cursor]

    async def get_event(self, event_id: EventId) -> Event | None:
        doc = await self._collection.find_one({"_id": event_id.value})
        return event_from_document(doc) if doc else None

    async def get_event_by_slug(self, slug: str) -> Event | None:
        doc = await self._collection.find_one({"slug": slug})
        return event_from_document(doc) if doc else None

    async def event_exists(self, event_id: EventId) -> bool:
        doc = await self._collection.find_one({"_id": event_id.value}, projection={"_id": 1})
        return doc is not None

    async def slug_taken(self, slug: str, exclude_id: EventId | None = None) -> bool:
        query: dict[str, Any] = {"slug": slug}
        if exclude_id is not None:
            query["_id"] = {"$ne": exclude_id.value}
        return await self._collection.count_documents(query, limit=1) > 0

    async def insert_event(self, event: Event) -> None:
        try:
            await self._collection.insert_one(event_to_document(event))
        except DuplicateKeyError as err:
            if _is_slug_conflict(err):
                raise SlugConflictError(event.slug) from err
            raise

    async def replace_event(self, event: Event) -> bool:
        try:
            result = await self._collection.replace_one(
                {"_id": event.id.value}, event_to_document(event)
            )
        except DuplicateKeyError as err:
            if _is_slug_conflict(err):
                raise SlugConflictError(event.slug) from err
            raise
        return result.matched_count > 0

    async def delete_event(self, event_id: EventId) -> bool:
        result = await self._collection.delete_one({"_id": event_id.value})
        return result.deleted_count > 0


class MongoBookingStore(BookingStore):
    """MongoDB-backed booking store."""

    def __init__(self, db: AsyncIOMotorDatabase) -> None:
        self._collection = db[BOOKINGS_COLLECTION]

    async def get_booking(self, booking_id: BookingId) -> Booking | None:
        doc = await self._collection.find_one({"_id": booking_id.value})
        return booking_from_document(doc) if doc else None

    async def list_bookings_for_event(self, event_id: EventId) -> list[Booking]:
        cursor = self._collection.find({"eventId": event_id.value}).sort("createdAt", ASCENDING)
        return [booking_from_document(doc) async for doc in cursor]

    async def count_bookings_for_event(self, event_id: EventId) -> int:
        return await self._collection.count_documents({"eventId": event_id.value})

    async def insert_booking(self, booking: Booking) -> None:
        await self._collection.insert_one(booking_to_document(booking))

    async def delete_booking(self, booking_id: BookingId) -> bool:
        result = await self._collection.delete_one({"_id": booking_id.value})
        return result.deleted_count > 0

    async def delete_bookings_for_event(self, event_id: EventId) -> int:
        result = await self._collection.delete_many({"eventId": event_id.value})
        return result.deleted_count

"""Event service - all business logic lives here.

Services:
- Depend only on interfaces (stores)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Normalization is an explicit pre-persist step (``prepare_event``) that is
told which fields this write changes, instead of a save hook.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import replace
from enum import Enum
from typing import Any

from django.conf import settings
from django.utils import timezone

from eventhub.domain import Event, EventDate, EventId, EventTime, Slug
from eventhub.domain.errors import EventHasBookingsError, EventNotFoundError, SlugConflictError
from eventhub.domain.models import EVENT_INPUT_FIELDS, EVENT_LIST_FIELDS
from eventhub.serializers import EventInputSerializer, validate_input
from eventhub.services import clock
from eventhub.stores.interfaces import BookingStore, EventStore

logger = logging.getLogger(__name__)

DEFAULT_SLUG_MAX_ATTEMPTS = 3


class DeletePolicy(Enum):
    """What happens to bookings when their event is deleted."""

    RESTRICT = "restrict"
    CASCADE = "cascade"


class EventService:
    """Service for event operations."""

    def __init__(
        self,
        store: EventStore,
        booking_store: BookingStore,
        max_slug_attempts: int | None = None,
    ) -> None:
        self._store = store
        self._booking_store = booking_store
        if max_slug_attempts is None:
            max_slug_attempts = getattr(
                settings, "EVENTHUB_SLUG_MAX_ATTEMPTS", DEFAULT_SLUG_MAX_ATTEMPTS
            )
        self._max_slug_attempts = max(1, max_slug_attempts)

    async def list_events(self) -> list[Event]:
        """Return all events, newest first."""
        return await self._store.list_events()

    async def get_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            InvalidEventIdError: If the event_id is not a valid ObjectId.
            EventNotFoundError: If the event does not exist.
        """
        event = await self._store.get_event(EventId.from_string(event_id))
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    async def get_event_by_slug(self, slug: str) -> Event:
        """Return an event by slug.

        Raises:
            EventNotFoundError: If no event uses the slug.
        """
        event = await self._store.get_event_by_slug(slug)
        if event is None:
            raise EventNotFoundError(slug)
        return event

    async def create_event(self, data: Mapping[str, Any]) -> Event:
        """Validate, normalize and insert a new event.

        Raises:
            ValidationFailedError: If a field is missing, blank or empty.
            InvalidDateError: If the date cannot be parsed.
            InvalidTimeError: If the time cannot be parsed.
            SlugConflictError: If the slug kept colliding after every retry.
        """
        fields = validate_input(EventInputSerializer(data=data))
        event_id = EventId.new()

        async def build() -> Event:
            prepared = await self.prepare_event(fields, changed=fields.keys())
            now = clock.now()
            return Event(id=event_id, created_at=now, updated_at=now, **prepared)

        return await self._save_with_retry(build, self._store.insert_event)

    async def update_event(self, event_id: str, changes: Mapping[str, Any]) -> Event:
        """Apply a partial update to an existing event.

        Only fields whose value actually differs from the stored one count as
        changed, so re-sending the same title keeps the slug.

        Raises:
            InvalidEventIdError: If the event_id is not a valid ObjectId.
            EventNotFoundError: If the event does not exist.
            ValidationFailedError: If a provided field is blank or empty.
        """
        current = await self.get_event(event_id)
        fields = validate_input(EventInputSerializer(data=changes, partial=True))
        changed = {name for name, value in fields.items() if _differs(current, name, value)}

        async def build() -> Event:
            prepared = await self.prepare_event(fields, changed=changed, current=current)
            return replace(current, updated_at=clock.now(), **prepared)

        async def write(event: Event) -> None:
            if not await self._store.replace_event(event):
                raise EventNotFoundError(event_id)

        return await self._save_with_retry(build, write)

    async def delete_event(
        self, event_id: str, policy: DeletePolicy = DeletePolicy.RESTRICT
    ) -> None:
        """Delete an event, applying ``policy`` to its bookings.

        Raises:
            InvalidEventIdError: If the event_id is not a valid ObjectId.
            EventNotFoundError: If the event does not exist.
            EventHasBookingsError: If bookings exist and policy is RESTRICT.
        """
        event = await self.get_event(event_id)
        if policy is DeletePolicy.RESTRICT:
            count = await self._booking_store.count_bookings_for_event(event.id)
            if count:
                raise EventHasBookingsError(event_id, count)
        else:
            removed = await self._booking_store.delete_bookings_for_event(event.id)
            if removed:
                logger.info("Cascade deleted %d bookings of event %s", removed, event.id)

        if not await self._store.delete_event(event.id):
            raise EventNotFoundError(event_id)

    async def prepare_event(
        self,
        fields: Mapping[str, Any],
        changed: Iterable[str],
        current: Event | None = None,
    ) -> dict[str, Any]:
        """Merge ``fields`` over ``current`` and normalize what ``changed`` names.

        The slug is regenerated only when the title changed, and date and time
        are renormalized only when they changed. Returns every Event field
        except id and timestamps.

        Raises:
            ValidationFailedError: If ``fields`` fails the schema; every field
                is required when there is no ``current``.
        """
        fields = validate_input(EventInputSerializer(data=fields, partial=current is not None))
        changed = set(changed)
        prepared: dict[str, Any] = {}
        if current is not None:
            prepared = {name: getattr(current, name) for name in EVENT_INPUT_FIELDS}
            prepared["slug"] = current.slug
        prepared.update(fields)

        if "date" in changed:
            prepared["date"] = str(EventDate.parse(prepared["date"]))
        if "time" in changed:
            prepared["time"] = str(EventTime.parse(prepared["time"]))
        for name in EVENT_LIST_FIELDS:
            prepared[name] = tuple(prepared[name])
        if "title" in changed:
            prepared["slug"] = await self.generate_unique_slug(
                prepared["title"], exclude_id=current.id if current else None
            )
        return prepared

    async def generate_unique_slug(self, title: str, exclude_id: EventId | None = None) -> str:
        """Find the first free ``base``, ``base-1``, ``base-2``... for ``title``.

        This is a pre-check only. Concurrent writers can still race past it,
        which the unique index on slug catches.
        """
        placeholder = str(int(timezone.now().timestamp() * 1000))
        base = Slug.base_for(title, placeholder=placeholder)
        counter = 0
        candidate = base
        while await self._store.slug_taken(str(candidate), exclude_id=exclude_id):
            counter += 1
            candidate = base.with_suffix(counter)
        if counter:
            logger.debug("Slug %s taken, using %s", base, candidate)
        return str(candidate)

    async def _save_with_retry(
        self,
        build: Callable[[], Awaitable[Event]],
        write: Callable[[Event], Awaitable[Any]],
    ) -> Event:
        attempt = 1
        while True:
            event = await build()
            try:
                await write(event)
                return event
            except SlugConflictError:
                if attempt >= self._max_slug_attempts:
                    logger.error("Slug %s still conflicting after %d attempts", event.slug, attempt)
                    raise
                logger.warning("Slug %s conflicted on write, retrying (%d)", event.slug, attempt)
                attempt += 1


def _differs(current: Event, name: str, value: Any) -> bool:
    existing = getattr(current, name)
    if name in EVENT_LIST_FIELDS:
        return tuple(value) != existing
    if name == "date":
        return str(value) != existing
    return value != existing

"""Unit tests for EventService.

These test normalization, slug uniqueness, delete policy and domain error
mapping against the in-memory stores.
Run with: pytest tests/test_services.py -v
"""

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest
from bson import ObjectId

from eventhub.domain import Booking, BookingId, Email
from eventhub.domain.errors import (
    EventHasBookingsError,
    EventNotFoundError,
    InvalidDateError,
    InvalidEventIdError,
    InvalidTimeError,
    SlugConflictError,
    ValidationFailedError,
)
from eventhub.services import DeletePolicy, EventService

pytestmark = pytest.mark.asyncio


def _booking_for(event) -> Booking:
    now = datetime.now(timezone.utc)
    return Booking(
        id=BookingId.new(),
        event_id=event.id,
        email=Email("ada@example.com"),
        created_at=now,
        updated_at=now,
    )


class TestCreateEvent:
    """Tests for EventService.create_event."""

    async def test_normalizes_and_persists(self, event_service, event_store, event_data):
        """Creating an event normalizes date, time and slug before storing it."""
        event = await event_service.create_event(event_data)

        assert event.slug == "pycon-berlin-2025"
        assert event.date == "2025-04-23"
        assert event.time == "09:30"
        assert event.agenda == ("Keynote", "Talks", "Sprints")
        assert event.created_at == event.updated_at
        assert event_store.events[event.id] == event

    async def test_timestamps_are_aware_and_millisecond_precise(self, event_service, event_data):
        """Stamps match what a BSON round trip returns: UTC, whole milliseconds."""
        event = await event_service.create_event(event_data)

        assert event.created_at.tzinfo is not None
        assert event.created_at.utcoffset() == timedelta(0)
        assert event.created_at.microsecond % 1000 == 0

    async def test_identical_titles_get_distinct_slugs(self, event_service, event_data):
        """Repeated titles get -1, -2 suffixes."""
        first = await event_service.create_event(event_data)
        second = await event_service.create_event(event_data)
        third = await event_service.create_event(event_data)

        assert first.slug == "pycon-berlin-2025"
        assert second.slug == "pycon-berlin-2025-1"
        assert third.slug == "pycon-berlin-2025-2"

    async def test_punctuation_title_gets_placeholder_slug(self, event_service, event_data):
        """A title with no slug characters falls back to a numeric placeholder."""
        event = await event_service.create_event({**event_data, "title": "!!! ???"})

        assert event.slug
        assert event.slug.isdigit()

    async def test_rejects_blank_fields(self, event_service, event_data):
        """Whitespace-only strings and empty lists are rejected together."""
        with pytest.raises(ValidationFailedError) as exc_info:
            await event_service.create_event({**event_data, "venue": "   ", "tags": []})

        assert set(exc_info.value.errors) == {"venue", "tags"}

    async def test_rejects_missing_fields(self, event_service, event_data):
        """Every field is required on create."""
        data = dict(event_data)
        del data["organizer"]

        with pytest.raises(ValidationFailedError) as exc_info:
            await event_service.create_event(data)

        assert "organizer" in exc_info.value.errors

    async def test_rejects_blank_agenda_item(self, event_service, event_data):
        """Agenda entries must not be blank."""
        with pytest.raises(ValidationFailedError) as exc_info:
            await event_service.create_event({**event_data, "agenda": ["Keynote", " "]})

        assert "agenda" in exc_info.value.errors

    async def test_rejects_unparseable_date(self, event_service, event_store, event_data):
        """An unparseable date fails and nothing is stored."""
        with pytest.raises(InvalidDateError):
            await event_service.create_event({**event_data, "date": "not-a-date"})

        assert event_store.events == {}

    async def test_datetime_string_keeps_date_portion(self, event_service, event_data):
        """A full datetime string is reduced to its date."""
        event = await event_service.create_event({**event_data, "date": "2025-04-23T17:45:00Z"})

        assert event.date == "2025-04-23"

    async def test_rejects_pm_on_24_hour_value(self, event_service, event_data):
        """13:00 PM is not a time."""
        with pytest.raises(InvalidTimeError):
            await event_service.create_event({**event_data, "time": "13:00 PM"})

    async def test_retries_when_index_rejects_slug(self, event_store, booking_store, event_data):
        """A concurrent writer that wins the race forces a fresh slug."""
        service = EventService(event_store, booking_store, max_slug_attempts=3)
        rival = await service.create_event(event_data)
        original_slug_taken = event_store.slug_taken
        calls = 0

        async def stale_slug_taken(slug, exclude_id=None):
            nonlocal calls
            calls += 1
            if calls == 1:
                return False
            return await original_slug_taken(slug, exclude_id=exclude_id)

        event_store.slug_taken = stale_slug_taken
        event = await service.create_event(event_data)

        assert rival.slug == "pycon-berlin-2025"
        assert event.slug == "pycon-berlin-2025-1"

    async def test_gives_up_after_max_attempts(self, event_store, booking_store, event_data):
        """Persistent slug conflicts surface after the configured attempts."""
        service = EventService(event_store, booking_store, max_slug_attempts=2)
        await service.create_event(event_data)

        async def always_free(slug, exclude_id=None):
            return False

        event_store.slug_taken = always_free
        with pytest.raises(SlugConflictError):
            await service.create_event(event_data)
        assert len(event_store.events) == 1


class TestUpdateEvent:
    """Tests for EventService.update_event."""

    async def test_same_title_keeps_slug(self, event_service, event_store, event_data):
        """Re-sending the stored title does not touch the slug."""
        await event_service.create_event(event_data)
        second = await event_service.create_event(event_data)
        event_store.slug_queries.clear()

        updated = await event_service.update_event(
            str(second.id), {"title": event_data["title"], "venue": "Messe Berlin"}
        )

        assert updated.slug == "pycon-berlin-2025-1"
        assert updated.venue == "Messe Berlin"
        assert event_store.slug_queries == []

    async def test_new_title_regenerates_slug(self, event_service, event_data):
        """A new title yields a new slug and a fresh updated_at."""
        event = await event_service.create_event(event_data)

        updated = await event_service.update_event(str(event.id), {"title": "DjangoCon Europe"})

        assert updated.slug == "djangocon-europe"
        assert updated.created_at == event.created_at
        assert updated.updated_at >= event.updated_at

    async def test_retitling_to_own_slug_does_not_suffix(self, event_service, event_data):
        """The event's own slug does not count as taken."""
        event = await event_service.create_event(event_data)

        updated = await event_service.update_event(str(event.id), {"title": "PyCon Berlin 2025!"})

        assert updated.slug == "pycon-berlin-2025"

    async def test_time_renormalized_only_when_changed(self, event_service, event_data):
        """Unrelated updates leave date and time as stored."""
        event = await event_service.create_event(event_data)

        updated = await event_service.update_event(str(event.id), {"time": "21:05"})
        unchanged = await event_service.update_event(str(event.id), {"mode": "hybrid"})

        assert updated.time == "21:05"
        assert unchanged.time == "21:05"
        assert unchanged.date == event.date

    async def test_rejects_blank_update(self, event_service, event_data):
        """A provided field must not be blank."""
        event = await event_service.create_event(event_data)

        with pytest.raises(ValidationFailedError):
            await event_service.update_event(str(event.id), {"title": ""})

    async def test_update_missing_event(self, event_service):
        """Updating an unknown event raises EventNotFoundError."""
        with pytest.raises(EventNotFoundError):
            await event_service.update_event(str(ObjectId()), {"title": "x"})


class TestPrepareEvent:
    """Tests for the explicit pre-persist step."""

    async def test_only_changed_fields_are_normalized(self, event_service, event_data):
        """Fields outside the changed set pass through untouched."""
        event = await event_service.create_event(event_data)

        prepared = await event_service.prepare_event(
            {"time": "7PM", "date": "garbage"}, changed={"time"}, current=event
        )

        assert prepared["time"] == "19:00"
        assert prepared["date"] == "garbage"
        assert prepared["slug"] == event.slug

    async def test_without_current_requires_every_field(self, event_service):
        """A new record missing list fields fails validation, not with a KeyError."""
        with pytest.raises(ValidationFailedError) as exc_info:
            await event_service.prepare_event({"title": "Hello"}, changed={"title"})

        assert "agenda" in exc_info.value.errors
        assert "tags" in exc_info.value.errors

    async def test_without_current_normalizes_full_field_set(self, event_service, event_data):
        """A complete field set is validated and normalized without a stored record."""
        prepared = await event_service.prepare_event(event_data, changed=event_data.keys())

        assert prepared["slug"] == "pycon-berlin-2025"
        assert prepared["time"] == "09:30"
        assert prepared["agenda"] == ("Keynote", "Talks", "Sprints")

    async def test_with_current_rejects_blank_field(self, event_service, event_data):
        """Direct callers cannot push blank values past the pre-persist step."""
        event = await event_service.create_event(event_data)

        with pytest.raises(ValidationFailedError):
            await event_service.prepare_event({"title": "   "}, changed={"title"}, current=event)


class TestGetAndDeleteEvent:
    """Tests for lookups and delete policy."""

    async def test_get_event_invalid_id_raises_error(self, event_service):
        """A malformed id raises InvalidEventIdError."""
        with pytest.raises(InvalidEventIdError):
            await event_service.get_event("not-an-object-id")

    async def test_get_event_not_found_raises_error(self, event_service):
        """An unknown id raises EventNotFoundError."""
        with pytest.raises(EventNotFoundError):
            await event_service.get_event(str(ObjectId()))

    async def test_get_event_by_slug(self, event_service, event_data):
        """Events can be looked up by slug."""
        event = await event_service.create_event(event_data)

        assert await event_service.get_event_by_slug("pycon-berlin-2025") == event
        with pytest.raises(EventNotFoundError):
            await event_service.get_event_by_slug("missing")

    async def test_list_events_newest_first(self, event_service, event_store, event_data):
        """Events are listed by creation time, newest first."""
        first = await event_service.create_event(event_data)
        older = replace(first, created_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
        event_store.events[first.id] = older
        second = await event_service.create_event({**event_data, "title": "Later"})

        events = await event_service.list_events()

        assert [e.id for e in events] == [second.id, first.id]

    async def test_restrict_blocks_delete_with_bookings(
        self, event_service, event_store, booking_store, event_data
    ):
        """RESTRICT refuses to delete an event that has bookings."""
        event = await event_service.create_event(event_data)
        await booking_store.insert_booking(_booking_for(event))

        with pytest.raises(EventHasBookingsError) as exc_info:
            await event_service.delete_event(str(event.id))

        assert exc_info.value.booking_count == 1
        assert event.id in event_store.events

    async def test_cascade_removes_bookings(
        self, event_service, event_store, booking_store, event_data
    ):
        """CASCADE deletes the event's bookings with it."""
        event = await event_service.create_event(event_data)
        await booking_store.insert_booking(_booking_for(event))

        await event_service.delete_event(str(event.id), policy=DeletePolicy.CASCADE)

        assert event_store.events == {}
        assert booking_store.bookings == {}

    async def test_delete_without_bookings(self, event_service, event_store, event_data):
        """An event without bookings is deleted under the default policy."""
        event = await event_service.create_event(event_data)

        await event_service.delete_event(str(event.id))

        assert event_store.events == {}

"""Pytest configuration and shared fixtures."""

import pytest

from eventhub.services import BookingService, EventService
from tests.fakes import InMemoryBookingStore, InMemoryEventStore


@pytest.fixture
def event_store() -> InMemoryEventStore:
    return InMemoryEventStore()


@pytest.fixture
def booking_store() -> InMemoryBookingStore:
    return InMemoryBookingStore()


@pytest.fixture
def event_service(event_store, booking_store) -> EventService:
    return EventService(event_store, booking_store)


@pytest.fixture
def booking_service(event_store, booking_store) -> BookingService:
    return BookingService(booking_store, event_store)


@pytest.fixture
def event_data() -> dict:
    return {
        "title": "PyCon Berlin 2025",
        "description": "Three days of Python talks.",
        "overview": "Talks, workshops and sprints.",
        "image": "/images/pycon.png",
        "venue": "bcc Berlin",
        "location": "Berlin, Germany",
        "date": "2025-04-23",
        "time": "9:30 AM",
        "mode": "offline",
        "audience": "Developers",
        "agenda": ["Keynote", "Talks", "Sprints"],
        "organizer": "Python Software Verband",
        "tags": ["python", "conference"],
    }

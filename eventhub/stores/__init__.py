from eventhub.stores.interfaces import BookingStore, EventStore
from eventhub.stores.mongo_store import MongoBookingStore, MongoEventStore, ensure_indexes

__all__ = [
    "EventStore",
    "BookingStore",
    "MongoEventStore",
    "MongoBookingStore",
    "ensure_indexes",
]

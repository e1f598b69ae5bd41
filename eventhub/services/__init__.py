from eventhub.services.booking_service import BookingService
from eventhub.services.event_service import DeletePolicy, EventService

__all__ = ["EventService", "BookingService", "DeletePolicy"]

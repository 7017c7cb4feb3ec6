"""Read-only booking feed backing the calendar cells."""

import logging

from vendor_calendar.engine.booking_index import BookingIndex
from vendor_calendar.schemas.booking_schema import Booking
from vendor_calendar.store.backend import AvailabilityBackend

logger = logging.getLogger(__name__)


class BookingStore:
    """Fetches the vendor's bookings and keeps the per-day index current."""

    def __init__(self, backend: AvailabilityBackend) -> None:
        self._backend = backend
        self._bookings: list[Booking] = []
        self._index = BookingIndex()

    @property
    def bookings(self) -> list[Booking]:
        return list(self._bookings)

    @property
    def index(self) -> BookingIndex:
        return self._index

    async def refresh(self) -> BookingIndex:
        bookings = await self._backend.list_bookings()
        self._bookings = bookings
        self._index.rebuild(bookings)
        logger.debug("Loaded %d bookings", len(bookings))
        return self._index

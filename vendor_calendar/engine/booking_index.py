"""Per-day index over the vendor's bookings."""

import logging
from collections import defaultdict
from datetime import date, time
from typing import Iterable

from vendor_calendar.schemas.booking_schema import Booking, BookingStatus

logger = logging.getLogger(__name__)


def _time_key(booking: Booking) -> time:
    # Untimed bookings sort ahead of timed ones
    return booking.booking_time or time.min


def index_by_date(bookings: Iterable[Booking]) -> dict[date, list[Booking]]:
    """Group bookings by date, each day ordered by time of day.

    The sort is stable, so bookings sharing a time keep their input order.
    """
    buckets: dict[date, list[Booking]] = defaultdict(list)
    for booking in bookings:
        buckets[booking.booking_date].append(booking)
    for day_bookings in buckets.values():
        day_bookings.sort(key=_time_key)
    return dict(buckets)


class BookingIndex:
    """
    Read-only lookup of bookings by calendar date.

    Rebuilt from scratch whenever the booking collection changes;
    lookups never fail and return an empty tuple for quiet days.
    """

    def __init__(self, bookings: Iterable[Booking] = ()) -> None:
        self._by_date: dict[date, tuple[Booking, ...]] = {}
        self._count = 0
        self.rebuild(bookings)

    def rebuild(self, bookings: Iterable[Booking]) -> None:
        grouped = index_by_date(bookings)
        self._by_date = {day: tuple(items) for day, items in grouped.items()}
        self._count = sum(len(items) for items in self._by_date.values())
        logger.debug(
            "Booking index rebuilt: %d bookings across %d dates",
            self._count, len(self._by_date),
        )

    def lookup(self, day: date) -> tuple[Booking, ...]:
        return self._by_date.get(day, ())

    def dates(self) -> list[date]:
        """All dates with at least one booking, ascending."""
        return sorted(self._by_date)

    def status_counts(self, day: date) -> dict[BookingStatus, int]:
        counts: dict[BookingStatus, int] = {}
        for booking in self.lookup(day):
            counts[booking.status] = counts.get(booking.status, 0) + 1
        return counts

    def __len__(self) -> int:
        return self._count

    def __contains__(self, day: object) -> bool:
        return day in self._by_date

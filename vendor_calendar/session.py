"""
One vendor's calendar screen: view state, stores and grid builder wired
together.

Usage:
    async with AvailabilityBackend(anchor) as backend:
        session = VendorCalendarSession(backend, anchor)
        await session.load()
        view = session.render()
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from vendor_calendar.engine import view_state
from vendor_calendar.engine.date_anchor import DateAnchor
from vendor_calendar.engine.grid_builder import CalendarGridBuilder
from vendor_calendar.engine.resolver import AvailabilityResolver
from vendor_calendar.errors import CalendarError
from vendor_calendar.schemas.availability_schema import AvailabilityWindow, WindowId
from vendor_calendar.schemas.booking_schema import Booking
from vendor_calendar.schemas.calendar_schema import CalendarView, ViewMode
from vendor_calendar.store.availability_store import AvailabilityStore
from vendor_calendar.store.backend import AvailabilityBackend
from vendor_calendar.store.booking_store import BookingStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectedDay:
    """Sidebar content for the picked date."""

    date: date
    bookings: tuple[Booking, ...]
    windows: tuple[AvailabilityWindow, ...]


class VendorCalendarSession:
    """Per-screen state shared by the calendar grid and its dialogs."""

    def __init__(
        self,
        backend: AvailabilityBackend,
        anchor: DateAnchor,
        vendor_id: Optional[WindowId] = None,
        view_mode: ViewMode = ViewMode.MONTH,
    ) -> None:
        self.anchor = anchor
        self.resolver = AvailabilityResolver(anchor)
        self.builder = CalendarGridBuilder(anchor, self.resolver)
        self.availability = AvailabilityStore(backend, self.resolver, vendor_id)
        self.bookings = BookingStore(backend)
        self.state = view_state.initial_state(anchor, view_mode)

    async def load(self) -> list[CalendarError]:
        """
        Fetch bookings and availability together.

        Each feed loads on its own: a failure in one is logged and returned
        while the other is still shown. Errors outside the calendar error
        hierarchy propagate.
        """
        results = await asyncio.gather(
            self.bookings.refresh(),
            self.availability.list_windows(),
            return_exceptions=True,
        )
        failures: list[CalendarError] = []
        for feed, result in zip(("bookings", "availability"), results):
            if isinstance(result, CalendarError):
                logger.warning("Could not load %s: %s", feed, result)
                failures.append(result)
            elif isinstance(result, BaseException):
                raise result
        return failures

    def render(self) -> CalendarView:
        return self.builder.render(self.state, self.bookings.index, self.availability.windows)

    def previous_period(self) -> None:
        self.state = view_state.previous_period(self.state, self.anchor)

    def next_period(self) -> None:
        self.state = view_state.next_period(self.state, self.anchor)

    def go_today(self) -> None:
        self.state = view_state.go_today(self.state, self.anchor)

    def switch_mode(self, view_mode: ViewMode) -> None:
        self.state = view_state.switch_mode(self.state, view_mode)

    def jump_to(self, day: date) -> None:
        self.state = view_state.go_to(self.state, day)

    def select_date(self, day: date) -> SelectedDay:
        self.state = view_state.select_date(self.state, day)
        windows = sorted(
            self.resolver.overlapping(day, self.availability.windows),
            key=lambda w: w.start_time,
        )
        return SelectedDay(
            date=day,
            bookings=self.bookings.index.lookup(day),
            windows=tuple(windows),
        )

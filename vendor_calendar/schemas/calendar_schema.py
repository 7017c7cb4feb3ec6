"""Calendar view models: view state, rendered cells and rendered views."""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional

from vendor_calendar.schemas.availability_schema import AvailabilityWindow
from vendor_calendar.schemas.booking_schema import Booking


class ViewMode(str, Enum):
    """Calendar layouts the grid builder can produce."""

    MONTH = "month"
    WEEK = "week"
    DAY = "day"


@dataclass(frozen=True)
class CalendarCell:
    """One rendered day. Rebuilt on every render, never stored."""

    date: date
    is_current_period: bool = True
    is_today: bool = False
    is_past: bool = False
    bookings: tuple[Booking, ...] = ()
    windows: tuple[AvailabilityWindow, ...] = ()

    @property
    def has_availability(self) -> bool:
        return bool(self.windows)

    @property
    def date_key(self) -> str:
        return self.date.isoformat()


@dataclass
class CalendarViewState:
    """
    What the user is looking at: the reference date, the layout, and the
    day picked for the detail sidebar.

    Passed explicitly to the grid builder and navigation helpers.
    """

    reference_date: date
    view_mode: ViewMode = ViewMode.MONTH
    selected_date: Optional[date] = None


@dataclass(frozen=True)
class CalendarView:
    """A fully populated calendar ready for display."""

    view_mode: ViewMode
    title: str
    rows: tuple[tuple[CalendarCell, ...], ...]
    hours: tuple[str, ...] = field(default_factory=tuple)

    @property
    def cells(self) -> list[CalendarCell]:
        return [cell for row in self.rows for cell in row]

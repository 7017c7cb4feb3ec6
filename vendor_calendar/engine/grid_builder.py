"""
Month, week and day grid construction.

Grids are built from calendar dates only. Every step is a whole calendar
day taken through the DateAnchor, so DST transitions in the reference
zone never duplicate or drop a day.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, Sequence

from vendor_calendar.engine.booking_index import BookingIndex
from vendor_calendar.engine.date_anchor import DAYS_PER_WEEK, DateAnchor
from vendor_calendar.engine.resolver import AvailabilityResolver
from vendor_calendar.engine.view_state import period_title
from vendor_calendar.schemas.availability_schema import AvailabilityWindow
from vendor_calendar.schemas.calendar_schema import (
    CalendarCell,
    CalendarView,
    CalendarViewState,
    ViewMode,
)

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 24


class CalendarGridBuilder:
    """Builds grid skeletons and populates them with bookings and windows."""

    def __init__(self, anchor: DateAnchor, resolver: AvailabilityResolver) -> None:
        self._anchor = anchor
        self._resolver = resolver

    def _cell(self, day: date, is_current_period: bool = True) -> CalendarCell:
        return CalendarCell(
            date=day,
            is_current_period=is_current_period,
            is_today=self._anchor.is_today(day),
            is_past=self._anchor.is_past(day),
        )

    def build_month_matrix(self, reference: date) -> list[list[CalendarCell]]:
        """
        Whole weeks covering the month that contains ``reference``.

        The grid runs from the start of the week holding the 1st to the
        end of the week holding the last day; padding days from the
        neighbouring months are flagged ``is_current_period=False``.
        """
        month_start = self._anchor.start_of_month(reference)
        month_end = self._anchor.end_of_month(reference)
        grid_start = self._anchor.start_of_week(month_start)
        grid_end = self._anchor.end_of_week(month_end)

        weeks: list[list[CalendarCell]] = []
        week: list[CalendarCell] = []
        for day in self._anchor.iter_days(grid_start, grid_end):
            week.append(self._cell(day, month_start <= day <= month_end))
            if len(week) == DAYS_PER_WEEK:
                weeks.append(week)
                week = []
        return weeks

    def build_week_row(self, reference: date) -> list[CalendarCell]:
        """Seven consecutive days starting at the week start of ``reference``."""
        first = self._anchor.start_of_week(reference)
        return [self._cell(self._anchor.add_days(first, i)) for i in range(DAYS_PER_WEEK)]

    def build_day(self, reference: date) -> list[CalendarCell]:
        return [self._cell(reference)]

    @staticmethod
    def build_hour_column() -> list[str]:
        """Hour labels ``00:00`` through ``23:00`` for time-grid layouts."""
        return [f"{hour:02d}:00" for hour in range(HOURS_PER_DAY)]

    # ------------------------------------------------------------------ #
    # Population
    # ------------------------------------------------------------------ #

    def populate(
        self,
        cell: CalendarCell,
        bookings: BookingIndex,
        windows: Sequence[AvailabilityWindow],
    ) -> CalendarCell:
        """Attach the day's bookings and overlapping windows to a cell."""
        day_windows = sorted(
            self._resolver.overlapping(cell.date, windows),
            key=lambda w: w.start_time,
        )
        return replace(
            cell,
            bookings=bookings.lookup(cell.date),
            windows=tuple(day_windows),
        )

    def _populate_row(
        self,
        row: Iterable[CalendarCell],
        bookings: BookingIndex,
        windows: Sequence[AvailabilityWindow],
    ) -> tuple[CalendarCell, ...]:
        return tuple(self.populate(cell, bookings, windows) for cell in row)

    def render(
        self,
        state: CalendarViewState,
        bookings: BookingIndex,
        windows: Sequence[AvailabilityWindow],
    ) -> CalendarView:
        """Build and populate the grid described by ``state``."""
        reference = state.reference_date
        if state.view_mode == ViewMode.MONTH:
            skeleton = self.build_month_matrix(reference)
            hours: tuple[str, ...] = ()
        elif state.view_mode == ViewMode.WEEK:
            skeleton = [self.build_week_row(reference)]
            hours = tuple(self.build_hour_column())
        else:
            skeleton = [self.build_day(reference)]
            hours = tuple(self.build_hour_column())

        rows = tuple(self._populate_row(row, bookings, windows) for row in skeleton)
        logger.debug(
            "Rendered %s view for %s: %d rows",
            state.view_mode.value, reference.isoformat(), len(rows),
        )
        return CalendarView(
            view_mode=state.view_mode,
            title=period_title(state, self._anchor),
            rows=rows,
            hours=hours,
        )

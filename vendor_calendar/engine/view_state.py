"""Navigation over an explicit CalendarViewState."""

from dataclasses import replace
from datetime import date

from vendor_calendar.engine.date_anchor import DateAnchor, Granularity
from vendor_calendar.schemas.calendar_schema import CalendarViewState, ViewMode

_GRANULARITY: dict[ViewMode, Granularity] = {
    ViewMode.MONTH: Granularity.MONTH,
    ViewMode.WEEK: Granularity.WEEK,
    ViewMode.DAY: Granularity.DAY,
}


def initial_state(anchor: DateAnchor, view_mode: ViewMode = ViewMode.MONTH) -> CalendarViewState:
    return CalendarViewState(reference_date=anchor.today(), view_mode=view_mode)


def previous_period(state: CalendarViewState, anchor: DateAnchor) -> CalendarViewState:
    """Step back one month, week or day depending on the view mode."""
    return replace(
        state,
        reference_date=anchor.shift_period(
            state.reference_date, _GRANULARITY[state.view_mode], -1
        ),
    )


def next_period(state: CalendarViewState, anchor: DateAnchor) -> CalendarViewState:
    return replace(
        state,
        reference_date=anchor.shift_period(
            state.reference_date, _GRANULARITY[state.view_mode], 1
        ),
    )


def go_today(state: CalendarViewState, anchor: DateAnchor) -> CalendarViewState:
    return replace(state, reference_date=anchor.today())


def switch_mode(state: CalendarViewState, view_mode: ViewMode) -> CalendarViewState:
    return replace(state, view_mode=view_mode)


def select_date(state: CalendarViewState, day: date) -> CalendarViewState:
    return replace(state, selected_date=day)


def period_title(state: CalendarViewState, anchor: DateAnchor) -> str:
    """
    Header text for the visible period.

    Examples: ``March 2025``, ``Mar 23 - Mar 29, 2025``,
    ``Saturday, March 1, 2025``.
    """
    reference = state.reference_date
    if state.view_mode == ViewMode.MONTH:
        return f"{reference:%B %Y}"
    if state.view_mode == ViewMode.WEEK:
        first = anchor.start_of_week(reference)
        last = anchor.end_of_week(reference)
        return f"{first:%b} {first.day} - {last:%b} {last.day}, {last.year}"
    return f"{reference:%A, %B} {reference.day}, {reference.year}"


def go_to(state: CalendarViewState, day: date) -> CalendarViewState:
    """Show the period containing ``day`` and select it."""
    return replace(state, reference_date=day, selected_date=day)

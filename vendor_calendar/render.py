"""Plain-text rendering of calendar views for the terminal."""

from vendor_calendar.schemas.booking_schema import BookingStatus
from vendor_calendar.schemas.calendar_schema import CalendarCell, CalendarView, ViewMode
from vendor_calendar.utils import format_time_12h

GREEN = "\033[92m"
YELLOW = "\033[93m"
BLUE = "\033[94m"
RED = "\033[91m"
DIM = "\033[2m"
BOLD = "\033[1m"
RESET = "\033[0m"

STATUS_COLORS: dict[BookingStatus, str] = {
    BookingStatus.PENDING: YELLOW,
    BookingStatus.APPROVED: BLUE,
    BookingStatus.REJECTED: RED,
    BookingStatus.COMPLETED: GREEN,
}

CELL_WIDTH = 6


def _paint(text: str, *codes: str, color: bool = True) -> str:
    if not color or not codes:
        return text
    return "".join(codes) + text + RESET


def _month_cell(cell: CalendarCell, color: bool) -> str:
    marker = "*" if cell.has_availability else " "
    count = str(len(cell.bookings)) if cell.bookings else " "
    text = f"{cell.date.day:>2}{marker}{count}".ljust(CELL_WIDTH)
    codes = []
    if not cell.is_current_period:
        codes.append(DIM)
    if cell.is_today:
        codes.append(BOLD)
    if cell.has_availability and cell.is_current_period:
        codes.append(GREEN)
    return _paint(text, *codes, color=color)


def render_month(view: CalendarView, color: bool = True) -> str:
    """Month grid: ``*`` marks availability, the digit counts bookings."""
    header = "".join(
        f"{cell.date:%a}".ljust(CELL_WIDTH) for cell in view.rows[0]
    )
    lines = [_paint(view.title, BOLD, color=color), header]
    for row in view.rows:
        lines.append("".join(_month_cell(cell, color) for cell in row).rstrip())
    return "\n".join(lines)


def render_day_detail(cell: CalendarCell, color: bool = True) -> str:
    """Windows and bookings for a single day."""
    lines = [_paint(f"{cell.date:%A, %B} {cell.date.day}, {cell.date.year}", BOLD, color=color)]
    if cell.windows:
        for window in cell.windows:
            lines.append(
                f"  available {format_time_12h(window.start_time)} - "
                f"{format_time_12h(window.end_time)} (window {window.id})"
            )
    else:
        lines.append("  no availability")
    for booking in cell.bookings:
        status = _paint(booking.status.label, STATUS_COLORS[booking.status], color=color)
        when = format_time_12h(booking.booking_time) or "any time"
        lines.append(f"  booking {booking.id} at {when} [{status}]")
    return "\n".join(lines)


def render_view(view: CalendarView, color: bool = True) -> str:
    if view.view_mode == ViewMode.MONTH:
        return render_month(view, color=color)
    lines = [_paint(view.title, BOLD, color=color)]
    lines.extend(render_day_detail(cell, color=color) for cell in view.cells)
    return "\n".join(lines)

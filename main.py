"""
Command-line entry point for the vendor availability calendar.

Talks to the backend configured in the environment (API_BASE_URL,
API_AUTH_TOKEN, VENDOR_ID for admin access to one vendor).

Usage:
    python main.py show --view month --date 2025-03-01
    python main.py day 2025-03-14
    python main.py create 2025-03-10 2025-03-20 --from 09:00 --to 18:00
    python main.py update 17 2025-03-10 2025-03-22 --from 10:00 --to 16:00
    python main.py update 17 --to 16:00
    python main.py delete 17 --start 2025-03-12 --end 2025-03-15
    python main.py overview --date 2025-03-01
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from vendor_calendar.config import settings
from vendor_calendar.engine.date_anchor import DateAnchor
from vendor_calendar.engine.resolver import AvailabilityResolver
from vendor_calendar.errors import CalendarError, ConflictError, ValidationError
from vendor_calendar.logging_context import set_vendor_id
from vendor_calendar.render import render_day_detail, render_view
from vendor_calendar.schemas.availability_schema import (
    AvailabilityInput,
    AvailabilityWindow,
    DeletionRequest,
)
from vendor_calendar.schemas.calendar_schema import CalendarCell, ViewMode
from vendor_calendar.session import VendorCalendarSession
from vendor_calendar.store.backend import AvailabilityBackend
from vendor_calendar.store.overview import VendorOverviewStore
from vendor_calendar.utils import parse_date

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Vendor availability calendar")
    parser.add_argument("--vendor", default=settings.backend.vendor_id,
                        help="Vendor id (uses the admin endpoints)")
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors")
    commands = parser.add_subparsers(dest="command", required=True)

    show = commands.add_parser("show", help="Render a month, week or day")
    show.add_argument("--view", choices=[m.value for m in ViewMode], default="month")
    show.add_argument("--date", help="Reference date (YYYY-MM-DD), defaults to today")

    day = commands.add_parser("day", help="List windows and bookings on one date")
    day.add_argument("date")

    create = commands.add_parser("create", help="Create an availability window")
    create.add_argument("start_date")
    create.add_argument("end_date")
    create.add_argument("--from", dest="start_time", default=settings.calendar.default_start_time)
    create.add_argument("--to", dest="end_time", default=settings.calendar.default_end_time)

    update = commands.add_parser("update", help="Edit a window; omitted values are kept")
    update.add_argument("window_id")
    update.add_argument("start_date", nargs="?")
    update.add_argument("end_date", nargs="?")
    update.add_argument("--from", dest="start_time")
    update.add_argument("--to", dest="end_time")

    delete = commands.add_parser("delete", help="Delete a window or a range inside it")
    delete.add_argument("window_id")
    delete.add_argument("--start", help="First date to remove")
    delete.add_argument("--end", help="Last date to remove")

    overview = commands.add_parser("overview", help="Vendors available per day (admin)")
    overview.add_argument("--date", help="Any date in the month to show")
    return parser


def _print_violations(exc: ValidationError) -> None:
    for violation in exc.violations:
        print(f"  - {violation.message or violation.rule.value}", file=sys.stderr)


def _edit_form(window: Optional[AvailabilityWindow], args: argparse.Namespace) -> AvailabilityInput:
    """Edit form prefilled from the stored window, overridden by the given values."""
    form = AvailabilityInput.from_window(window) if window else AvailabilityInput()
    for name in ("start_date", "end_date", "start_time", "end_time"):
        value = getattr(args, name)
        if value is not None:
            setattr(form, name, value)
    return form


async def _run(args: argparse.Namespace) -> int:
    anchor = DateAnchor()
    color = not args.no_color
    if args.vendor:
        set_vendor_id(str(args.vendor))

    async with AvailabilityBackend(anchor) as backend:
        if args.command == "overview":
            overview = VendorOverviewStore(backend, AvailabilityResolver(anchor))
            await overview.refresh()
            reference = parse_date(args.date) or anchor.today()
            counts = overview.vendor_count_by_date(
                anchor.start_of_month(reference), anchor.end_of_month(reference)
            )
            for day in sorted(counts):
                print(f"{day.isoformat()}  {counts[day]} vendor(s)")
            return 0

        session = VendorCalendarSession(backend, anchor, vendor_id=args.vendor)
        for failure in await session.load():
            print(f"Warning: {failure}", file=sys.stderr)

        if args.command == "show":
            session.switch_mode(ViewMode(args.view))
            reference = parse_date(args.date)
            if args.date and reference is None:
                print(f"Invalid date: {args.date}", file=sys.stderr)
                return 2
            if reference is not None:
                session.jump_to(reference)
            print(render_view(session.render(), color=color))
            return 0

        if args.command == "day":
            day = parse_date(args.date)
            if day is None:
                print(f"Invalid date: {args.date}", file=sys.stderr)
                return 2
            selected = session.select_date(day)
            cell = CalendarCell(date=day, bookings=selected.bookings, windows=selected.windows)
            print(render_day_detail(cell, color=color))
            return 0

        store = session.availability
        if args.command == "create":
            await store.create(AvailabilityInput(
                args.start_date, args.end_date, args.start_time, args.end_time,
            ))
        elif args.command == "update":
            await store.update(args.window_id, _edit_form(store.get(args.window_id), args))
        else:
            if args.start or args.end:
                request = DeletionRequest.range_within(args.window_id, args.start, args.end)
            else:
                request = DeletionRequest.all(args.window_id)
            plan = await store.remove(args.window_id, request)
            logger.debug("Expected remainders: %s", plan.remainders)

        print(store.last_message or "Done")
        for window in store.windows:
            print(
                f"  {window.id}: {window.start_date} to {window.end_date} "
                f"{window.start_time:%H:%M}-{window.end_time:%H:%M}"
            )
        return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    try:
        return asyncio.run(_run(args))
    except ValidationError as exc:
        print("Request rejected:", file=sys.stderr)
        _print_violations(exc)
        return 1
    except ConflictError as exc:
        print(f"{exc}. Booked dates cannot be removed:", file=sys.stderr)
        for day in exc.booked_dates:
            print(f"  - {day.isoformat()}", file=sys.stderr)
        return 1
    except CalendarError as exc:
        print(f"Failed: {exc}. Please try again.", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""Shared test fixtures and helpers."""

import json
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional, Union

import httpx
import pytest

from vendor_calendar.engine.date_anchor import DateAnchor
from vendor_calendar.engine.grid_builder import CalendarGridBuilder
from vendor_calendar.engine.resolver import AvailabilityResolver
from vendor_calendar.schemas.availability_schema import AvailabilityWindow
from vendor_calendar.schemas.booking_schema import Booking, BookingStatus
from vendor_calendar.store.availability_store import AvailabilityStore
from vendor_calendar.store.backend import AvailabilityBackend

SUNDAY = 6
MONDAY = 0
TZ = "America/Denver"


def fixed_clock(moment: datetime):
    """Clock returning a fixed instant."""
    return lambda: moment


def make_anchor(
    today: date = date(2025, 3, 1),
    week_start: int = SUNDAY,
) -> DateAnchor:
    """Anchor whose reference-zone date is ``today`` (noon local)."""
    noon_utc = datetime(today.year, today.month, today.day, 19, 0, tzinfo=timezone.utc)
    return DateAnchor(tz_name=TZ, week_start=week_start, clock=fixed_clock(noon_utc))


def make_window(
    start: Union[str, date] = "2025-03-10",
    end: Union[str, date] = "2025-03-20",
    start_time: str = "09:00",
    end_time: str = "18:00",
    window_id: Union[int, str] = 1,
    vendor_id: Optional[Union[int, str]] = 7,
) -> AvailabilityWindow:
    return AvailabilityWindow.model_validate({
        "id": window_id,
        "vendor_id": vendor_id,
        "startDate": str(start),
        "endDate": str(end),
        "startTime": start_time,
        "endTime": end_time,
    })


def make_booking(
    day: Union[str, date],
    at: Optional[str] = "10:00",
    booking_id: Union[int, str] = 1,
    status: Any = BookingStatus.APPROVED,
) -> Booking:
    return Booking.model_validate({
        "id": booking_id,
        "vendor_id": 7,
        "bookingDate": str(day),
        "bookingTime": at,
        "status": status,
    })


class FakeBackendServer:
    """
    In-memory stand-in for the availability backend.

    Carves windows on range deletes the way the real service does (the
    left remainder keeps the id, the right one gets a new id) and refuses
    range deletes that cover a booked date.
    """

    def __init__(self) -> None:
        self.windows: dict[int, dict[str, Any]] = {}
        self.bookings: list[dict[str, Any]] = []
        self.vendors: list[dict[str, Any]] = []
        self.requests: list[httpx.Request] = []
        self.fail_with: list[httpx.Response] = []
        self.raise_with: list[Exception] = []
        self.get_failures: list[httpx.Response] = []
        self._next_id = 1

    # -- seeding ------------------------------------------------------- #

    def add_window(
        self,
        start: str,
        end: str,
        start_time: str = "09:00:00",
        end_time: str = "18:00:00",
        vendor_id: int = 7,
    ) -> int:
        window_id = self._next_id
        self._next_id += 1
        self.windows[window_id] = {
            "vendor_availability_id": window_id,
            "vendor_id": vendor_id,
            "startDate": start,
            "endDate": end,
            "startTime": start_time,
            "endTime": end_time,
        }
        return window_id

    def add_booking(self, day: str, at: str = "10:00", status: int = 1) -> None:
        self.bookings.append({
            "booking_id": len(self.bookings) + 1,
            "vendor_id": 7,
            "bookingDate": day,
            "bookingTime": at,
            "bookingStatus": status,
        })

    def count(self, method: str, fragment: str) -> int:
        return sum(
            1 for r in self.requests if r.method == method and fragment in r.url.path
        )

    # -- transport ----------------------------------------------------- #

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raise_with:
            raise self.raise_with.pop(0)
        if self.fail_with:
            return self.fail_with.pop(0)
        if request.method == "GET" and self.get_failures:
            return self.get_failures.pop(0)

        path = request.url.path
        tail = path.rsplit("/", 1)[1]
        body = json.loads(request.content) if request.content else {}

        if request.method == "GET" and path == "/api/booking/vendorassignedservices":
            return httpx.Response(200, json={"bookings": self.bookings})
        if request.method == "GET" and path == "/api/vendor/get-vendors":
            return httpx.Response(200, json={"vendors": self.vendors})
        if request.method == "GET" and path == "/api/vendor/get-availability":
            return httpx.Response(200, json={"availabilities": list(self.windows.values())})
        if request.method == "GET" and path.startswith("/api/vendor/admin-get-availability/"):
            vendor_id = int(tail)
            rows = [
                {k: v for k, v in w.items() if k != "vendor_id"}
                for w in self.windows.values() if w["vendor_id"] == vendor_id
            ]
            return httpx.Response(200, json={"vendor_id": vendor_id, "availabilities": rows})
        if request.method == "POST" and (
            path == "/api/vendor/set-availability"
            or path.startswith("/api/vendor/admin-set-availability/")
        ):
            vendor_id = int(tail) if "admin" in path else 7
            self.add_window(
                body["startDate"], body["endDate"], body["startTime"], body["endTime"], vendor_id,
            )
            return httpx.Response(201, json={"message": "Availability set successfully"})
        if request.method == "PUT" and "edit-availability/" in path:
            window_id = int(tail)
            if window_id not in self.windows:
                return httpx.Response(404, json={"message": "Availability not found"})
            self.windows[window_id].update(body)
            return httpx.Response(200, json={"message": "Availability updated successfully"})
        if request.method == "DELETE" and "delete-availability/" in path:
            return self._delete(int(tail), body)
        return httpx.Response(404, json={"message": f"No route for {path}"})

    def _delete(self, window_id: int, body: dict[str, Any]) -> httpx.Response:
        window = self.windows.get(window_id)
        if window is None:
            return httpx.Response(404, json={"message": "Availability not found"})
        if not body:
            del self.windows[window_id]
            return httpx.Response(200, json={"message": "Availability deleted successfully"})

        start, end = body["startDate"], body["endDate"]
        booked = sorted({
            b["bookingDate"] for b in self.bookings if start <= b["bookingDate"] <= end
        })
        if booked:
            return httpx.Response(409, json={
                "message": "Cannot delete dates that already have bookings",
                "bookedDates": booked,
            })

        keep_left = start > window["startDate"]
        keep_right = end < window["endDate"]
        original_end = window["endDate"]
        if keep_left:
            window["endDate"] = _shift(start, -1)
        else:
            del self.windows[window_id]
        if keep_right:
            self.add_window(
                _shift(end, 1), original_end, window["startTime"], window["endTime"],
                window["vendor_id"],
            )
        return httpx.Response(200, json={"message": "Availability deleted successfully"})


def _shift(iso: str, days: int) -> str:
    return (date.fromisoformat(iso) + timedelta(days=days)).isoformat()


@pytest.fixture
def anchor():
    return make_anchor()


@pytest.fixture
def resolver(anchor):
    return AvailabilityResolver(anchor)


@pytest.fixture
def builder(anchor, resolver):
    return CalendarGridBuilder(anchor, resolver)


@pytest.fixture
def server():
    return FakeBackendServer()


@pytest.fixture
def backend(anchor, server):
    return AvailabilityBackend(
        anchor,
        base_url="http://backend.test",
        auth_token="test-token",
        transport=httpx.MockTransport(server.handle),
    )


@pytest.fixture
def store(backend, resolver):
    return AvailabilityStore(backend, resolver)

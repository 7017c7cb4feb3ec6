"""
HTTP client for the vendor availability backend.

Wraps an ``httpx.AsyncClient`` and translates every non-success outcome
into the engine's error types, so callers only ever see ValidationError,
ConflictError, TransientError or BackendError.

Passing ``vendor_id`` to the availability calls switches to the admin
endpoints for that vendor; without it the signed-in vendor's own
endpoints are used.
"""

from dataclasses import dataclass
from datetime import date
from types import TracebackType
from typing import Any, Optional, Union

import httpx
from pydantic import ValidationError as SchemaError

from vendor_calendar.config import settings
from vendor_calendar.engine.date_anchor import DateAnchor
from vendor_calendar.errors import (
    BackendError,
    CalendarError,
    ConflictError,
    Rule,
    RuleViolation,
    TransientError,
    ValidationError,
)
from vendor_calendar.logging_context import get_vendor_logger
from vendor_calendar.schemas.availability_schema import (
    AvailabilityDraft,
    AvailabilityWindow,
    WindowId,
)
from vendor_calendar.schemas.booking_schema import Booking
from vendor_calendar.schemas.vendor_schema import VendorSummary

logger = get_vendor_logger(__name__)

BOOKINGS_PATH = "/api/booking/vendorassignedservices"
VENDORS_PATH = "/api/vendor/get-vendors"
BOOKING_DATE_KEYS = ("bookingDate", "booking_date", "date")
RETRYABLE_STATUSES = frozenset({408, 429})


@dataclass(frozen=True)
class AvailabilityPaths:
    """Endpoint templates for one access level."""

    fetch: str
    create: str
    update: str
    delete: str


VENDOR_PATHS = AvailabilityPaths(
    fetch="/api/vendor/get-availability",
    create="/api/vendor/set-availability",
    update="/api/vendor/edit-availability/{window_id}",
    delete="/api/vendor/delete-availability/{window_id}",
)

ADMIN_PATHS = AvailabilityPaths(
    fetch="/api/vendor/admin-get-availability/{vendor_id}",
    create="/api/vendor/admin-set-availability/{vendor_id}",
    update="/api/vendor/admin-edit-availability/{window_id}",
    delete="/api/vendor/admin-delete-availability/{window_id}",
)


def _rows(body: Any, key: str) -> list[dict[str, Any]]:
    """Unwrap ``{key: [...]}`` envelopes; bare lists pass through."""
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        return body.get(key) or []
    return []


def _message(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        for key in ("message", "error", "detail"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return None


class AvailabilityBackend:
    """Async client for the booking and availability endpoints."""

    def __init__(
        self,
        anchor: DateAnchor,
        base_url: Optional[str] = None,
        auth_token: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._anchor = anchor
        token = auth_token if auth_token is not None else settings.backend.auth_token
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.backend.base_url,
            headers=headers,
            timeout=timeout or settings.backend.timeout_seconds,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "AvailabilityBackend":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        await self.aclose()

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    async def list_bookings(self) -> list[Booking]:
        body = await self._request("GET", BOOKINGS_PATH)
        bookings = []
        for row in _rows(body, "bookings"):
            normalized = dict(row)
            for key in BOOKING_DATE_KEYS:
                if normalized.get(key):
                    normalized[key] = self._date_of(normalized[key], 200)
            bookings.append(self._parse(Booking, normalized))
        return bookings

    async def list_availability(
        self, vendor_id: Optional[WindowId] = None
    ) -> list[AvailabilityWindow]:
        path = self._paths(vendor_id).fetch.format(vendor_id=vendor_id)
        body = await self._request("GET", path)
        windows = []
        for row in _rows(body, "availabilities"):
            if vendor_id is not None and row.get("vendor_id") is None:
                row = {**row, "vendor_id": vendor_id}
            windows.append(self._parse(AvailabilityWindow, row))
        return windows

    async def list_vendors(self) -> list[VendorSummary]:
        body = await self._request("GET", VENDORS_PATH, params={"limit": "all"})
        return [self._parse(VendorSummary, row) for row in _rows(body, "vendors")]

    # ------------------------------------------------------------------ #
    # Writes
    # ------------------------------------------------------------------ #

    async def create_availability(
        self, draft: AvailabilityDraft, vendor_id: Optional[WindowId] = None
    ) -> str:
        path = self._paths(vendor_id).create.format(vendor_id=vendor_id)
        body = await self._request("POST", path, json=draft.to_payload())
        return _message(body) or "Availability set successfully"

    async def update_availability(
        self,
        window_id: WindowId,
        draft: AvailabilityDraft,
        vendor_id: Optional[WindowId] = None,
    ) -> str:
        path = self._paths(vendor_id).update.format(window_id=window_id)
        body = await self._request("PUT", path, json=draft.to_payload())
        return _message(body) or "Availability updated successfully"

    async def delete_availability(
        self,
        window_id: WindowId,
        payload: dict[str, str],
        vendor_id: Optional[WindowId] = None,
    ) -> str:
        path = self._paths(vendor_id).delete.format(window_id=window_id)
        body = await self._request("DELETE", path, json=payload)
        return _message(body) or "Availability deleted successfully"

    # ------------------------------------------------------------------ #
    # Plumbing
    # ------------------------------------------------------------------ #

    @staticmethod
    def _paths(vendor_id: Optional[WindowId]) -> AvailabilityPaths:
        return VENDOR_PATHS if vendor_id is None else ADMIN_PATHS

    @staticmethod
    def _parse(model: Any, row: dict[str, Any]) -> Any:
        try:
            return model.model_validate(row)
        except SchemaError as exc:
            raise BackendError(f"Malformed {model.__name__} row from backend: {exc}", 200) from exc

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[dict[str, Any]] = None,
        params: Optional[dict[str, str]] = None,
    ) -> Any:
        try:
            response = await self._client.request(method, path, json=json, params=params)
        except httpx.TimeoutException as exc:
            logger.warning("%s %s timed out", method, path)
            raise TransientError(f"{method} {path} timed out") from exc
        except httpx.TransportError as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise TransientError(f"{method} {path} failed: {exc}") from exc

        body = self._decode(response)
        if response.is_success:
            logger.debug("%s %s -> %d", method, path, response.status_code)
            return body
        raise self._error_for(method, path, response.status_code, body)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    def _error_for(
        self, method: str, path: str, status: int, body: Any
    ) -> CalendarError:
        message = _message(body) or f"{method} {path} returned {status}"

        if status >= 500 or status in RETRYABLE_STATUSES:
            logger.warning("Transient backend failure %d on %s %s", status, method, path)
            return TransientError(message, status)

        booked = body.get("bookedDates") if isinstance(body, dict) else None
        if booked or status == 409:
            booked_dates = self._booked_dates(booked or [], status)
            logger.warning(
                "Backend reported booked dates on %s %s: %s",
                method, path, [d.isoformat() for d in booked_dates],
            )
            return ConflictError(booked_dates, message)

        if status in (400, 422):
            return ValidationError([RuleViolation(Rule.SERVER_REJECTED, None, message)])
        if status == 404:
            return ValidationError([RuleViolation(Rule.UNKNOWN_WINDOW, None, message)])
        return BackendError(message, status)

    def _booked_dates(self, raw: list[Union[str, date]], status: int) -> list[date]:
        return [self._date_of(value, status) for value in raw]

    def _date_of(self, value: Any, status: int) -> date:
        try:
            return self._anchor.date_of(value)
        except (ValueError, TypeError, AttributeError) as exc:
            raise BackendError(f"Malformed date from backend: {value!r}", status) from exc

"""
Multi-vendor availability overview for the admin calendar.

Loads every vendor and then each vendor's windows concurrently. A vendor
whose windows cannot be fetched is shown as having none, so one broken
vendor does not blank the whole calendar.
"""

import asyncio
import logging
from datetime import date
from typing import Optional

from vendor_calendar.engine.resolver import AvailabilityResolver
from vendor_calendar.errors import CalendarError
from vendor_calendar.schemas.availability_schema import AvailabilityWindow, WindowId
from vendor_calendar.schemas.vendor_schema import VendorSummary
from vendor_calendar.store.backend import AvailabilityBackend

logger = logging.getLogger(__name__)


class VendorOverviewStore:
    """All vendors' windows, keyed by vendor id."""

    def __init__(self, backend: AvailabilityBackend, resolver: AvailabilityResolver) -> None:
        self._backend = backend
        self._resolver = resolver
        self._vendors: list[VendorSummary] = []
        self._windows_by_vendor: dict[str, list[AvailabilityWindow]] = {}

    @property
    def vendors(self) -> list[VendorSummary]:
        return list(self._vendors)

    @property
    def windows(self) -> list[AvailabilityWindow]:
        return [w for windows in self._windows_by_vendor.values() for w in windows]

    def vendor(self, vendor_id: WindowId) -> Optional[VendorSummary]:
        for vendor in self._vendors:
            if str(vendor.vendor_id) == str(vendor_id):
                return vendor
        return None

    def windows_for(self, vendor_id: WindowId) -> list[AvailabilityWindow]:
        return list(self._windows_by_vendor.get(str(vendor_id), []))

    async def refresh(self) -> dict[str, list[AvailabilityWindow]]:
        vendors = await self._backend.list_vendors()
        results = await asyncio.gather(*(self._load(v) for v in vendors))
        self._vendors = vendors
        self._windows_by_vendor = {
            str(vendor.vendor_id): windows for vendor, windows in zip(vendors, results)
        }
        logger.info(
            "Overview loaded: %d vendors, %d windows", len(vendors), len(self.windows)
        )
        return dict(self._windows_by_vendor)

    async def _load(self, vendor: VendorSummary) -> list[AvailabilityWindow]:
        try:
            return await self._backend.list_availability(vendor.vendor_id)
        except CalendarError as exc:
            logger.warning(
                "Availability for vendor %s unavailable, showing none: %s",
                vendor.vendor_id, exc,
            )
            return []

    def coverage_by_date(self, start: date, end: date) -> dict[date, list[AvailabilityWindow]]:
        return self._resolver.coverage_by_date(self.windows, start, end)

    def vendor_count_by_date(self, start: date, end: date) -> dict[date, int]:
        return self._resolver.vendor_count_by_date(self.windows, start, end)

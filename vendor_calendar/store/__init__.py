from vendor_calendar.store.availability_store import AvailabilityStore, StoreAction
from vendor_calendar.store.backend import AvailabilityBackend
from vendor_calendar.store.booking_store import BookingStore
from vendor_calendar.store.lifecycle import LifecycleTrigger, WindowLifecycle, WindowState
from vendor_calendar.store.overview import VendorOverviewStore

__all__ = [
    "AvailabilityBackend",
    "AvailabilityStore",
    "StoreAction",
    "BookingStore",
    "VendorOverviewStore",
    "WindowLifecycle",
    "WindowState",
    "LifecycleTrigger",
]

from vendor_calendar.engine.booking_index import BookingIndex, index_by_date
from vendor_calendar.engine.date_anchor import DateAnchor, Granularity
from vendor_calendar.engine.grid_builder import CalendarGridBuilder
from vendor_calendar.engine.resolver import AvailabilityResolver, ValidationResult

__all__ = [
    "DateAnchor",
    "Granularity",
    "BookingIndex",
    "index_by_date",
    "CalendarGridBuilder",
    "AvailabilityResolver",
    "ValidationResult",
]

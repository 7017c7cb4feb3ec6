"""Error types raised by the calendar engine and its backend client."""

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class Rule(str, Enum):
    """Validation rules a create, update or delete request can violate."""

    MISSING_FIELD = "missing_field"
    MALFORMED_DATE = "malformed_date"
    MALFORMED_TIME = "malformed_time"
    END_BEFORE_START = "end_before_start"
    DATE_IN_PAST = "date_in_past"
    RANGE_OUTSIDE_WINDOW = "range_outside_window"
    UNKNOWN_WINDOW = "unknown_window"
    SERVER_REJECTED = "server_rejected"


@dataclass(frozen=True)
class RuleViolation:
    """A single failed rule, tied to the field that failed it."""

    rule: Rule
    field: Optional[str] = None
    message: str = ""


class CalendarError(Exception):
    """Base class for calendar engine errors."""


class ValidationError(CalendarError):
    """Raised when a request fails validation and must not be submitted."""

    def __init__(self, violations: list[RuleViolation]) -> None:
        self.violations = list(violations)
        summary = "; ".join(v.message or v.rule.value for v in self.violations)
        super().__init__(summary or "Validation failed")

    @property
    def rules(self) -> set[Rule]:
        return {v.rule for v in self.violations}


class ConflictError(CalendarError):
    """Raised when the backend refuses a deletion because dates are booked."""

    def __init__(self, booked_dates: list[date], message: Optional[str] = None) -> None:
        self.booked_dates = sorted(booked_dates)
        if message is None:
            listed = ", ".join(d.isoformat() for d in self.booked_dates)
            message = f"Bookings exist on {listed}" if listed else "Booking conflict"
        super().__init__(message)


class TransientError(CalendarError):
    """Network failure, timeout or 5xx response. Safe to retry manually."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class BackendError(CalendarError):
    """Unexpected non-success response from the backend."""

    def __init__(self, message: str, status_code: int) -> None:
        self.status_code = status_code
        super().__init__(message)


class ActionBusyError(CalendarError):
    """Raised when an action is submitted while the same action is in flight."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"'{action}' is already in progress")

"""Booking data models. Bookings are read-only to the calendar engine."""

from datetime import date, time
from enum import Enum
from typing import Any, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class BookingStatus(str, Enum):
    """Booking lifecycle status, owned by the external booking subsystem."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        return self.value.title()

    @classmethod
    def coerce(cls, value: Any) -> "BookingStatus":
        """Accept a status name or the backend's numeric code.

        Codes 0, 1 and 2 are pending, approved and rejected; any other
        code is treated as completed.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Invalid booking status: {value!r}")
        if isinstance(value, int):
            return _STATUS_CODES.get(value, cls.COMPLETED)
        if isinstance(value, str):
            text = value.strip().lower()
            if text.lstrip("-").isdigit():
                return _STATUS_CODES.get(int(text), cls.COMPLETED)
            return cls(text)
        raise ValueError(f"Invalid booking status: {value!r}")


_STATUS_CODES: dict[int, BookingStatus] = {
    0: BookingStatus.PENDING,
    1: BookingStatus.APPROVED,
    2: BookingStatus.REJECTED,
}


class Booking(BaseModel):
    """A customer booking on a vendor's calendar."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Union[int, str] = Field(
        validation_alias=AliasChoices("id", "booking_id", "bookingId"),
    )
    vendor_id: Optional[Union[int, str]] = Field(
        default=None,
        validation_alias=AliasChoices("vendor_id", "vendorId"),
    )
    booking_date: date = Field(
        validation_alias=AliasChoices("bookingDate", "booking_date", "date"),
    )
    booking_time: Optional[time] = Field(
        default=None,
        validation_alias=AliasChoices("bookingTime", "booking_time"),
    )
    status: BookingStatus = Field(
        default=BookingStatus.PENDING,
        validation_alias=AliasChoices("status", "bookingStatus"),
    )

    @field_validator("status", mode="before")
    @classmethod
    def _coerce_status(cls, value: Any) -> BookingStatus:
        return BookingStatus.coerce(value)

    @field_validator("booking_time", mode="after")
    @classmethod
    def _minute_precision(cls, value: Optional[time]) -> Optional[time]:
        if value is None:
            return None
        return value.replace(second=0, microsecond=0, tzinfo=None)

"""Availability window data models and deletion requests."""

from dataclasses import dataclass, field
from datetime import date, time
from enum import Enum
from typing import Optional, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from vendor_calendar.config import settings
from vendor_calendar.utils import format_date, format_time

WindowId = Union[int, str]


class AvailabilityDraft(BaseModel):
    """A date range with daily time-of-day bounds, not tied to a stored row."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    start_time: time = Field(alias="startTime")
    end_time: time = Field(alias="endTime")

    @field_validator("start_time", "end_time", mode="after")
    @classmethod
    def _minute_precision(cls, value: time) -> time:
        return value.replace(second=0, microsecond=0, tzinfo=None)

    @model_validator(mode="after")
    def _ordered_dates(self) -> "AvailabilityDraft":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self

    @field_serializer("start_date", "end_date")
    def _serialize_date(self, value: date) -> str:
        return format_date(value)

    @field_serializer("start_time", "end_time")
    def _serialize_time(self, value: time) -> str:
        return format_time(value)

    def to_payload(self) -> dict[str, str]:
        """Request body for the create and update endpoints."""
        return self.model_dump(
            by_alias=True, include={"start_date", "end_date", "start_time", "end_time"}
        )


class AvailabilityWindow(AvailabilityDraft):
    """A persisted availability window as reported by the backend."""

    id: WindowId = Field(
        validation_alias=AliasChoices("id", "vendor_availability_id"),
        serialization_alias="id",
    )
    vendor_id: Optional[WindowId] = Field(
        default=None,
        validation_alias=AliasChoices("vendor_id", "vendorId"),
        serialization_alias="vendor_id",
    )


@dataclass
class AvailabilityInput:
    """Raw create/edit form values, validated by the resolver before use."""

    start_date: Union[str, date, None] = None
    end_date: Union[str, date, None] = None
    start_time: Union[str, time, None] = None
    end_time: Union[str, time, None] = None

    @classmethod
    def blank(cls) -> "AvailabilityInput":
        """Empty form prefilled with the configured default daily hours."""
        return cls(
            start_time=settings.calendar.default_start_time,
            end_time=settings.calendar.default_end_time,
        )

    @classmethod
    def from_window(cls, window: AvailabilityDraft) -> "AvailabilityInput":
        """Edit form prefilled from an existing window."""
        return cls(
            start_date=window.start_date,
            end_date=window.end_date,
            start_time=window.start_time,
            end_time=window.end_time,
        )


class DeletionMode(str, Enum):
    """How much of a window a deletion removes."""

    ALL = "all"
    RANGE_WITHIN = "range"


@dataclass(frozen=True)
class DeletionRequest:
    """Target window id plus the deletion mode and, for ranges, its bounds."""

    window_id: WindowId
    mode: DeletionMode = DeletionMode.ALL
    start_date: Union[str, date, None] = None
    end_date: Union[str, date, None] = None

    @classmethod
    def all(cls, window_id: WindowId) -> "DeletionRequest":
        return cls(window_id=window_id, mode=DeletionMode.ALL)

    @classmethod
    def range_within(
        cls,
        window_id: WindowId,
        start_date: Union[str, date, None],
        end_date: Union[str, date, None],
    ) -> "DeletionRequest":
        return cls(
            window_id=window_id,
            mode=DeletionMode.RANGE_WITHIN,
            start_date=start_date,
            end_date=end_date,
        )


@dataclass(frozen=True)
class DeletionPlan:
    """Expected outcome of a deletion, computed before it is submitted.

    Advisory only: the backend decides the real carve and may refuse it
    outright when bookings fall inside the deleted range.
    """

    window: AvailabilityWindow
    requested_mode: DeletionMode
    mode: DeletionMode
    deleted_start: date
    deleted_end: date
    remainders: tuple[AvailabilityDraft, ...] = field(default_factory=tuple)

    @property
    def is_full_removal(self) -> bool:
        return not self.remainders

    def to_payload(self) -> dict[str, str]:
        """Request body for the delete endpoint."""
        if self.requested_mode == DeletionMode.ALL:
            return {}
        return {
            "startDate": format_date(self.deleted_start),
            "endDate": format_date(self.deleted_end),
        }

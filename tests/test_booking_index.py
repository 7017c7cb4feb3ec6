"""Tests for the per-day booking index and booking parsing."""

from datetime import date, time

import pytest
from pydantic import ValidationError as SchemaError

from vendor_calendar.engine.booking_index import BookingIndex, index_by_date
from vendor_calendar.schemas.booking_schema import Booking, BookingStatus
from tests.conftest import make_booking


class TestIndexByDate:
    def test_groups_by_date(self):
        grouped = index_by_date([
            make_booking("2025-03-14", booking_id=1),
            make_booking("2025-03-15", booking_id=2),
            make_booking("2025-03-14", booking_id=3),
        ])
        assert set(grouped) == {date(2025, 3, 14), date(2025, 3, 15)}
        assert [b.id for b in grouped[date(2025, 3, 14)]] == [1, 3]

    def test_sorted_by_time_within_day(self):
        grouped = index_by_date([
            make_booking("2025-03-14", "15:00", booking_id=1),
            make_booking("2025-03-14", "09:30", booking_id=2),
            make_booking("2025-03-14", "12:00", booking_id=3),
        ])
        assert [b.id for b in grouped[date(2025, 3, 14)]] == [2, 3, 1]

    def test_equal_times_keep_input_order(self):
        grouped = index_by_date([
            make_booking("2025-03-14", "10:00", booking_id="b"),
            make_booking("2025-03-14", "10:00", booking_id="a"),
        ])
        assert [b.id for b in grouped[date(2025, 3, 14)]] == ["b", "a"]

    def test_untimed_bookings_first(self):
        grouped = index_by_date([
            make_booking("2025-03-14", "08:00", booking_id=1),
            make_booking("2025-03-14", None, booking_id=2),
        ])
        assert [b.id for b in grouped[date(2025, 3, 14)]] == [2, 1]


class TestBookingIndex:
    def setup_method(self):
        self.index = BookingIndex([
            make_booking("2025-03-14", "10:00", booking_id=1, status=BookingStatus.PENDING),
            make_booking("2025-03-14", "11:00", booking_id=2, status=BookingStatus.APPROVED),
            make_booking("2025-03-14", "12:00", booking_id=3, status=BookingStatus.PENDING),
            make_booking("2025-03-20", "09:00", booking_id=4),
        ])

    def test_lookup(self):
        assert [b.id for b in self.index.lookup(date(2025, 3, 14))] == [1, 2, 3]

    def test_lookup_empty_day(self):
        assert self.index.lookup(date(2025, 3, 15)) == ()

    def test_len_and_contains(self):
        assert len(self.index) == 4
        assert date(2025, 3, 20) in self.index
        assert date(2025, 3, 21) not in self.index

    def test_dates_ascending(self):
        assert self.index.dates() == [date(2025, 3, 14), date(2025, 3, 20)]

    def test_status_counts(self):
        counts = self.index.status_counts(date(2025, 3, 14))
        assert counts == {BookingStatus.PENDING: 2, BookingStatus.APPROVED: 1}

    def test_rebuild_replaces_contents(self):
        self.index.rebuild([make_booking("2025-04-01")])
        assert len(self.index) == 1
        assert self.index.lookup(date(2025, 3, 14)) == ()


class TestBookingParsing:
    def test_backend_field_names(self):
        booking = Booking.model_validate({
            "booking_id": 9,
            "vendorId": 7,
            "bookingDate": "2025-03-14",
            "bookingTime": "14:30:00",
            "bookingStatus": 1,
        })
        assert booking.id == 9
        assert booking.vendor_id == 7
        assert booking.booking_date == date(2025, 3, 14)
        assert booking.booking_time == time(14, 30)
        assert booking.status == BookingStatus.APPROVED

    @pytest.mark.parametrize("raw,expected", [
        (0, BookingStatus.PENDING),
        (1, BookingStatus.APPROVED),
        (2, BookingStatus.REJECTED),
        (3, BookingStatus.COMPLETED),
        ("2", BookingStatus.REJECTED),
        ("Pending", BookingStatus.PENDING),
    ])
    def test_status_codes(self, raw, expected):
        assert BookingStatus.coerce(raw) == expected

    def test_status_defaults_to_pending(self):
        booking = Booking.model_validate({"id": 1, "date": "2025-03-14"})
        assert booking.status == BookingStatus.PENDING
        assert booking.booking_time is None

    def test_unknown_status_name_rejected(self):
        with pytest.raises(SchemaError):
            Booking.model_validate({"id": 1, "date": "2025-03-14", "status": "lost"})

    def test_status_label(self):
        assert BookingStatus.APPROVED.label == "Approved"

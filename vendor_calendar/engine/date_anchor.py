"""
Single source of "now" and "today", pinned to the reference timezone.

Every past-date rule and every period boundary in the engine is computed
here. Other components work on plain ``datetime.date`` values and never
touch timezones or timestamps, so a viewer's local clock or a DST switch
cannot move a day boundary.

Usage:
    anchor = DateAnchor()                    # zone and week start from settings
    anchor.today()                           # date in the reference zone
    anchor.clamp_not_past(date(2020, 1, 1))  # -> anchor.today()
"""

import calendar
import logging
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Iterator, Optional, Union
from zoneinfo import ZoneInfo

from vendor_calendar.config import settings

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7


class Granularity(str, Enum):
    """Period sizes used for grid boundaries and navigation."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DateAnchor:
    """Zone-aware clock and calendar arithmetic for the whole engine."""

    def __init__(
        self,
        tz_name: Optional[str] = None,
        week_start: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._zone = ZoneInfo(tz_name or settings.calendar.timezone)
        self._week_start = (
            settings.calendar.week_start_index if week_start is None else week_start
        )
        if not 0 <= self._week_start < DAYS_PER_WEEK:
            raise ValueError(f"week_start must be 0-6 (Monday=0), got {self._week_start}")
        self._clock = clock or _utc_now

    @property
    def zone(self) -> ZoneInfo:
        return self._zone

    @property
    def week_start(self) -> int:
        return self._week_start

    # ------------------------------------------------------------------ #
    # Now / today
    # ------------------------------------------------------------------ #

    def now(self) -> datetime:
        """Current instant expressed in the reference timezone.

        A naive value from the clock is taken to be UTC.
        """
        instant = self._clock()
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=timezone.utc)
        return instant.astimezone(self._zone)

    def today(self) -> date:
        return self.now().date()

    def is_past(self, value: date) -> bool:
        return value < self.today()

    def is_today(self, value: date) -> bool:
        return value == self.today()

    def clamp_not_past(self, value: date) -> date:
        """Return ``value`` unless it is before today, in which case today."""
        today = self.today()
        return value if value >= today else today

    def date_of(self, value: Union[str, date, datetime]) -> date:
        """
        Calendar date of a backend value in the reference timezone.

        Plain ``YYYY-MM-DD`` strings and dates pass through unchanged.
        Aware timestamps are converted into the reference zone first;
        naive timestamps are read as reference-zone wall-clock time.
        """
        if isinstance(value, datetime):
            moment = value
        elif isinstance(value, date):
            return value
        else:
            text = value.strip()
            if len(text) == 10:
                return date.fromisoformat(text)
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            moment = datetime.fromisoformat(text.replace(" ", "T", 1))
        if moment.tzinfo is None:
            return moment.date()
        return moment.astimezone(self._zone).date()

    # ------------------------------------------------------------------ #
    # Calendar-day arithmetic
    # ------------------------------------------------------------------ #

    @staticmethod
    def add_days(value: date, days: int) -> date:
        return value + timedelta(days=days)

    @staticmethod
    def add_months(value: date, months: int) -> date:
        """Step whole months, clamping to the last day of shorter months."""
        index = value.month - 1 + months
        year = value.year + index // 12
        month = index % 12 + 1
        day = min(value.day, calendar.monthrange(year, month)[1])
        return value.replace(year=year, month=month, day=day)

    def iter_days(self, start: date, end: date) -> Iterator[date]:
        """Yield every date from ``start`` to ``end`` inclusive."""
        current = start
        while current <= end:
            yield current
            current = self.add_days(current, 1)

    def start_of_week(self, value: date) -> date:
        offset = (value.weekday() - self._week_start) % DAYS_PER_WEEK
        return self.add_days(value, -offset)

    def end_of_week(self, value: date) -> date:
        return self.add_days(self.start_of_week(value), DAYS_PER_WEEK - 1)

    @staticmethod
    def start_of_month(value: date) -> date:
        return value.replace(day=1)

    @staticmethod
    def end_of_month(value: date) -> date:
        return value.replace(day=calendar.monthrange(value.year, value.month)[1])

    def start_of_period(self, value: date, granularity: Granularity) -> date:
        if granularity == Granularity.MONTH:
            return self.start_of_month(value)
        if granularity == Granularity.WEEK:
            return self.start_of_week(value)
        return value

    def end_of_period(self, value: date, granularity: Granularity) -> date:
        if granularity == Granularity.MONTH:
            return self.end_of_month(value)
        if granularity == Granularity.WEEK:
            return self.end_of_week(value)
        return value

    def shift_period(self, value: date, granularity: Granularity, steps: int) -> date:
        """Move ``steps`` whole periods forward (negative for backward)."""
        if granularity == Granularity.MONTH:
            return self.add_months(value, steps)
        if granularity == Granularity.WEEK:
            return self.add_days(value, steps * DAYS_PER_WEEK)
        return self.add_days(value, steps)

"""
Interval algebra over availability windows.

Pure functions of their inputs plus the DateAnchor's notion of today:
overlap queries for grid highlighting, validation of create/update
input, and deletion planning ("carving" a date range out of a window).
No network I/O happens here. Deletion plans are advisory; the backend
owns the real carve and may still refuse it when bookings fall inside
the deleted range.

Usage:
    resolver = AvailabilityResolver(DateAnchor())
    result = resolver.validate_create_or_update(AvailabilityInput(...))
    if result.passed:
        payload = result.window.to_payload()
    plan = resolver.plan_deletion(window, DeletionRequest.range_within(window.id, c, d))
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Sequence, Union

from vendor_calendar.engine.date_anchor import DateAnchor
from vendor_calendar.errors import Rule, RuleViolation, ValidationError
from vendor_calendar.schemas.availability_schema import (
    AvailabilityDraft,
    AvailabilityInput,
    AvailabilityWindow,
    DeletionMode,
    DeletionPlan,
    DeletionRequest,
)
from vendor_calendar.utils import is_blank, parse_date, parse_time_of_day

logger = logging.getLogger(__name__)

FIELD_LABELS: dict[str, str] = {
    "start_date": "start date",
    "end_date": "end date",
    "start_time": "start time",
    "end_time": "end time",
}


@dataclass
class ValidationResult:
    """Outcome of validating create/update input."""

    passed: bool
    window: Optional[AvailabilityDraft] = None
    violations: list[RuleViolation] = field(default_factory=list)

    def raise_for_violations(self) -> AvailabilityDraft:
        """Return the normalized window, or raise ValidationError."""
        if not self.passed or self.window is None:
            raise ValidationError(self.violations)
        return self.window


def _covers(window: AvailabilityDraft, day: date) -> bool:
    return window.start_date <= day <= window.end_date


class AvailabilityResolver:
    """Overlap queries, input validation and deletion planning."""

    def __init__(self, anchor: DateAnchor) -> None:
        self._anchor = anchor

    @property
    def anchor(self) -> DateAnchor:
        return self._anchor

    # ------------------------------------------------------------------ #
    # Overlap queries
    # ------------------------------------------------------------------ #

    def overlapping(
        self, day: date, windows: Iterable[AvailabilityWindow]
    ) -> list[AvailabilityWindow]:
        """Windows whose date range includes ``day``, in input order."""
        return [w for w in windows if _covers(w, day)]

    def has_coverage(self, day: date, windows: Iterable[AvailabilityWindow]) -> bool:
        return any(_covers(w, day) for w in windows)

    def coverage_by_date(
        self,
        windows: Iterable[AvailabilityWindow],
        start: date,
        end: date,
    ) -> dict[date, list[AvailabilityWindow]]:
        """Expand windows across each date they cover, limited to ``[start, end]``."""
        by_date: dict[date, list[AvailabilityWindow]] = defaultdict(list)
        for window in windows:
            first = max(window.start_date, start)
            last = min(window.end_date, end)
            for day in self._anchor.iter_days(first, last):
                by_date[day].append(window)
        return dict(by_date)

    def vendor_count_by_date(
        self,
        windows: Iterable[AvailabilityWindow],
        start: date,
        end: date,
    ) -> dict[date, int]:
        """Distinct vendors with availability on each date in ``[start, end]``.

        A vendor with several overlapping windows on one date counts once.
        """
        return {
            day: len({str(w.vendor_id) for w in day_windows})
            for day, day_windows in self.coverage_by_date(windows, start, end).items()
        }

    # ------------------------------------------------------------------ #
    # Create / update validation
    # ------------------------------------------------------------------ #

    def validate_create_or_update(
        self, data: AvailabilityInput
    ) -> ValidationResult:
        """
        Check raw form input and normalize it into a window.

        Rejects missing fields, malformed dates or times, an end date
        before the start date, and dates before today. Overlap with other
        windows and ``end_time <= start_time`` are accepted.
        """
        violations: list[RuleViolation] = []

        for name in ("start_date", "end_date", "start_time", "end_time"):
            if is_blank(getattr(data, name)):
                violations.append(RuleViolation(
                    Rule.MISSING_FIELD, name, f"The {FIELD_LABELS[name]} is required.",
                ))
        if violations:
            return ValidationResult(passed=False, violations=violations)

        start_date = parse_date(data.start_date)
        end_date = parse_date(data.end_date)
        start_time = parse_time_of_day(data.start_time)
        end_time = parse_time_of_day(data.end_time)

        for name, parsed in (("start_date", start_date), ("end_date", end_date)):
            if parsed is None:
                violations.append(RuleViolation(
                    Rule.MALFORMED_DATE, name,
                    f"The {FIELD_LABELS[name]} '{getattr(data, name)}' is not a YYYY-MM-DD date.",
                ))
        for name, parsed in (("start_time", start_time), ("end_time", end_time)):
            if parsed is None:
                violations.append(RuleViolation(
                    Rule.MALFORMED_TIME, name,
                    f"The {FIELD_LABELS[name]} '{getattr(data, name)}' is not an HH:MM time.",
                ))

        if start_date is not None and end_date is not None:
            violations.extend(self._check_range(start_date, end_date))

        if violations:
            logger.debug("Availability input rejected: %s", [v.rule.value for v in violations])
            return ValidationResult(passed=False, violations=violations)

        window = AvailabilityDraft(
            start_date=start_date,
            end_date=end_date,
            start_time=start_time,
            end_time=end_time,
        )
        return ValidationResult(passed=True, window=window)

    def _check_range(self, start: date, end: date) -> list[RuleViolation]:
        violations = []
        for name, value in (("start_date", start), ("end_date", end)):
            if self._anchor.is_past(value):
                violations.append(RuleViolation(
                    Rule.DATE_IN_PAST, name,
                    f"The {FIELD_LABELS[name]} {value.isoformat()} is in the past.",
                ))
        if end < start:
            violations.append(RuleViolation(
                Rule.END_BEFORE_START, "end_date",
                "The end date must be on or after the start date.",
            ))
        return violations

    # ------------------------------------------------------------------ #
    # Deletion planning
    # ------------------------------------------------------------------ #

    def validate_deletion(
        self, window: AvailabilityWindow, request: DeletionRequest
    ) -> list[RuleViolation]:
        """Violations that block a deletion request. Empty when it may be sent."""
        if request.mode == DeletionMode.ALL:
            return []

        violations: list[RuleViolation] = []
        for name in ("start_date", "end_date"):
            if is_blank(getattr(request, name)):
                violations.append(RuleViolation(
                    Rule.MISSING_FIELD, name, f"Please select a {FIELD_LABELS[name]}.",
                ))
        if violations:
            return violations

        start = parse_date(request.start_date)
        end = parse_date(request.end_date)
        for name, parsed in (("start_date", start), ("end_date", end)):
            if parsed is None:
                violations.append(RuleViolation(
                    Rule.MALFORMED_DATE, name,
                    f"The {FIELD_LABELS[name]} '{getattr(request, name)}' is not a YYYY-MM-DD date.",
                ))
        if violations:
            return violations

        violations.extend(self._check_range(start, end))
        if not (window.start_date <= start and end <= window.end_date):
            violations.append(RuleViolation(
                Rule.RANGE_OUTSIDE_WINDOW, None,
                f"The range must lie within {window.start_date.isoformat()} "
                f"to {window.end_date.isoformat()}.",
            ))
        return violations

    def plan_deletion(
        self, window: AvailabilityWindow, request: DeletionRequest
    ) -> DeletionPlan:
        """
        Compute what a deletion should leave behind.

        For a range ``[C, D]`` carved out of ``[A, B]`` the left remainder
        ``[A, C-1]`` survives when ``C > A`` and the right remainder
        ``[D+1, B]`` survives when ``D < B``; both keep the window's daily
        times. With no remainder the plan degenerates to a full removal.

        Raises:
            ValidationError: If the range is missing, malformed, in the
                past, reversed, or not inside the window.
        """
        violations = self.validate_deletion(window, request)
        if violations:
            raise ValidationError(violations)

        if request.mode == DeletionMode.ALL:
            return DeletionPlan(
                window=window,
                requested_mode=DeletionMode.ALL,
                mode=DeletionMode.ALL,
                deleted_start=window.start_date,
                deleted_end=window.end_date,
            )

        start = parse_date(request.start_date)
        end = parse_date(request.end_date)
        remainders = tuple(self.carve(window, start, end))
        plan = DeletionPlan(
            window=window,
            requested_mode=DeletionMode.RANGE_WITHIN,
            mode=DeletionMode.RANGE_WITHIN if remainders else DeletionMode.ALL,
            deleted_start=start,
            deleted_end=end,
            remainders=remainders,
        )
        logger.debug(
            "Deletion planned for window %s: %s..%s leaves %d remainder(s)",
            window.id, start, end, len(remainders),
        )
        return plan

    def carve(
        self, window: AvailabilityDraft, start: date, end: date
    ) -> list[AvailabilityDraft]:
        """Subtract ``[start, end]`` from the window's date range."""
        remainders = []
        if start > window.start_date:
            remainders.append(self._with_dates(
                window, window.start_date, self._anchor.add_days(start, -1),
            ))
        if end < window.end_date:
            remainders.append(self._with_dates(
                window, self._anchor.add_days(end, 1), window.end_date,
            ))
        return remainders

    @staticmethod
    def _with_dates(window: AvailabilityDraft, start: date, end: date) -> AvailabilityDraft:
        return AvailabilityDraft(
            start_date=start,
            end_date=end,
            start_time=window.start_time,
            end_time=window.end_time,
        )

    def suggest_deletion_range(self, window: AvailabilityDraft) -> tuple[date, date]:
        """Default range for the delete dialog: today-or-later, inside the window."""
        start = self._anchor.clamp_not_past(window.start_date)
        end = window.end_date
        return start, max(start, end)

    def find(
        self, windows: Sequence[AvailabilityWindow], window_id: Union[int, str]
    ) -> Optional[AvailabilityWindow]:
        """Look a window up by id, matching ``1`` and ``"1"`` alike."""
        for window in windows:
            if str(window.id) == str(window_id):
                return window
        return None

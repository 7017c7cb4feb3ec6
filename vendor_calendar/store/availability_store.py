"""
Availability window store: the only place windows are mutated.

Each mutation is validated locally first (invalid input never reaches
the network), submitted under a per-action busy flag, and followed by a
full refetch. The refetched collection is the only truth the store
keeps; locally computed carves are never written into it.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date
from enum import Enum
from typing import Optional

from vendor_calendar.engine.resolver import AvailabilityResolver
from vendor_calendar.errors import (
    ActionBusyError,
    ConflictError,
    Rule,
    RuleViolation,
    ValidationError,
)
from vendor_calendar.logging_context import get_vendor_logger
from vendor_calendar.schemas.availability_schema import (
    AvailabilityInput,
    AvailabilityWindow,
    DeletionMode,
    DeletionPlan,
    DeletionRequest,
    WindowId,
)
from vendor_calendar.store.backend import AvailabilityBackend
from vendor_calendar.store.lifecycle import (
    LifecycleTrigger,
    WindowLifecycle,
    WindowState,
)

logger = get_vendor_logger(__name__)


class StoreAction(str, Enum):
    """Mutating actions, each with its own busy flag."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class AvailabilityStore:
    """Fetches and mutates one vendor's availability windows."""

    def __init__(
        self,
        backend: AvailabilityBackend,
        resolver: AvailabilityResolver,
        vendor_id: Optional[WindowId] = None,
    ) -> None:
        self._backend = backend
        self._resolver = resolver
        self._vendor_id = vendor_id
        self._windows: list[AvailabilityWindow] = []
        self._stale = True
        self._busy: dict[StoreAction, bool] = {action: False for action in StoreAction}
        self._lifecycles: dict[str, WindowLifecycle] = {}
        self.last_conflict: list[date] = []
        self.last_message: Optional[str] = None

    @property
    def windows(self) -> list[AvailabilityWindow]:
        return list(self._windows)

    @property
    def is_stale(self) -> bool:
        """True until the first fetch, and after a refetch that failed."""
        return self._stale

    def is_busy(self, action: StoreAction) -> bool:
        return self._busy[action]

    def lifecycle(self, window_id: WindowId) -> Optional[WindowLifecycle]:
        return self._lifecycles.get(str(window_id))

    def get(self, window_id: WindowId) -> Optional[AvailabilityWindow]:
        return self._resolver.find(self._windows, window_id)

    # ------------------------------------------------------------------ #
    # Reads
    # ------------------------------------------------------------------ #

    async def list_windows(self) -> list[AvailabilityWindow]:
        """Refetch the vendor's windows. The latest completed fetch wins."""
        return await self._fetch()

    async def _fetch(
        self,
        created: bool = False,
        replaces: Optional[WindowId] = None,
    ) -> list[AvailabilityWindow]:
        self._stale = True
        windows = await self._backend.list_availability(self._vendor_id)
        self._windows = windows
        self._stale = False
        self._observe(windows, created=created, replaces=replaces)
        logger.debug("Fetched %d availability windows", len(windows))
        return list(windows)

    async def _ensure_fresh(self) -> None:
        if self._stale:
            await self._fetch()

    def _observe(
        self,
        windows: list[AvailabilityWindow],
        created: bool,
        replaces: Optional[WindowId],
    ) -> None:
        """Register lifecycles for ids the backend has just reported."""
        for window in windows:
            key = str(window.id)
            lifecycle = self._lifecycles.get(key)
            if lifecycle is None or lifecycle.is_terminal():
                if created:
                    lifecycle = WindowLifecycle(window_id=window.id)
                    lifecycle.transition(LifecycleTrigger.CREATED)
                else:
                    lifecycle = WindowLifecycle.observed(window.id, replaces=replaces)
                self._lifecycles[key] = lifecycle
            elif lifecycle.current_state == WindowState.REPLACED:
                lifecycle.transition(LifecycleTrigger.REISSUED)

    # ------------------------------------------------------------------ #
    # Mutations
    # ------------------------------------------------------------------ #

    @asynccontextmanager
    async def _busy_flag(self, action: StoreAction) -> AsyncIterator[None]:
        if self._busy[action]:
            raise ActionBusyError(action.value)
        self._busy[action] = True
        try:
            yield
        finally:
            self._busy[action] = False

    def _require(self, window_id: WindowId) -> AvailabilityWindow:
        window = self.get(window_id)
        if window is None:
            raise ValidationError([RuleViolation(
                Rule.UNKNOWN_WINDOW, "id", f"Availability window {window_id} was not found.",
            )])
        return window

    async def create(self, data: AvailabilityInput) -> list[AvailabilityWindow]:
        """Validate and submit a new window, then refetch.

        A store that has never fetched loads the current windows first.
        Returns the refetched windows.
        """
        async with self._busy_flag(StoreAction.CREATE):
            draft = self._resolver.validate_create_or_update(data).raise_for_violations()
            # existing ids must be known before the refetch marks new ones as created
            await self._ensure_fresh()
            self.last_message = await self._backend.create_availability(draft, self._vendor_id)
            logger.info(
                "Availability created: %s..%s %s-%s",
                draft.start_date, draft.end_date, draft.start_time, draft.end_time,
            )
            return await self._fetch(created=True)

    async def update(
        self, window_id: WindowId, data: AvailabilityInput
    ) -> list[AvailabilityWindow]:
        """Replace a window's whole date/time tuple, then refetch."""
        async with self._busy_flag(StoreAction.UPDATE):
            draft = self._resolver.validate_create_or_update(data).raise_for_violations()
            await self._ensure_fresh()
            window = self._require(window_id)
            self.last_message = await self._backend.update_availability(
                window.id, draft, self._vendor_id
            )
            self._lifecycles[str(window.id)].transition(LifecycleTrigger.UPDATED)
            logger.info("Availability %s updated", window.id)
            return await self._fetch()

    async def remove(self, window_id: WindowId, request: DeletionRequest) -> DeletionPlan:
        """
        Delete a whole window or carve a range out of it.

        The plan is computed and validated before anything is sent. A
        booked-date conflict leaves local state untouched and is recorded
        in ``last_conflict`` before being re-raised. On success the
        windows are refetched; the returned plan is only what the client
        expected the backend to do.

        Raises:
            ValidationError: Unknown window or an invalid range.
            ConflictError: The backend found bookings inside the range.
            TransientError: Network failure, timeout or 5xx.
            ActionBusyError: A deletion is already in flight.
        """
        if str(request.window_id) != str(window_id):
            raise ValueError(
                f"Deletion request targets {request.window_id}, not {window_id}"
            )
        async with self._busy_flag(StoreAction.DELETE):
            self.last_conflict = []
            await self._ensure_fresh()
            window = self._require(window_id)
            plan = self._resolver.plan_deletion(window, request)
            try:
                self.last_message = await self._backend.delete_availability(
                    window.id, plan.to_payload(), self._vendor_id
                )
            except ConflictError as exc:
                self.last_conflict = list(exc.booked_dates)
                logger.warning(
                    "Deletion of %s refused, booked dates: %s",
                    window.id, [d.isoformat() for d in exc.booked_dates],
                )
                raise

            if plan.requested_mode == DeletionMode.ALL:
                trigger = LifecycleTrigger.DELETED_ALL
            elif plan.is_full_removal:
                trigger = LifecycleTrigger.FULL_CARVE
            else:
                trigger = LifecycleTrigger.PARTIAL_CARVE
            self._lifecycles[str(window.id)].transition(trigger)
            logger.info(
                "Availability %s deleted (%s %s..%s)",
                window.id, plan.mode.value, plan.deleted_start, plan.deleted_end,
            )

            await self._fetch(
                replaces=window.id if trigger == LifecycleTrigger.PARTIAL_CARVE else None
            )
            return plan

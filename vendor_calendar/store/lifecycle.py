"""
Client-observed lifecycle of an availability window.

    UNSAVED --created--> PERSISTED --updated--> PERSISTED
    PERSISTED --deleted_all / full_carve--> REMOVED
    PERSISTED --partial_carve--> REPLACED  (by 1-2 windows the backend reports)
    REPLACED --reissued--> PERSISTED       (backend kept the id for a remainder)

Every transition must be explicitly defined; anything else raises
InvalidTransitionError naming the triggers that are allowed.

Usage:
    lc = WindowLifecycle()
    lc.transition(LifecycleTrigger.CREATED)
    assert lc.current_state == WindowState.PERSISTED
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Union

logger = logging.getLogger(__name__)


class WindowState(str, Enum):
    """States a window passes through as seen by this client."""
    UNSAVED = "unsaved"
    PERSISTED = "persisted"
    REMOVED = "removed"
    REPLACED = "replaced"


class LifecycleTrigger(str, Enum):
    """Store events that move a window between states."""
    CREATED = "created"
    UPDATED = "updated"
    DELETED_ALL = "deleted_all"
    FULL_CARVE = "full_carve"
    PARTIAL_CARVE = "partial_carve"
    REISSUED = "reissued"


@dataclass
class Transition:
    """A single valid state transition."""
    from_state: WindowState
    to_state: WindowState
    trigger: LifecycleTrigger


@dataclass
class StateEntry:
    """Recorded history entry for a state visit."""
    state: WindowState
    entered_at: datetime
    trigger: Optional[LifecycleTrigger] = None


class InvalidTransitionError(Exception):
    """Raised when a transition is not valid from the current state."""


class WindowLifecycle:
    """Deterministic state machine for one window id."""

    TRANSITIONS: list[Transition] = [
        Transition(WindowState.UNSAVED, WindowState.PERSISTED, LifecycleTrigger.CREATED),
        Transition(WindowState.PERSISTED, WindowState.PERSISTED, LifecycleTrigger.UPDATED),
        Transition(WindowState.PERSISTED, WindowState.REMOVED, LifecycleTrigger.DELETED_ALL),
        Transition(WindowState.PERSISTED, WindowState.REMOVED, LifecycleTrigger.FULL_CARVE),
        Transition(WindowState.PERSISTED, WindowState.REPLACED, LifecycleTrigger.PARTIAL_CARVE),
        Transition(WindowState.REPLACED, WindowState.PERSISTED, LifecycleTrigger.REISSUED),
    ]

    def __init__(
        self,
        window_id: Optional[Union[int, str]] = None,
        initial_state: WindowState = WindowState.UNSAVED,
        replaces: Optional[Union[int, str]] = None,
    ) -> None:
        self.window_id = window_id
        self.replaces = replaces
        self._current_state = initial_state
        self._history: list[StateEntry] = [
            StateEntry(state=initial_state, entered_at=datetime.now(timezone.utc))
        ]

    @classmethod
    def observed(
        cls,
        window_id: Union[int, str],
        replaces: Optional[Union[int, str]] = None,
    ) -> "WindowLifecycle":
        """Lifecycle for a window first seen on a fetch, already persisted."""
        return cls(window_id=window_id, initial_state=WindowState.PERSISTED, replaces=replaces)

    @property
    def current_state(self) -> WindowState:
        return self._current_state

    def transition(self, trigger: LifecycleTrigger) -> WindowState:
        """
        Execute a state transition.

        Raises:
            InvalidTransitionError: If no valid transition exists.
        """
        for t in self.TRANSITIONS:
            if t.from_state == self._current_state and t.trigger == trigger:
                old_state = self._current_state
                self._current_state = t.to_state
                self._history.append(StateEntry(
                    state=self._current_state,
                    entered_at=datetime.now(timezone.utc),
                    trigger=trigger,
                ))
                logger.debug(
                    "Window %s: %s -> %s (trigger: %s)",
                    self.window_id, old_state.value, self._current_state.value, trigger.value,
                )
                return self._current_state

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_state.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def get_valid_triggers(self) -> list[LifecycleTrigger]:
        return [t.trigger for t in self.TRANSITIONS if t.from_state == self._current_state]

    def get_history(self) -> list[StateEntry]:
        return list(self._history)

    def get_state_trace(self) -> list[str]:
        """Return ordered list of state names visited."""
        return [entry.state.value for entry in self._history]

    def is_terminal(self) -> bool:
        return self._current_state == WindowState.REMOVED

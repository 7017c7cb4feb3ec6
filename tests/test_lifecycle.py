"""Tests for the availability window lifecycle state machine."""

import pytest

from vendor_calendar.store.lifecycle import (
    InvalidTransitionError,
    LifecycleTrigger,
    WindowLifecycle,
    WindowState,
)


class TestInitialState:
    def test_starts_unsaved(self):
        assert WindowLifecycle().current_state == WindowState.UNSAVED

    def test_observed_starts_persisted(self):
        lifecycle = WindowLifecycle.observed(17)
        assert lifecycle.current_state == WindowState.PERSISTED
        assert lifecycle.window_id == 17

    def test_initial_history_has_one_entry(self):
        assert len(WindowLifecycle().get_history()) == 1

    def test_not_terminal_at_start(self):
        assert not WindowLifecycle().is_terminal()


class TestTransitions:
    def test_created(self):
        lifecycle = WindowLifecycle()
        assert lifecycle.transition(LifecycleTrigger.CREATED) == WindowState.PERSISTED

    def test_update_stays_persisted(self):
        lifecycle = WindowLifecycle.observed(1)
        assert lifecycle.transition(LifecycleTrigger.UPDATED) == WindowState.PERSISTED

    @pytest.mark.parametrize("trigger", [LifecycleTrigger.DELETED_ALL, LifecycleTrigger.FULL_CARVE])
    def test_full_removal_is_terminal(self, trigger):
        lifecycle = WindowLifecycle.observed(1)
        assert lifecycle.transition(trigger) == WindowState.REMOVED
        assert lifecycle.is_terminal()
        assert lifecycle.get_valid_triggers() == []

    def test_partial_carve_then_reissue(self):
        lifecycle = WindowLifecycle.observed(1)
        lifecycle.transition(LifecycleTrigger.PARTIAL_CARVE)
        assert lifecycle.current_state == WindowState.REPLACED
        lifecycle.transition(LifecycleTrigger.REISSUED)
        assert lifecycle.current_state == WindowState.PERSISTED

    def test_update_before_create_rejected(self):
        with pytest.raises(InvalidTransitionError, match="created"):
            WindowLifecycle().transition(LifecycleTrigger.UPDATED)

    def test_removed_window_cannot_be_updated(self):
        lifecycle = WindowLifecycle.observed(1)
        lifecycle.transition(LifecycleTrigger.DELETED_ALL)
        with pytest.raises(InvalidTransitionError):
            lifecycle.transition(LifecycleTrigger.UPDATED)


class TestHistory:
    def test_state_trace(self):
        lifecycle = WindowLifecycle()
        lifecycle.transition(LifecycleTrigger.CREATED)
        lifecycle.transition(LifecycleTrigger.UPDATED)
        lifecycle.transition(LifecycleTrigger.PARTIAL_CARVE)
        assert lifecycle.get_state_trace() == ["unsaved", "persisted", "persisted", "replaced"]

    def test_history_records_triggers(self):
        lifecycle = WindowLifecycle()
        lifecycle.transition(LifecycleTrigger.CREATED)
        history = lifecycle.get_history()
        assert history[0].trigger is None
        assert history[1].trigger == LifecycleTrigger.CREATED
        assert history[1].entered_at >= history[0].entered_at

    def test_observed_records_replaced_window(self):
        lifecycle = WindowLifecycle.observed(18, replaces=17)
        assert lifecycle.replaces == 17
        assert lifecycle.get_state_trace() == ["persisted"]

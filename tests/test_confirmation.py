"""Tests for the warn-then-confirm booking state machine."""

from datetime import date, time

import pytest

from daybook.scheduling.confirmation import (
    IDLE,
    BookingAttempt,
    BookingConfirmationFlow,
    BookingState,
    ChooseAnotherTime,
    ConfirmAnyway,
    FlowState,
    SelectSlot,
    transition,
)
from daybook.scheduling.exceptions import BookingFlowError, IllegalTransition, SlotUnavailable
from daybook.scheduling.types import Evaluation


def _attempt(available=True, warning=None, start=time(9, 0)):
    return BookingAttempt(
        date=date(2026, 3, 10),
        start_time=start,
        duration_minutes=30,
        evaluation=Evaluation(available=available, warning=warning),
    )


class TestTransition:
    def test_free_slot_commits_directly(self):
        attempt = _attempt()
        state = transition(IDLE, SelectSlot(attempt))
        assert state == FlowState(BookingState.COMMITTED, attempt)

    def test_warning_goes_pending(self):
        attempt = _attempt(warning="30 min gap, 90 recommended.")
        state = transition(IDLE, SelectSlot(attempt))
        assert state.state == BookingState.PENDING_CONFIRMATION
        assert state.attempt.warning == "30 min gap, 90 recommended."

    def test_unavailable_rejected(self):
        with pytest.raises(SlotUnavailable):
            transition(IDLE, SelectSlot(_attempt(available=False)))

    def test_confirm_keeps_start_time(self):
        attempt = _attempt(warning="w", start=time(12, 15))
        pending = transition(IDLE, SelectSlot(attempt))
        committed = transition(pending, ConfirmAnyway())
        assert committed.state == BookingState.COMMITTED
        assert committed.attempt.start_time == time(12, 15)
        assert committed.attempt is attempt

    def test_choose_another_returns_to_idle(self):
        pending = transition(IDLE, SelectSlot(_attempt(warning="w")))
        assert transition(pending, ChooseAnotherTime()) == IDLE

    @pytest.mark.parametrize("event", [ConfirmAnyway(), ChooseAnotherTime()])
    def test_no_decision_without_pending_attempt(self, event):
        with pytest.raises(IllegalTransition):
            transition(IDLE, event)

    def test_select_while_pending_is_illegal(self):
        pending = transition(IDLE, SelectSlot(_attempt(warning="w")))
        with pytest.raises(IllegalTransition):
            transition(pending, SelectSlot(_attempt()))

    @pytest.mark.parametrize(
        "event", [SelectSlot(_attempt()), ConfirmAnyway(), ChooseAnotherTime()]
    )
    def test_committed_is_terminal(self, event):
        committed = transition(IDLE, SelectSlot(_attempt()))
        with pytest.raises(IllegalTransition):
            transition(committed, event)

    def test_flow_errors_share_base(self):
        assert issubclass(SlotUnavailable, BookingFlowError)
        assert issubclass(IllegalTransition, BookingFlowError)


class TestBookingConfirmationFlow:
    def test_rejected_selection_leaves_state_alone(self):
        flow = BookingConfirmationFlow()
        with pytest.raises(SlotUnavailable):
            flow.select(_attempt(available=False))
        assert flow.state == BookingState.IDLE
        assert flow.attempt is None

    def test_pending_then_pick_again(self):
        flow = BookingConfirmationFlow()
        assert flow.select(_attempt(warning="too close")) == BookingState.PENDING_CONFIRMATION
        assert flow.pending_warning == "too close"
        assert flow.choose_another_time() == BookingState.IDLE
        assert flow.pending_warning is None
        assert flow.select(_attempt(start=time(13, 0))) == BookingState.COMMITTED
        assert flow.attempt.start_time == time(13, 0)

    def test_pending_then_confirm(self):
        flow = BookingConfirmationFlow()
        flow.select(_attempt(warning="too close"))
        assert flow.confirm_anyway() == BookingState.COMMITTED
        assert flow.attempt.warning == "too close"

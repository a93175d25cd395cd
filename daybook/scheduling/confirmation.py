from dataclasses import dataclass, replace
from datetime import date, time
from enum import Enum

from daybook.scheduling.exceptions import IllegalTransition, SlotUnavailable
from daybook.scheduling.types import Evaluation


class BookingState(str, Enum):
    IDLE = "idle"
    PENDING_CONFIRMATION = "pending_confirmation"
    COMMITTED = "committed"


@dataclass(frozen=True)
class BookingAttempt:
    date: date
    start_time: time
    duration_minutes: int
    evaluation: Evaluation
    appointment_id: int | None = None  # set when editing an existing appointment

    @property
    def warning(self) -> str | None:
        return self.evaluation.warning

    @property
    def is_update(self) -> bool:
        return self.appointment_id is not None


@dataclass(frozen=True)
class FlowState:
    state: BookingState = BookingState.IDLE
    attempt: BookingAttempt | None = None


@dataclass(frozen=True)
class SelectSlot:
    attempt: BookingAttempt


@dataclass(frozen=True)
class ConfirmAnyway:
    pass


@dataclass(frozen=True)
class ChooseAnotherTime:
    pass


BookingEvent = SelectSlot | ConfirmAnyway | ChooseAnotherTime

IDLE = FlowState()


def transition(current: FlowState, event: BookingEvent) -> FlowState:
    """
    Advance the confirmation flow by one event.

    Idle + select(free, no warning)   -> Committed
    Idle + select(free, warning)      -> PendingConfirmation
    Idle + select(overlapping)        -> SlotUnavailable raised
    Pending + confirm anyway          -> Committed, same attempt
    Pending + choose another time     -> Idle, attempt dropped

    Everything else raises IllegalTransition. Committed is terminal.
    """
    if current.state == BookingState.IDLE and isinstance(event, SelectSlot):
        evaluation = event.attempt.evaluation
        if not evaluation.available:
            raise SlotUnavailable(
                f"{event.attempt.start_time:%H:%M} on {event.attempt.date} overlaps an existing appointment"
            )
        if evaluation.warning:
            return FlowState(BookingState.PENDING_CONFIRMATION, event.attempt)
        return FlowState(BookingState.COMMITTED, event.attempt)

    if current.state == BookingState.PENDING_CONFIRMATION:
        if isinstance(event, ConfirmAnyway):
            return replace(current, state=BookingState.COMMITTED)
        if isinstance(event, ChooseAnotherTime):
            return IDLE

    raise IllegalTransition(f"Cannot apply {type(event).__name__} in state {current.state.value}")


class BookingConfirmationFlow:
    """Mutable holder around `transition` for callers that keep one attempt at a time."""

    def __init__(self) -> None:
        self._current = IDLE

    @property
    def state(self) -> BookingState:
        return self._current.state

    @property
    def attempt(self) -> BookingAttempt | None:
        return self._current.attempt

    @property
    def pending_warning(self) -> str | None:
        if self._current.state != BookingState.PENDING_CONFIRMATION:
            return None
        return self._current.attempt.warning

    def select(self, attempt: BookingAttempt) -> BookingState:
        self._current = transition(self._current, SelectSlot(attempt))
        return self._current.state

    def confirm_anyway(self) -> BookingState:
        self._current = transition(self._current, ConfirmAnyway())
        return self._current.state

    def choose_another_time(self) -> BookingState:
        self._current = transition(self._current, ChooseAnotherTime())
        return self._current.state

from dataclasses import dataclass
from datetime import date, time
from enum import Enum
from typing import Protocol

from daybook.scheduling.exceptions import InvalidSchedulingInput


class AppointmentStatus(str, Enum):
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BookedAppointment(Protocol):
    """Anything the store hands back for a day: ORM rows or plain records."""

    id: int | None
    date: date
    start_time: time
    duration_minutes: int
    status: str


@dataclass(frozen=True)
class SchedulingPreferences:
    business_start: time
    business_end: time
    minimum_gap_minutes: int = 0
    slot_granularity_minutes: int = 30

    def __post_init__(self) -> None:
        if self.business_start is None or self.business_end is None:
            raise InvalidSchedulingInput("Business hours are required")
        if self.business_end <= self.business_start:
            raise InvalidSchedulingInput(
                f"Business end {self.business_end} must be after start {self.business_start}"
            )
        if self.minimum_gap_minutes < 0:
            raise InvalidSchedulingInput("minimum_gap_minutes must be >= 0")
        if self.slot_granularity_minutes <= 0:
            raise InvalidSchedulingInput("slot_granularity_minutes must be > 0")


@dataclass(frozen=True)
class Evaluation:
    available: bool
    warning: str | None = None


@dataclass(frozen=True)
class CandidateSlot:
    start_time: time
    available: bool
    warning: str | None = None


@dataclass(frozen=True)
class DayAvailability:
    date: date
    can_fit: bool
    occupancy: float
    appointment_count: int

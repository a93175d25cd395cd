from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from datetime import date, datetime, time

from daybook.scheduling.exceptions import InvalidSchedulingInput
from daybook.scheduling.types import (
    AppointmentStatus,
    BookedAppointment,
    Evaluation,
    SchedulingPreferences,
)

PAST_SLOT_WARNING = "This time slot is in the past."


def minutes_of_day(t: time) -> int:
    return t.hour * 60 + t.minute


@dataclass(frozen=True)
class Interval:
    """Half-open [start, end) in minutes since midnight. End may run past 24:00."""

    start: int
    end: int

    @classmethod
    def starting_at(cls, start_time: time, duration_minutes: int) -> "Interval":
        start = minutes_of_day(start_time)
        return cls(start, start + duration_minutes)


def overlaps(a: Interval, b: Interval) -> bool:
    # Strict: a shared boundary (a.end == b.start) is not an overlap.
    return a.start < b.end and a.end > b.start


def gap_between(candidate: Interval, booked: Interval) -> int | None:
    """Smallest non-negative distance between two non-overlapping intervals, else None."""
    gaps = [g for g in (candidate.start - booked.end, booked.start - candidate.end) if g >= 0]
    return min(gaps) if gaps else None


def gap_warning(gap_minutes: int, recommended_minutes: int) -> str:
    return f"{gap_minutes} min gap, {recommended_minutes} recommended."


def require_positive_duration(duration_minutes: int) -> None:
    if duration_minutes is None or duration_minutes <= 0:
        raise InvalidSchedulingInput(f"duration_minutes must be > 0, got {duration_minutes!r}")


def active_appointments(
    appointments: Iterable[BookedAppointment],
    target_date: date,
    exclude_id: int | None = None,
) -> Iterator[BookedAppointment]:
    """Appointments that can block a booking on target_date.

    Cancelled ones never count, and the appointment being edited is skipped so
    an edit does not conflict with itself.
    """
    for appt in appointments:
        if appt.date != target_date:
            continue
        if appt.status == AppointmentStatus.CANCELLED:
            continue
        if exclude_id is not None and appt.id == exclude_id:
            continue
        yield appt


def evaluate(
    target_date: date,
    start_time: time,
    duration_minutes: int,
    existing_appointments: Iterable[BookedAppointment],
    now: datetime,
    preferences: SchedulingPreferences,
    exclude_id: int | None = None,
) -> Evaluation:
    """
    Classify one candidate booking against the day's appointments.

    Overlap is a hard block and returns immediately without a warning. A free
    slot may carry one advisory warning: the past-time message if the slot
    starts before `now` (naive wall-clock time), otherwise the gap message
    when the closest neighbour is strictly nearer than the preferred minimum.
    """
    require_positive_duration(duration_minutes)
    if start_time.tzinfo is not None:
        raise InvalidSchedulingInput(f"start_time must be naive, got {start_time.isoformat()}")
    candidate = Interval.starting_at(start_time, duration_minutes)

    min_gap: int | None = None
    for appt in active_appointments(existing_appointments, target_date, exclude_id):
        booked = Interval.starting_at(appt.start_time, appt.duration_minutes)
        if overlaps(candidate, booked):
            return Evaluation(available=False)
        gap = gap_between(candidate, booked)
        if gap is not None and (min_gap is None or gap < min_gap):
            min_gap = gap

    if datetime.combine(target_date, start_time) < now:
        return Evaluation(available=True, warning=PAST_SLOT_WARNING)
    if min_gap is not None and min_gap < preferences.minimum_gap_minutes:
        return Evaluation(
            available=True,
            warning=gap_warning(min_gap, preferences.minimum_gap_minutes),
        )
    return Evaluation(available=True)

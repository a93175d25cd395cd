import calendar
from collections.abc import Iterable
from datetime import date, datetime, time

from daybook.scheduling.availability import (
    Interval,
    active_appointments,
    evaluate,
    minutes_of_day,
    require_positive_duration,
)
from daybook.scheduling.types import (
    BookedAppointment,
    CandidateSlot,
    DayAvailability,
    SchedulingPreferences,
)


def slot_start_times(preferences: SchedulingPreferences) -> list[time]:
    """Start times from business_start, every granularity step, strictly before business_end."""
    start = minutes_of_day(preferences.business_start)
    end = minutes_of_day(preferences.business_end)
    step = preferences.slot_granularity_minutes
    times: list[time] = []
    current = start
    while current < end:
        times.append(time(current // 60, current % 60))
        current += step
    return times


def generate(
    target_date: date,
    duration_minutes: int,
    existing_appointments: Iterable[BookedAppointment],
    now: datetime,
    preferences: SchedulingPreferences,
    exclude_id: int | None = None,
) -> list[CandidateSlot]:
    """Full slot grid for a day, in chronological order. Always recomputed from scratch."""
    require_positive_duration(duration_minutes)
    # Materialise once: the same snapshot is walked for every candidate.
    snapshot = list(active_appointments(existing_appointments, target_date, exclude_id))
    slots: list[CandidateSlot] = []
    for start in slot_start_times(preferences):
        result = evaluate(target_date, start, duration_minutes, snapshot, now, preferences)
        slots.append(
            CandidateSlot(start_time=start, available=result.available, warning=result.warning)
        )
    return slots


def summarize_day(
    target_date: date,
    duration_minutes: int,
    existing_appointments: Iterable[BookedAppointment],
    preferences: SchedulingPreferences,
    exclude_id: int | None = None,
) -> DayAvailability:
    """
    Month-view summary of a day.

    Walks the day's appointments in start order with a cursor that begins at
    business_start and, after each appointment, sits at its end plus the
    minimum gap. The gap counts as occupied time. A booking fits if some free
    block (before an appointment or after the last one) is at least
    duration_minutes long.
    """
    require_positive_duration(duration_minutes)
    day_start = minutes_of_day(preferences.business_start)
    day_end = minutes_of_day(preferences.business_end)
    buffer = preferences.minimum_gap_minutes
    total = day_end - day_start

    booked = sorted(
        (
            Interval.starting_at(a.start_time, a.duration_minutes)
            for a in active_appointments(existing_appointments, target_date, exclude_id)
        ),
        key=lambda i: i.start,
    )

    occupied = 0
    max_free_block = 0
    cursor = day_start
    for interval in booked:
        free = interval.start - cursor
        if free > 0:
            max_free_block = max(max_free_block, free)
        occupied += (interval.end - interval.start) + buffer
        cursor = max(cursor, interval.end + buffer)

    final_space = day_end - cursor
    if final_space > 0:
        max_free_block = max(max_free_block, final_space)

    occupancy = min(1.0, occupied / total) if total > 0 else 1.0
    return DayAvailability(
        date=target_date,
        can_fit=max_free_block >= duration_minutes,
        occupancy=occupancy,
        appointment_count=len(booked),
    )


def summarize_month(
    year: int,
    month: int,
    duration_minutes: int,
    existing_appointments: Iterable[BookedAppointment],
    preferences: SchedulingPreferences,
    exclude_id: int | None = None,
) -> list[DayAvailability]:
    appointments = list(existing_appointments)
    _, days_in_month = calendar.monthrange(year, month)
    return [
        summarize_day(
            date(year, month, day), duration_minutes, appointments, preferences, exclude_id
        )
        for day in range(1, days_in_month + 1)
    ]

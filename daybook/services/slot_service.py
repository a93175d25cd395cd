import calendar
from datetime import date, datetime, time

from daybook.scheduling.availability import evaluate
from daybook.scheduling.slots import generate, summarize_month
from daybook.scheduling.types import (
    CandidateSlot,
    DayAvailability,
    Evaluation,
    SchedulingPreferences,
)
from daybook.services.appointment_service import AppointmentStore


async def get_slot_grid(
    store: AppointmentStore,
    d: date,
    duration_minutes: int,
    now: datetime,
    preferences: SchedulingPreferences,
    exclude_id: int | None = None,
) -> list[CandidateSlot]:
    """Slot grid for one day, built on a fresh read of that day's appointments."""
    appointments = await store.list_for_date(d)
    return generate(d, duration_minutes, appointments, now, preferences, exclude_id=exclude_id)


async def evaluate_time(
    store: AppointmentStore,
    d: date,
    start_time: time,
    duration_minutes: int,
    now: datetime,
    preferences: SchedulingPreferences,
    exclude_id: int | None = None,
) -> Evaluation:
    appointments = await store.list_for_date(d)
    return evaluate(
        d, start_time, duration_minutes, appointments, now, preferences, exclude_id=exclude_id
    )


async def get_month_availability(
    store: AppointmentStore,
    year: int,
    month: int,
    duration_minutes: int,
    preferences: SchedulingPreferences,
    exclude_id: int | None = None,
) -> list[DayAvailability]:
    _, last_day = calendar.monthrange(year, month)
    appointments = await store.list_between(date(year, month, 1), date(year, month, last_day))
    return summarize_month(
        year, month, duration_minutes, appointments, preferences, exclude_id=exclude_id
    )

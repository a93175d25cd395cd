from datetime import date, datetime, time, timedelta

from fastapi import APIRouter, Depends, Query

from daybook.api.deps import get_appointment_store, get_now, get_scheduling_preferences
from daybook.api.schemas.common import NaiveTime
from daybook.api.schemas.slots import (
    DayAvailabilityInfo,
    EvaluationResponse,
    MonthAvailabilityResponse,
    SlotGridResponse,
    SlotInfo,
)
from daybook.core.config import settings
from daybook.scheduling.types import SchedulingPreferences
from daybook.services.appointment_service import AppointmentStore
from daybook.services.slot_service import evaluate_time, get_month_availability, get_slot_grid

router = APIRouter(prefix="/slots", tags=["slots"])


def _end_time(d: date, start: time, duration_minutes: int) -> time | None:
    end = datetime.combine(d, start) + timedelta(minutes=duration_minutes)
    return end.time() if end.date() == d else None


@router.get("", response_model=SlotGridResponse)
async def slot_grid(
    date_param: date = Query(..., alias="date"),
    duration: int = Query(settings.default_duration_minutes, gt=0, le=24 * 60),
    exclude_id: int | None = Query(None),
    store: AppointmentStore = Depends(get_appointment_store),
    preferences: SchedulingPreferences = Depends(get_scheduling_preferences),
    now: datetime = Depends(get_now),
) -> SlotGridResponse:
    """Every bookable start time of the day with its availability and any warning.

    Pass exclude_id when rescheduling so the appointment does not block itself.
    """
    slots = await get_slot_grid(store, date_param, duration, now, preferences, exclude_id)
    return SlotGridResponse(
        date=date_param,
        duration_minutes=duration,
        slots=[
            SlotInfo(
                start_time=s.start_time,
                end_time=_end_time(date_param, s.start_time, duration),
                available=s.available,
                warning=s.warning,
            )
            for s in slots
        ],
    )


@router.get("/evaluate", response_model=EvaluationResponse)
async def evaluate_slot(
    date_param: date = Query(..., alias="date"),
    time_param: NaiveTime = Query(..., alias="time"),
    duration: int = Query(settings.default_duration_minutes, gt=0, le=24 * 60),
    exclude_id: int | None = Query(None),
    store: AppointmentStore = Depends(get_appointment_store),
    preferences: SchedulingPreferences = Depends(get_scheduling_preferences),
    now: datetime = Depends(get_now),
) -> EvaluationResponse:
    result = await evaluate_time(
        store, date_param, time_param, duration, now, preferences, exclude_id
    )
    return EvaluationResponse(
        date=date_param,
        start_time=time_param,
        duration_minutes=duration,
        available=result.available,
        warning=result.warning,
    )


@router.get("/month", response_model=MonthAvailabilityResponse)
async def month_availability(
    year: int = Query(..., ge=1970, le=9999),
    month: int = Query(..., ge=1, le=12),
    duration: int = Query(settings.default_duration_minutes, gt=0, le=24 * 60),
    exclude_id: int | None = Query(None),
    store: AppointmentStore = Depends(get_appointment_store),
    preferences: SchedulingPreferences = Depends(get_scheduling_preferences),
) -> MonthAvailabilityResponse:
    days = await get_month_availability(
        store, year, month, duration, preferences, exclude_id=exclude_id
    )
    return MonthAvailabilityResponse(
        year=year,
        month=month,
        duration_minutes=duration,
        days=[
            DayAvailabilityInfo(
                date=d.date,
                can_fit=d.can_fit,
                occupancy=round(d.occupancy, 4),
                appointment_count=d.appointment_count,
            )
            for d in days
        ],
    )

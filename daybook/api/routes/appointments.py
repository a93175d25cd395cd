from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status

from daybook.api.deps import get_appointment_store, get_now, get_scheduling_preferences
from daybook.api.schemas.appointment import StatusUpdate
from daybook.models.appointment import AppointmentPublic
from daybook.scheduling.exceptions import SlotUnavailable
from daybook.scheduling.types import SchedulingPreferences
from daybook.services.appointment_service import AppointmentStore, BookingCommitError
from daybook.services.booking_service import AppointmentNotFound, change_status

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.get("", response_model=list[AppointmentPublic])
async def list_appointments(
    date_param: date = Query(..., alias="date"),
    store: AppointmentStore = Depends(get_appointment_store),
) -> list[AppointmentPublic]:
    appointments = await store.list_for_date(date_param)
    return [AppointmentPublic.model_validate(a) for a in appointments]


@router.get("/{appointment_id}", response_model=AppointmentPublic)
async def get_appointment(
    appointment_id: int,
    store: AppointmentStore = Depends(get_appointment_store),
) -> AppointmentPublic:
    appointment = await store.get(appointment_id)
    if not appointment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
    return AppointmentPublic.model_validate(appointment)


@router.patch("/{appointment_id}/status", response_model=AppointmentPublic)
async def set_status(
    appointment_id: int,
    body: StatusUpdate,
    store: AppointmentStore = Depends(get_appointment_store),
    preferences: SchedulingPreferences = Depends(get_scheduling_preferences),
    now: datetime = Depends(get_now),
) -> AppointmentPublic:
    """Mark completed or cancelled. Cancelled appointments free their slot.

    Un-cancelling is refused with 409 if the slot has since been taken.
    """
    try:
        appointment = await change_status(store, appointment_id, body.status, now, preferences)
    except AppointmentNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found") from e
    except SlotUnavailable as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except BookingCommitError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Appointment could not be saved, please try again",
        ) from e
    return AppointmentPublic.model_validate(appointment)

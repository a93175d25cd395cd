import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response, status

from daybook.api.deps import get_appointment_store, get_now, get_scheduling_preferences
from daybook.api.schemas.booking import BookingResponse, BookingSubmit
from daybook.models.appointment import AppointmentPublic
from daybook.scheduling.confirmation import BookingState
from daybook.scheduling.exceptions import SlotUnavailable
from daybook.scheduling.types import SchedulingPreferences
from daybook.services.appointment_service import AppointmentStore, BookingCommitError
from daybook.services.booking_service import (
    AppointmentNotFound,
    BookingRequest,
    submit_booking,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.post("", response_model=BookingResponse)
async def book(
    body: BookingSubmit,
    response: Response,
    store: AppointmentStore = Depends(get_appointment_store),
    preferences: SchedulingPreferences = Depends(get_scheduling_preferences),
    now: datetime = Depends(get_now),
) -> BookingResponse:
    """
    Book (or reschedule, with appointment_id) a time picked from the slot grid.

    - Overlapping time: 409, nothing stored.
    - Time with a warning and confirm_warning false: 200 with
      state "pending_confirmation" and the warning; nothing stored. Resubmit
      with confirm_warning true to book anyway, or pick another time.
    - Otherwise: 201 with state "committed" and the stored appointment.
    """
    try:
        result = await submit_booking(
            store, BookingRequest(**body.model_dump()), now, preferences
        )
    except SlotUnavailable as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except AppointmentNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except BookingCommitError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Appointment could not be saved, please try again",
        ) from e

    if result.state == BookingState.COMMITTED:
        response.status_code = status.HTTP_201_CREATED
        logger.info(
            "Booked %s %s for %d min (appointment %s)",
            result.attempt.date, result.attempt.start_time,
            result.attempt.duration_minutes, result.appointment.id,
        )
    return BookingResponse(
        state=result.state,
        date=result.attempt.date,
        start_time=result.attempt.start_time,
        duration_minutes=result.attempt.duration_minutes,
        warning=result.attempt.warning,
        appointment=(
            AppointmentPublic.model_validate(result.appointment) if result.appointment else None
        ),
    )

import logging
from dataclasses import dataclass
from datetime import date, datetime, time

from daybook.models.appointment import Appointment, AppointmentCreate, AppointmentUpdate
from daybook.scheduling.availability import evaluate
from daybook.scheduling.confirmation import (
    BookingAttempt,
    BookingConfirmationFlow,
    BookingState,
)
from daybook.scheduling.exceptions import SlotUnavailable
from daybook.scheduling.types import AppointmentStatus, SchedulingPreferences
from daybook.services.appointment_service import AppointmentStore

logger = logging.getLogger(__name__)


class AppointmentNotFound(Exception):
    pass


@dataclass
class BookingRequest:
    date: date
    start_time: time
    duration_minutes: int
    appointment_id: int | None = None
    confirm_warning: bool = False
    client_name: str | None = None
    service: str | None = None
    notes: str | None = None
    price: float | None = None


@dataclass
class BookingResult:
    state: BookingState
    attempt: BookingAttempt
    appointment: Appointment | None = None


async def submit_booking(
    store: AppointmentStore,
    request: BookingRequest,
    now: datetime,
    preferences: SchedulingPreferences,
) -> BookingResult:
    """
    Re-validate a picked time against a fresh snapshot and drive the confirmation flow.

    A slot with a warning stays pending unless the caller already acknowledged it
    (confirm_warning). Raises SlotUnavailable on overlap, AppointmentNotFound when
    editing an unknown appointment, BookingCommitError when the store write fails.
    """
    if request.appointment_id is not None:
        existing = await store.get(request.appointment_id)
        if not existing:
            raise AppointmentNotFound(f"Appointment {request.appointment_id} not found")

    appointments = await store.list_for_date(request.date)
    evaluation = evaluate(
        request.date,
        request.start_time,
        request.duration_minutes,
        appointments,
        now,
        preferences,
        exclude_id=request.appointment_id,
    )
    attempt = BookingAttempt(
        date=request.date,
        start_time=request.start_time,
        duration_minutes=request.duration_minutes,
        evaluation=evaluation,
        appointment_id=request.appointment_id,
    )

    flow = BookingConfirmationFlow()
    state = flow.select(attempt)
    if state == BookingState.PENDING_CONFIRMATION:
        if not request.confirm_warning:
            return BookingResult(state=state, attempt=attempt)
        logger.info(
            "Booking %s %s confirmed despite warning: %s",
            request.date, request.start_time, attempt.warning,
        )
        state = flow.confirm_anyway()

    appointment = await _commit(store, request, flow.attempt)
    return BookingResult(state=state, attempt=flow.attempt, appointment=appointment)


async def _commit(
    store: AppointmentStore, request: BookingRequest, attempt: BookingAttempt
) -> Appointment:
    details = {
        "client_name": request.client_name,
        "service": request.service,
        "notes": request.notes,
        "price": request.price,
    }
    if attempt.is_update:
        patch = AppointmentUpdate(
            date=attempt.date,
            start_time=attempt.start_time,
            duration_minutes=attempt.duration_minutes,
            **{k: v for k, v in details.items() if v is not None},
        )
        appointment = await store.update(attempt.appointment_id, patch)
        if not appointment:
            raise AppointmentNotFound(f"Appointment {attempt.appointment_id} not found")
        return appointment
    return await store.create(
        AppointmentCreate(
            date=attempt.date,
            start_time=attempt.start_time,
            duration_minutes=attempt.duration_minutes,
            **details,
        )
    )


async def change_status(
    store: AppointmentStore,
    appointment_id: int,
    new_status: AppointmentStatus,
    now: datetime,
    preferences: SchedulingPreferences,
) -> Appointment:
    """
    Set an appointment's status.

    Bringing a cancelled appointment back (to scheduled or completed) makes it
    block time again, so it is re-checked against a fresh read of its day and
    refused with SlotUnavailable if something else took the slot meanwhile.
    """
    appointment = await store.get(appointment_id)
    if not appointment:
        raise AppointmentNotFound(f"Appointment {appointment_id} not found")

    reactivating = (
        appointment.status == AppointmentStatus.CANCELLED
        and new_status != AppointmentStatus.CANCELLED
    )
    if reactivating:
        appointments = await store.list_for_date(appointment.date)
        evaluation = evaluate(
            appointment.date,
            appointment.start_time,
            appointment.duration_minutes,
            appointments,
            now,
            preferences,
            exclude_id=appointment.id,
        )
        if not evaluation.available:
            raise SlotUnavailable(
                f"{appointment.start_time:%H:%M} on {appointment.date} overlaps an existing appointment"
            )

    updated = await store.update(appointment_id, AppointmentUpdate(status=new_status.value))
    if not updated:
        raise AppointmentNotFound(f"Appointment {appointment_id} not found")
    return updated

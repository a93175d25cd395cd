import datetime as dt

from pydantic import BaseModel, Field

from daybook.api.schemas.common import NaiveTime
from daybook.models.appointment import AppointmentPublic
from daybook.scheduling.confirmation import BookingState


class BookingSubmit(BaseModel):
    date: dt.date
    start_time: NaiveTime
    duration_minutes: int = Field(gt=0, le=24 * 60)
    appointment_id: int | None = None  # set to edit an existing appointment
    confirm_warning: bool = False
    client_name: str | None = None
    service: str | None = None
    notes: str | None = None
    price: float | None = Field(default=None, ge=0)


class BookingResponse(BaseModel):
    state: BookingState
    date: dt.date
    start_time: dt.time
    duration_minutes: int
    warning: str | None = None
    appointment: AppointmentPublic | None = None

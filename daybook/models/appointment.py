import datetime as dt
from datetime import UTC

from sqlmodel import Field, SQLModel

from daybook.scheduling.types import AppointmentStatus


def _utc_naive_now() -> dt.datetime:
    """Naive UTC for TIMESTAMP WITHOUT TIME ZONE columns."""
    return dt.datetime.now(UTC).replace(tzinfo=None)


class AppointmentBase(SQLModel):
    date: dt.date = Field(index=True)
    start_time: dt.time
    duration_minutes: int
    status: str = Field(default=AppointmentStatus.SCHEDULED.value)
    client_name: str | None = None
    service: str | None = None
    notes: str | None = None
    price: float | None = None


class Appointment(AppointmentBase, table=True):
    __tablename__ = "appointments"
    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", index=True)
    created_at: dt.datetime = Field(default_factory=_utc_naive_now)
    updated_at: dt.datetime = Field(default_factory=_utc_naive_now)


class AppointmentCreate(AppointmentBase):
    pass


class AppointmentUpdate(SQLModel):
    date: dt.date | None = None
    start_time: dt.time | None = None
    duration_minutes: int | None = None
    status: str | None = None
    client_name: str | None = None
    service: str | None = None
    notes: str | None = None
    price: float | None = None


class AppointmentPublic(AppointmentBase):
    id: int
    user_id: int
    created_at: dt.datetime

import logging
from datetime import UTC, date, datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from daybook.models.appointment import Appointment, AppointmentCreate, AppointmentUpdate

logger = logging.getLogger(__name__)


class BookingCommitError(Exception):
    """The store could not persist a committed booking. Callers re-present the form."""


def _utc_naive_now() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class AppointmentStore:
    """A user's appointments, read per day for the engine and written on commit."""

    def __init__(self, session: AsyncSession, user_id: int) -> None:
        self.session = session
        self.user_id = user_id

    async def list_for_date(self, d: date) -> list[Appointment]:
        result = await self.session.execute(
            select(Appointment)
            .where(Appointment.user_id == self.user_id, Appointment.date == d)
            .order_by(Appointment.start_time)
        )
        return list(result.scalars().all())

    async def list_between(self, start: date, end: date) -> list[Appointment]:
        """Appointments with start <= date <= end."""
        result = await self.session.execute(
            select(Appointment)
            .where(
                Appointment.user_id == self.user_id,
                Appointment.date >= start,
                Appointment.date <= end,
            )
            .order_by(Appointment.date, Appointment.start_time)
        )
        return list(result.scalars().all())

    async def get(self, appointment_id: int) -> Appointment | None:
        result = await self.session.execute(
            select(Appointment).where(
                Appointment.id == appointment_id,
                Appointment.user_id == self.user_id,
            )
        )
        return result.scalar_one_or_none()

    async def create(self, data: AppointmentCreate) -> Appointment:
        appointment = Appointment(user_id=self.user_id, **data.model_dump())
        try:
            self.session.add(appointment)
            await self.session.flush()
            await self.session.refresh(appointment)
        except SQLAlchemyError as e:
            logger.exception("Create appointment failed for user %s: %s", self.user_id, e)
            raise BookingCommitError("Could not save appointment") from e
        return appointment

    async def update(self, appointment_id: int, patch: AppointmentUpdate) -> Appointment | None:
        appointment = await self.get(appointment_id)
        if not appointment:
            return None
        for field, value in patch.model_dump(exclude_unset=True).items():
            setattr(appointment, field, value)
        appointment.updated_at = _utc_naive_now()
        try:
            self.session.add(appointment)
            await self.session.flush()
            await self.session.refresh(appointment)
        except SQLAlchemyError as e:
            logger.exception("Update of appointment %s failed: %s", appointment_id, e)
            raise BookingCommitError("Could not save appointment") from e
        return appointment

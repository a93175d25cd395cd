"""Pytest configuration and fixtures."""

import os
import tempfile
from pathlib import Path

# Settings are read at import time, before any tmp_path exists; keep the app engine out of the cwd.
_DB_DIR = Path(tempfile.mkdtemp(prefix="daybook-tests-"))
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_DB_DIR / 'app.db'}")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("ENV", "test")

from datetime import UTC, date, datetime, time  # noqa: E402

import pytest  # noqa: E402

from daybook.models.appointment import (  # noqa: E402
    Appointment,
    AppointmentCreate,
    AppointmentUpdate,
)
from daybook.scheduling.types import AppointmentStatus, SchedulingPreferences  # noqa: E402


class InMemoryAppointmentStore:
    """Same interface as AppointmentStore, backed by a list."""

    def __init__(self, appointments: list[Appointment] | None = None, user_id: int = 1) -> None:
        self.user_id = user_id
        self.appointments: list[Appointment] = []
        self._next_id = 1
        for appt in appointments or []:
            self._add(appt)
        self.list_calls = 0

    def _add(self, appt: Appointment) -> Appointment:
        if appt.id is None:
            appt.id = self._next_id
        self._next_id = max(self._next_id, appt.id) + 1
        self.appointments.append(appt)
        return appt

    async def list_for_date(self, d: date) -> list[Appointment]:
        self.list_calls += 1
        return sorted((a for a in self.appointments if a.date == d), key=lambda a: a.start_time)

    async def list_between(self, start: date, end: date) -> list[Appointment]:
        return [a for a in self.appointments if start <= a.date <= end]

    async def get(self, appointment_id: int) -> Appointment | None:
        return next((a for a in self.appointments if a.id == appointment_id), None)

    async def create(self, data: AppointmentCreate) -> Appointment:
        return self._add(Appointment(user_id=self.user_id, **data.model_dump()))

    async def update(self, appointment_id: int, patch: AppointmentUpdate) -> Appointment | None:
        appt = await self.get(appointment_id)
        if not appt:
            return None
        for field, value in patch.model_dump(exclude_unset=True).items():
            setattr(appt, field, value)
        return appt


def make_appointment(
    start: time,
    duration: int,
    d: date = date(2026, 3, 10),
    status: AppointmentStatus = AppointmentStatus.SCHEDULED,
    appointment_id: int | None = None,
) -> Appointment:
    return Appointment(
        id=appointment_id,
        user_id=1,
        date=d,
        start_time=start,
        duration_minutes=duration,
        status=status.value,
        created_at=datetime.now(UTC).replace(tzinfo=None),
    )


@pytest.fixture
def day() -> date:
    return date(2026, 3, 10)


@pytest.fixture
def now() -> datetime:
    """Well before `day`, so nothing is in the past unless a test says so."""
    return datetime(2026, 1, 1, 9, 0)


@pytest.fixture
def prefs() -> SchedulingPreferences:
    return SchedulingPreferences(
        business_start=time(8, 0),
        business_end=time(18, 0),
        minimum_gap_minutes=90,
        slot_granularity_minutes=30,
    )


@pytest.fixture
def ten_oclock(day) -> Appointment:
    """The one existing appointment in most scenarios: 10:00-11:00."""
    return make_appointment(time(10, 0), 60, d=day, appointment_id=7)

from daybook.models.user import User, UserCreate, UserPublic
from daybook.models.appointment import (
    Appointment,
    AppointmentCreate,
    AppointmentPublic,
    AppointmentUpdate,
)
from daybook.models.settings import UserSettings

__all__ = [
    "User",
    "UserCreate",
    "UserPublic",
    "Appointment",
    "AppointmentCreate",
    "AppointmentPublic",
    "AppointmentUpdate",
    "UserSettings",
]

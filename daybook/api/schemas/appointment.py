from pydantic import BaseModel

from daybook.scheduling.types import AppointmentStatus


class StatusUpdate(BaseModel):
    status: AppointmentStatus

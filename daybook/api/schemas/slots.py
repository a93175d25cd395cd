import datetime as dt

from pydantic import BaseModel


class SlotInfo(BaseModel):
    start_time: dt.time
    end_time: dt.time | None  # None when the slot would run past midnight
    available: bool
    warning: str | None = None


class SlotGridResponse(BaseModel):
    date: dt.date
    duration_minutes: int
    slots: list[SlotInfo]


class EvaluationResponse(BaseModel):
    date: dt.date
    start_time: dt.time
    duration_minutes: int
    available: bool
    warning: str | None = None


class DayAvailabilityInfo(BaseModel):
    date: dt.date
    can_fit: bool
    occupancy: float
    appointment_count: int


class MonthAvailabilityResponse(BaseModel):
    year: int
    month: int
    duration_minutes: int
    days: list[DayAvailabilityInfo]

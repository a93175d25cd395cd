import datetime as dt

from pydantic import BaseModel, Field, model_validator

from daybook.api.schemas.common import NaiveTime


class PreferencesPublic(BaseModel):
    min_time_between_appointments: int
    business_hours_start: dt.time
    business_hours_end: dt.time
    slot_granularity_minutes: int


class PreferencesUpdate(BaseModel):
    min_time_between_appointments: int | None = Field(default=None, ge=0)
    business_hours_start: NaiveTime | None = None
    business_hours_end: NaiveTime | None = None

    @model_validator(mode="after")
    def check_hours(self) -> "PreferencesUpdate":
        start, end = self.business_hours_start, self.business_hours_end
        if start is not None and end is not None and end <= start:
            raise ValueError("business_hours_end must be after business_hours_start")
        return self

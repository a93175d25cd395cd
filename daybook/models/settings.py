import datetime as dt
from datetime import UTC

from sqlmodel import Field, SQLModel

from daybook.scheduling.types import SchedulingPreferences


def _utc_naive_now() -> dt.datetime:
    return dt.datetime.now(UTC).replace(tzinfo=None)


class UserSettings(SQLModel, table=True):
    """Per-user scheduling preferences. One row per user, created with defaults on first read."""

    __tablename__ = "user_settings"
    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", unique=True, index=True)
    min_time_between_appointments: int
    business_hours_start: dt.time
    business_hours_end: dt.time
    created_at: dt.datetime = Field(default_factory=_utc_naive_now)
    updated_at: dt.datetime = Field(default_factory=_utc_naive_now)

    def to_preferences(self, slot_granularity_minutes: int) -> SchedulingPreferences:
        return SchedulingPreferences(
            business_start=self.business_hours_start,
            business_end=self.business_hours_end,
            minimum_gap_minutes=self.min_time_between_appointments,
            slot_granularity_minutes=slot_granularity_minutes,
        )

from datetime import UTC, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from daybook.core.config import settings
from daybook.models.settings import UserSettings


async def get_or_create_user_settings(session: AsyncSession, user_id: int) -> UserSettings:
    result = await session.execute(select(UserSettings).where(UserSettings.user_id == user_id))
    row = result.scalar_one_or_none()
    if row:
        return row
    row = UserSettings(
        user_id=user_id,
        min_time_between_appointments=settings.default_min_gap_minutes,
        business_hours_start=settings.default_business_start,
        business_hours_end=settings.default_business_end,
    )
    session.add(row)
    await session.flush()
    await session.refresh(row)
    return row


async def update_user_settings(
    session: AsyncSession, user_id: int, updates: dict
) -> UserSettings:
    row = await get_or_create_user_settings(session, user_id)
    for field, value in updates.items():
        setattr(row, field, value)
    row.updated_at = datetime.now(UTC).replace(tzinfo=None)
    session.add(row)
    await session.flush()
    await session.refresh(row)
    return row

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from daybook.api.deps import get_current_user
from daybook.api.schemas.preferences import PreferencesPublic, PreferencesUpdate
from daybook.core.config import settings
from daybook.core.db import get_session
from daybook.models.settings import UserSettings
from daybook.models.user import User
from daybook.services.preferences_service import (
    get_or_create_user_settings,
    update_user_settings,
)

router = APIRouter(prefix="/preferences", tags=["preferences"])


def _to_public(row: UserSettings) -> PreferencesPublic:
    return PreferencesPublic(
        min_time_between_appointments=row.min_time_between_appointments,
        business_hours_start=row.business_hours_start,
        business_hours_end=row.business_hours_end,
        slot_granularity_minutes=settings.slot_granularity_minutes,
    )


@router.get("", response_model=PreferencesPublic)
async def get_preferences(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PreferencesPublic:
    row = await get_or_create_user_settings(session, current_user.id)
    return _to_public(row)


@router.put("", response_model=PreferencesPublic)
async def put_preferences(
    body: PreferencesUpdate,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> PreferencesPublic:
    current = await get_or_create_user_settings(session, current_user.id)
    updates = body.model_dump(exclude_unset=True, exclude_none=True)
    start = updates.get("business_hours_start", current.business_hours_start)
    end = updates.get("business_hours_end", current.business_hours_end)
    if end <= start:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="business_hours_end must be after business_hours_start",
        )
    row = await update_user_settings(session, current_user.id, updates)
    return _to_public(row)

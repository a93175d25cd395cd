from datetime import datetime

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from daybook.core.config import settings
from daybook.core.db import get_session
from daybook.core.security import decode_access_token
from daybook.models.user import User
from daybook.scheduling.types import SchedulingPreferences
from daybook.services.appointment_service import AppointmentStore
from daybook.services.preferences_service import get_or_create_user_settings

security = HTTPBearer(auto_error=False)


async def get_current_user(
    session: AsyncSession = Depends(get_session),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization header",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user_id = decode_access_token(credentials.credentials)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        uid = int(user_id)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    result = await session.execute(select(User).where(User.id == uid))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_appointment_store(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> AppointmentStore:
    return AppointmentStore(session, current_user.id)


async def get_scheduling_preferences(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
) -> SchedulingPreferences:
    """Snapshot of the user's preferences, re-read on every request."""
    row = await get_or_create_user_settings(session, current_user.id)
    return row.to_preferences(settings.slot_granularity_minutes)


def get_now() -> datetime:
    """Naive local wall-clock time; appointments carry no timezone."""
    return datetime.now()

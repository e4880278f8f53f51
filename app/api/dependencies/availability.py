# app/api/dependencies/availability.py
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.session import get_db, get_session_factory
from app.services.availability_engine import AvailabilityEngine
from app.services.google_calendar import get_calendar_reader
from app.services.stores import (
    SqlAvailabilityRulesStore,
    SqlBookingStore,
    SqlMeetingTypeStore,
)


async def get_availability_engine(
    db: AsyncSession = Depends(get_db),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> AvailabilityEngine:
    """
    Build a per-request AvailabilityEngine wired to the SQL stores and the
    external calendar reader (Google when configured, otherwise a no-op).
    """
    return AvailabilityEngine(
        meeting_types=SqlMeetingTypeStore(db),
        rules_store=SqlAvailabilityRulesStore(db),
        booking_store=SqlBookingStore(db),
        calendar_reader=get_calendar_reader(session_factory),
    )

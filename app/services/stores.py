# app/services/stores.py
"""
Read-only SQL implementations of the availability engine's collaborators.

Writes (creating bookings, editing rules) belong to other components; the
only write here is persisting a refreshed Google access token.
"""
from __future__ import annotations

import logging
from datetime import datetime

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.availability_rule import AvailabilityRule
from app.models.booking import Booking
from app.models.calendar_token import CalendarToken
from app.models.meeting_type import MeetingType
from app.schemas.availability import AvailabilityRules, BusyPeriod
from app.schemas.calendar_token import CalendarTokenRead
from app.schemas.meeting_type import MeetingTypeRead

logger = logging.getLogger(__name__)

CONFIRMED = "confirmed"


class SqlMeetingTypeStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, meeting_type_id: int) -> MeetingTypeRead | None:
        meeting_type = await self.db.get(MeetingType, meeting_type_id)
        if meeting_type is None:
            return None
        return MeetingTypeRead.model_validate(meeting_type)


class SqlAvailabilityRulesStore:
    """
    Loads a host's availability rules.

    Columns left NULL take the schema defaults. A row that fails validation
    (e.g. malformed weekly_hours) is logged and treated as absent, so the
    default schedule applies instead of failing the request.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get(self, host_id: str) -> AvailabilityRules | None:
        stmt = select(AvailabilityRule).where(AvailabilityRule.host_id == host_id)
        result = await self.db.execute(stmt)
        row = result.scalar_one_or_none()
        if row is None:
            return None

        values = {
            "timezone": row.timezone,
            "weekly_hours": row.weekly_hours,
            "min_notice": row.min_notice,
            "max_advance": row.max_advance,
            "default_buffer_before": row.default_buffer_before,
            "default_buffer_after": row.default_buffer_after,
        }
        try:
            return AvailabilityRules(**{k: v for k, v in values.items() if v is not None})
        except ValidationError as exc:
            logger.warning("Ignoring invalid availability rules for host %s: %s", host_id, exc)
            return None


class SqlBookingStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_confirmed(
        self, host_id: str, start: datetime, end: datetime
    ) -> list[BusyPeriod]:
        """
        Confirmed bookings of `host_id` overlapping [start, end).

        A row whose end precedes its start is logged and skipped; it never
        fails the whole lookup.
        """
        stmt = select(Booking.id, Booking.start_time, Booking.end_time).where(
            Booking.host_id == host_id,
            Booking.status == CONFIRMED,
            Booking.start_time < end,
            Booking.end_time > start,
        )
        result = await self.db.execute(stmt)

        busy: list[BusyPeriod] = []
        for row in result.all():
            try:
                busy.append(BusyPeriod(start=row.start_time, end=row.end_time))
            except ValidationError as exc:
                logger.warning("Skipping invalid booking %s for host %s: %s", row.id, host_id, exc)
        return busy


class SqlCalendarTokenStore:
    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _row(self, host_id: str) -> CalendarToken | None:
        stmt = select(CalendarToken).where(CalendarToken.host_id == host_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get(self, host_id: str) -> CalendarTokenRead | None:
        row = await self._row(host_id)
        if row is None:
            return None
        return CalendarTokenRead.model_validate(row)

    async def save_access_token(
        self,
        host_id: str,
        access_token: str,
        expires_at: datetime,
        refresh_token: str | None = None,
    ) -> None:
        """
        Persist refreshed credentials. Google only sometimes rotates the
        refresh token; the stored one is kept when none is returned.
        """
        row = await self._row(host_id)
        if row is None:
            return

        row.access_token = access_token
        row.expires_at = expires_at
        if refresh_token:
            row.refresh_token = refresh_token
        await self.db.commit()

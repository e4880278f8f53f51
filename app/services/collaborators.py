# app/services/collaborators.py
"""
Contracts of the collaborators the availability engine reads from.

Concrete implementations live in `app.services.stores` (SQL) and
`app.services.google_calendar` (external calendar); tests provide in-memory
fakes with the same shape.
"""
from __future__ import annotations

from datetime import datetime
from typing import Protocol

from app.schemas.availability import AvailabilityRules, BusyLookup, BusyPeriod
from app.schemas.meeting_type import MeetingTypeRead


class MeetingTypeStore(Protocol):
    async def get(self, meeting_type_id: int) -> MeetingTypeRead | None:
        ...


class AvailabilityRulesStore(Protocol):
    async def get(self, host_id: str) -> AvailabilityRules | None:
        ...


class BookingStore(Protocol):
    async def list_confirmed(
        self, host_id: str, start: datetime, end: datetime
    ) -> list[BusyPeriod]:
        """Confirmed bookings overlapping [start, end)."""
        ...


class ExternalCalendarReader(Protocol):
    async def list_busy(
        self, host_id: str, start: datetime, end: datetime
    ) -> BusyLookup:
        """
        Busy time from the host's external calendar in [start, end).

        Failures are reported through BusyLookup.error rather than raised.
        """
        ...

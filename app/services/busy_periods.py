# app/services/busy_periods.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import date as date_type, datetime, timedelta

from app.schemas.availability import BusyLookup, BusyPeriod
from app.services.collaborators import BookingStore, ExternalCalendarReader
from app.services.timezone_converter import host_midnight_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DayWindow:
    """
    Absolute window [start, end) covering one host-local calendar day.
    """

    start: datetime
    end: datetime

    @classmethod
    def for_host_day(cls, day: date_type, host_timezone: str) -> "DayWindow":
        start = host_midnight_utc(day, host_timezone)
        return cls(start=start, end=start + timedelta(hours=24))


def busy_from_lookup(host_id: str, lookup: BusyLookup) -> list[BusyPeriod]:
    """
    Map an external calendar lookup to busy periods.

    A failed lookup means "no external busy time": it is logged and never
    stops slot computation.
    """
    if lookup.error is not None:
        logger.warning(
            "External calendar unavailable for host %s, continuing without it: %s",
            host_id,
            lookup.error,
        )
        return []
    return list(lookup.periods)


class BusyPeriodAggregator:
    """
    Collects every busy interval of a host for one host-local day.

    Both sources are queried concurrently and both must finish before the
    result is returned. The union is left unsorted and unmerged because
    conflict testing is pairwise.
    """

    def __init__(
        self,
        calendar_reader: ExternalCalendarReader,
        booking_store: BookingStore,
    ) -> None:
        self.calendar_reader = calendar_reader
        self.booking_store = booking_store

    async def _external_busy(self, host_id: str, window: DayWindow) -> list[BusyPeriod]:
        try:
            lookup = await self.calendar_reader.list_busy(host_id, window.start, window.end)
        except Exception as exc:
            # Readers should report failures in the lookup; one that raises is
            # treated the same way.
            lookup = BusyLookup.failed(f"{type(exc).__name__}: {exc}")
        return busy_from_lookup(host_id, lookup)

    async def collect(self, host_id: str, window: DayWindow) -> list[BusyPeriod]:
        external, bookings = await asyncio.gather(
            self._external_busy(host_id, window),
            self.booking_store.list_confirmed(host_id, window.start, window.end),
        )
        return [*external, *bookings]

# app/services/availability_filter.py
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Sequence

from app.schemas.availability import BusyPeriod, TimeSlot
from app.services.slot_generator import CandidateSlot
from app.services.timezone_converter import format_time_in_timezone, to_utc_iso


def beyond_max_advance(day_start: datetime, now: datetime, max_advance_days: int) -> bool:
    """
    True when a host-local day starting at `day_start` lies past the booking
    horizon. Evaluated once per request, before any slot is generated.
    """
    return day_start > now + timedelta(days=max_advance_days)


def overlaps(start: datetime, end: datetime, busy: BusyPeriod) -> bool:
    """
    Half-open interval overlap between [start, end) and a busy period.
    """
    return start < busy.end and end > busy.start


class AvailabilityFilter:
    """
    Turns candidate slots into offered TimeSlots.

    Two distinct outcomes
    ---------------------
    - Excluded: the slot starts before `now + min_notice` (which includes
      the past). It is not listed at all.
    - Marked unavailable: the slot, widened by the buffers, overlaps at
      least one busy period. It stays on the grid with available=False.
    """

    def __init__(
        self,
        now: datetime,
        min_notice_minutes: int,
        buffer_before_minutes: int,
        buffer_after_minutes: int,
        busy_periods: Sequence[BusyPeriod],
        display_timezone: str,
    ) -> None:
        self.now = now
        self.earliest_start = now + timedelta(minutes=max(min_notice_minutes, 0))
        self.buffer_before = timedelta(minutes=buffer_before_minutes)
        self.buffer_after = timedelta(minutes=buffer_after_minutes)
        self.busy_periods = list(busy_periods)
        self.display_timezone = display_timezone

    def is_excluded(self, slot: CandidateSlot) -> bool:
        return slot.start < self.now or slot.start < self.earliest_start

    def has_conflict(self, slot: CandidateSlot) -> bool:
        buffered_start = slot.start - self.buffer_before
        buffered_end = slot.end + self.buffer_after
        return any(overlaps(buffered_start, buffered_end, busy) for busy in self.busy_periods)

    def stamp(self, slot: CandidateSlot, available: bool) -> TimeSlot:
        return TimeSlot(
            display_time=format_time_in_timezone(slot.start, self.display_timezone),
            available=available,
            utc_instant=to_utc_iso(slot.start),
        )

    def apply(self, candidates: Iterable[CandidateSlot]) -> list[TimeSlot]:
        return [
            self.stamp(slot, available=not self.has_conflict(slot))
            for slot in candidates
            if not self.is_excluded(slot)
        ]

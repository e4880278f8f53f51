# app/services/availability_engine.py
from __future__ import annotations

import logging
from datetime import date as date_type, datetime, timezone
from typing import Callable

from app.schemas.availability import AvailabilityRules, TimeSlot
from app.schemas.meeting_type import MeetingTypeRead
from app.services.availability_filter import AvailabilityFilter, beyond_max_advance
from app.services.busy_periods import BusyPeriodAggregator, DayWindow
from app.services.collaborators import (
    AvailabilityRulesStore,
    BookingStore,
    ExternalCalendarReader,
    MeetingTypeStore,
)
from app.services.schedule_rules import ScheduleRuleResolver
from app.services.slot_generator import CandidateSlot, SlotGenerator
from app.services.timezone_converter import is_valid_timezone

logger = logging.getLogger(__name__)

FALLBACK_TIMEZONE = "UTC"


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class AvailabilityEngine:
    """
    Single entry point for computing the bookable slots of a host's day.

    The engine is stateless between calls: rules, meeting type and busy
    periods are read fresh for every request and nothing is cached.

    Error policy
    ------------
    Best effort, never raise:
    - Unknown, inactive or foreign meeting type  => []
    - Invalid viewer timezone                    => host timezone is used
    - External calendar unavailable              => treated as no busy time
    - Anything unexpected                        => logged, []

    Note
    ----
    Availability is only read here. The booking write path must re-check
    the same conflict predicate atomically; a slot shown as available can
    still be taken between this read and that write.
    """

    def __init__(
        self,
        meeting_types: MeetingTypeStore,
        rules_store: AvailabilityRulesStore,
        booking_store: BookingStore,
        calendar_reader: ExternalCalendarReader,
        now: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.meeting_types = meeting_types
        self.rules_store = rules_store
        self.aggregator = BusyPeriodAggregator(
            calendar_reader=calendar_reader,
            booking_store=booking_store,
        )
        self._now = now

    async def compute_availability(
        self,
        host_id: str,
        meeting_type_id: int,
        day: date_type,
        viewer_timezone: str | None = None,
    ) -> list[TimeSlot]:
        """
        Bookable slots for `meeting_type_id` on host-local calendar `day`.

        `day` may be a date or a datetime; only the calendar day is used.
        Display labels use `viewer_timezone` when it is valid, otherwise
        the host's timezone. `utc_instant` never depends on the viewer.
        """
        if isinstance(day, datetime):
            day = day.date()

        try:
            return await self._compute(host_id, meeting_type_id, day, viewer_timezone)
        except Exception:
            logger.exception(
                "Availability computation failed for host=%s meeting_type=%s day=%s",
                host_id,
                meeting_type_id,
                day,
            )
            return []

    async def _load_meeting_type(self, host_id: str, meeting_type_id: int) -> MeetingTypeRead | None:
        meeting_type = await self.meeting_types.get(meeting_type_id)
        if meeting_type is None:
            logger.info("Meeting type %s not found", meeting_type_id)
            return None
        if meeting_type.host_id != host_id or not meeting_type.is_active:
            logger.info(
                "Meeting type %s is inactive or not owned by host %s",
                meeting_type_id,
                host_id,
            )
            return None
        return meeting_type

    async def _load_rules(self, host_id: str) -> AvailabilityRules:
        rules = await self.rules_store.get(host_id)
        return rules if rules is not None else AvailabilityRules()

    @staticmethod
    def _host_timezone(host_id: str, rules: AvailabilityRules) -> str:
        if is_valid_timezone(rules.timezone):
            return rules.timezone
        logger.warning(
            "Host %s has invalid timezone %r configured; using %s",
            host_id,
            rules.timezone,
            FALLBACK_TIMEZONE,
        )
        return FALLBACK_TIMEZONE

    async def _compute(
        self,
        host_id: str,
        meeting_type_id: int,
        day: date_type,
        viewer_timezone: str | None,
    ) -> list[TimeSlot]:
        meeting_type = await self._load_meeting_type(host_id, meeting_type_id)
        if meeting_type is None:
            return []

        rules = await self._load_rules(host_id)
        host_tz = self._host_timezone(host_id, rules)
        display_tz = viewer_timezone if is_valid_timezone(viewer_timezone) else host_tz

        now = self._now()
        resolver = ScheduleRuleResolver(rules, host_tz)
        day_start = resolver.host_day_start(day)

        if beyond_max_advance(day_start, now, rules.max_advance):
            return []

        blocks = resolver.resolve_blocks(day)
        if not blocks:
            # No working hours: skip the busy-period fetch entirely.
            return []

        busy = await self.aggregator.collect(host_id, DayWindow.for_host_day(day, host_tz))

        generator = SlotGenerator(meeting_type.duration, host_tz)
        candidates: dict[datetime, CandidateSlot] = {}
        for block in blocks:
            for slot in generator.generate(day, block):
                candidates.setdefault(slot.start, slot)

        slot_filter = AvailabilityFilter(
            now=now,
            min_notice_minutes=rules.min_notice,
            buffer_before_minutes=_buffer(meeting_type.buffer_before, rules.default_buffer_before),
            buffer_after_minutes=_buffer(meeting_type.buffer_after, rules.default_buffer_after),
            busy_periods=busy,
            display_timezone=display_tz,
        )
        ordered = [candidates[start] for start in sorted(candidates)]
        return slot_filter.apply(ordered)


def _buffer(own: int | None, default: int) -> int:
    return own if own is not None else default

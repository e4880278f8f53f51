# app/services/schedule_rules.py
from __future__ import annotations

from datetime import date as date_type, datetime

from app.schemas.availability import AvailabilityRules, TimeBlock
from app.services.timezone_converter import host_midnight_utc, weekday_name


class ScheduleRuleResolver:
    """
    Picks the working-hour blocks that apply to a requested calendar day.

    Rules
    -----
    - The weekday is the one observed in the host's timezone at host-local
      midnight of the requested day (not the UTC or viewer weekday).
    - A weekday that is missing from weekly_hours, or mapped to None, is
      fully unavailable and resolves to None.
    - Several disjoint blocks per day are returned in start order.
    """

    def __init__(self, rules: AvailabilityRules, host_timezone: str) -> None:
        self.rules = rules
        self.host_timezone = host_timezone

    def host_day_start(self, day: date_type) -> datetime:
        """
        UTC instant at which `day` begins for the host.
        """
        return host_midnight_utc(day, self.host_timezone)

    def host_weekday(self, day: date_type) -> str:
        return weekday_name(self.host_day_start(day), self.host_timezone)

    def resolve_blocks(self, day: date_type) -> list[TimeBlock] | None:
        """
        Working blocks for `day`, or None when the host does not work that day.
        """
        return self.rules.blocks_for(self.host_weekday(day))

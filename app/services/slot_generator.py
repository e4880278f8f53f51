# app/services/slot_generator.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import date as date_type, datetime, timedelta
from typing import Iterator

from app.schemas.availability import TimeBlock
from app.services.timezone_converter import wall_clock_to_utc

# Meeting types of this length or longer share one grid.
MAX_SLOT_INTERVAL_MINUTES = 30


def slot_interval_minutes(duration: int) -> int:
    """
    Step between consecutive slot starts for a meeting of `duration` minutes.

    Short meetings get a matching fine grid (15 -> 15); anything of 30
    minutes or longer is offered on the common 30-minute grid.
    """
    return min(duration, MAX_SLOT_INTERVAL_MINUTES)


@dataclass(frozen=True)
class CandidateSlot:
    start: datetime
    end: datetime


class SlotGenerator:
    """
    Walks working-hour blocks and yields candidate slots of exactly
    `duration` minutes.

    A slot never runs past the end of its block; generation for a block
    stops at the first start whose slot would overflow.
    """

    def __init__(self, duration: int, host_timezone: str) -> None:
        if duration <= 0:
            raise ValueError("duration must be a positive number of minutes")
        self.duration = timedelta(minutes=duration)
        self.interval = timedelta(minutes=slot_interval_minutes(duration))
        self.host_timezone = host_timezone

    def block_bounds(self, day: date_type, block: TimeBlock) -> tuple[datetime, datetime]:
        """
        Absolute start and end of `block` on host-local `day`.
        """
        start_h, start_m = block.start_hour_minute
        end_h, end_m = block.end_hour_minute
        start = wall_clock_to_utc(day.year, day.month, day.day, start_h, start_m, self.host_timezone)
        end = wall_clock_to_utc(day.year, day.month, day.day, end_h, end_m, self.host_timezone)
        return start, end

    def generate(self, day: date_type, block: TimeBlock) -> Iterator[CandidateSlot]:
        block_start, block_end = self.block_bounds(day, block)

        cursor = block_start
        while cursor < block_end:
            slot_end = cursor + self.duration
            if slot_end > block_end:
                break
            yield CandidateSlot(start=cursor, end=slot_end)
            cursor += self.interval

# app/schemas/availability.py
from __future__ import annotations

import re
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

WEEKDAYS = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

_HHMM_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


# --------------------------------------------------------------------------
# Host configuration
# --------------------------------------------------------------------------

class TimeBlock(BaseModel):
    """
    One working-hour block, expressed as wall-clock "HH:MM" strings in the
    host's timezone.
    """

    start: str = Field(..., description="Block start (HH:MM, 00:00-23:59).", examples=["09:00"])
    end: str = Field(..., description="Block end (HH:MM, 00:00-23:59).", examples=["17:00"])

    @field_validator("start", "end")
    @classmethod
    def _validate_hhmm(cls, value: str) -> str:
        if not _HHMM_RE.match(value):
            raise ValueError("time must be in HH:MM format (00:00-23:59)")
        return value

    @property
    def start_hour_minute(self) -> tuple[int, int]:
        hour, minute = self.start.split(":")
        return int(hour), int(minute)

    @property
    def end_hour_minute(self) -> tuple[int, int]:
        hour, minute = self.end.split(":")
        return int(hour), int(minute)


def _default_weekly_hours() -> dict[str, list[TimeBlock] | None]:
    working_day = [TimeBlock(start="09:00", end="17:00")]
    return {
        "monday": list(working_day),
        "tuesday": list(working_day),
        "wednesday": list(working_day),
        "thursday": list(working_day),
        "friday": list(working_day),
        "saturday": None,
        "sunday": None,
    }


class AvailabilityRules(BaseModel):
    """
    Per-host availability configuration.

    `timezone` is the reference frame for every working-hour block in
    `weekly_hours`. A weekday mapped to None (or missing) is fully
    unavailable.
    """

    model_config = ConfigDict(from_attributes=True)

    timezone: str = Field(
        "UTC",
        description="IANA timezone in which weekly_hours are interpreted.",
        examples=["America/New_York"],
    )
    weekly_hours: dict[str, list[TimeBlock] | None] = Field(
        default_factory=_default_weekly_hours,
        description="Lowercase weekday name -> working blocks, or null when unavailable.",
    )
    min_notice: int = Field(
        1440,
        ge=0,
        description="Minutes a slot must start after 'now' to be offered.",
    )
    max_advance: int = Field(
        60,
        ge=1,
        le=365,
        description="Days into the future beyond which no slot is offered.",
    )
    default_buffer_before: int = Field(
        0,
        ge=0,
        description="Buffer before, used when a meeting type does not set its own.",
    )
    default_buffer_after: int = Field(
        0,
        ge=0,
        description="Buffer after, used when a meeting type does not set its own.",
    )

    @field_validator("weekly_hours", mode="before")
    @classmethod
    def _normalize_weekday_keys(cls, value):
        if value is None:
            return _default_weekly_hours()
        if isinstance(value, dict):
            normalized = {}
            for day, blocks in value.items():
                key = str(day).lower()
                if key not in WEEKDAYS:
                    raise ValueError(f"unknown weekday: {day!r}")
                normalized[key] = blocks
            return normalized
        return value

    def blocks_for(self, weekday: str) -> list[TimeBlock] | None:
        """
        Working blocks for a lowercase weekday, ordered by start.

        Returns None when the day is absent or explicitly null.
        """
        blocks = self.weekly_hours.get(weekday)
        if blocks is None:
            return None
        return sorted(blocks, key=lambda block: block.start)


# --------------------------------------------------------------------------
# Busy time
# --------------------------------------------------------------------------

def _as_utc(value: datetime) -> datetime:
    # Naive timestamps from storage are UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class BusyPeriod(BaseModel):
    """
    Absolute interval during which a host is already committed, sourced from
    the external calendar or from a confirmed booking.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    start: datetime = Field(..., description="Start instant (UTC).")
    end: datetime = Field(..., description="End instant (UTC), exclusive.")

    @field_validator("start", "end")
    @classmethod
    def _normalize_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @model_validator(mode="after")
    def _check_order(self) -> "BusyPeriod":
        if self.end < self.start:
            raise ValueError("busy period end must not precede its start")
        return self


class BusyLookup(BaseModel):
    """
    Outcome of reading busy time from the external calendar.

    Either `periods` holds the busy intervals, or `error` describes why the
    calendar could not be read. Callers decide what an error means; the
    aggregator maps it to "no busy time".
    """

    periods: list[BusyPeriod] = Field(default_factory=list)
    error: str | None = Field(
        None,
        description="Failure description when the calendar could not be read.",
    )

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, error: str) -> "BusyLookup":
        return cls(periods=[], error=error)


# --------------------------------------------------------------------------
# Output
# --------------------------------------------------------------------------

class TimeSlot(BaseModel):
    """
    A bookable slot as offered to a viewer.

    `utc_instant` is the only field a booking call may trust for equality
    or ordering; `display_time` depends on the viewer timezone.
    """

    display_time: str = Field(
        ...,
        description="Short local time label in the display timezone.",
        examples=["9:00 AM"],
    )
    available: bool = Field(
        ...,
        description="False when the buffered slot overlaps existing busy time.",
        examples=[True],
    )
    utc_instant: str = Field(
        ...,
        description="Slot start as ISO-8601 UTC with millisecond precision.",
        examples=["2025-06-02T13:00:00.000Z"],
    )

# app/services/timezone_converter.py
"""
Conversion between wall-clock times and absolute instants.

All conversions defer to the runtime IANA timezone database (`zoneinfo`,
backed by the `tzdata` package when the host has no system database), so
historical and future DST rules are whatever the installed tzdata says.
"""
from __future__ import annotations

from datetime import date as date_type, datetime, timedelta, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def is_valid_timezone(tz: object) -> bool:
    """
    Return True when `tz` names a timezone known to the tz database.

    Never raises: unknown ids, empty strings, path-like or injection strings
    and non-string values all return False.
    """
    if not isinstance(tz, str) or not tz:
        return False
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        return False
    return True


def _observed_offset(guess: datetime, zone: ZoneInfo) -> timedelta:
    """
    Difference between the wall clock `guess` shows in `zone` and the wall
    clock of `guess` itself read as UTC.
    """
    observed = guess.astimezone(zone).replace(tzinfo=None)
    return observed - guess.replace(tzinfo=None)


def wall_clock_to_utc(
    year: int,
    month: int,
    day: int,
    hour: int,
    minute: int,
    tz: str,
) -> datetime:
    """
    Return the aware UTC instant at which the given wall clock occurs in `tz`.

    Two-pass offset resolution:
      1) read the wall clock as if it were UTC (the guess);
      2) see what wall clock the guess shows in `tz`;
      3) the difference is the zone offset at the guess;
      4) shift the guess back by that offset.
    When a DST transition lies between the guess and the shifted instant, the
    offset is re-read there and the second candidate is used if it actually
    shows the requested wall clock.

    Ambiguous wall clocks (fall-back) resolve to the first occurrence when
    the guess lands before the transition. Wall clocks skipped by a
    spring-forward gap have no exact instant and resolve to the first-pass
    candidate. Hour 24 means the end of the day, i.e. 00:00 of the following
    day.
    """
    rollover = timedelta(0)
    if hour == 24:
        hour = 0
        rollover = timedelta(days=1)

    zone = ZoneInfo(tz)
    guess = datetime(year, month, day, hour, minute, tzinfo=timezone.utc) + rollover

    first_offset = _observed_offset(guess, zone)
    first = guess - first_offset

    second_offset = _observed_offset(first, zone)
    if second_offset == first_offset:
        return first

    second = guess - second_offset
    if second.astimezone(zone).replace(tzinfo=None) == guess.replace(tzinfo=None):
        return second
    return first


def host_midnight_utc(day: date_type, tz: str) -> datetime:
    """
    Instant of 00:00 on `day` as observed in `tz`.
    """
    return wall_clock_to_utc(day.year, day.month, day.day, 0, 0, tz)


def format_time_in_timezone(instant: datetime, tz: str) -> str:
    """
    Short 12-hour label such as "2:00 PM" for `instant` seen in `tz`.

    Display only; never compare or store these strings.
    """
    local = instant.astimezone(ZoneInfo(tz))
    hour12 = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return f"{hour12}:{local.minute:02d} {meridiem}"


def weekday_name(instant: datetime, tz: str) -> str:
    """
    Lowercase English weekday name of `instant` as observed in `tz`.
    """
    return instant.astimezone(ZoneInfo(tz)).strftime("%A").lower()


def to_utc_iso(instant: datetime) -> str:
    """
    ISO-8601 UTC string with millisecond precision and a "Z" suffix,
    e.g. "2025-06-02T13:00:00.000Z".
    """
    utc = instant.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"

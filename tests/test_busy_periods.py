# tests/test_busy_periods.py
import asyncio
import logging
from datetime import date, datetime, timezone

import pytest

from app.schemas.availability import BusyLookup, BusyPeriod
from app.services.busy_periods import BusyPeriodAggregator, DayWindow, busy_from_lookup
from app.services.google_calendar import CalendarClientError


def _at(hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 6, 2, hour, minute, tzinfo=timezone.utc)


class FakeCalendarReader:
    def __init__(self, lookup=None, exc=None, wait_for=None):
        self.lookup = lookup or BusyLookup()
        self.exc = exc
        self.wait_for = wait_for
        self.calls = []

    async def list_busy(self, host_id, start, end):
        self.calls.append((host_id, start, end))
        if self.wait_for is not None:
            await self.wait_for.wait()
        if self.exc is not None:
            raise self.exc
        return self.lookup


class FakeBookingStore:
    def __init__(self, periods=None, signal=None):
        self.periods = periods or []
        self.signal = signal
        self.calls = []

    async def list_confirmed(self, host_id, start, end):
        self.calls.append((host_id, start, end))
        if self.signal is not None:
            self.signal.set()
        return list(self.periods)


def test_day_window_spans_host_local_day():
    window = DayWindow.for_host_day(date(2025, 6, 2), "America/New_York")

    assert window.start == datetime(2025, 6, 2, 4, 0, tzinfo=timezone.utc)
    assert window.end == datetime(2025, 6, 3, 4, 0, tzinfo=timezone.utc)


def test_busy_from_lookup_maps_error_to_empty_and_warns(caplog):
    lookup = BusyLookup.failed("token revoked")

    with caplog.at_level(logging.WARNING, logger="app.services.busy_periods"):
        periods = busy_from_lookup("host-1", lookup)

    assert periods == []
    assert "token revoked" in caplog.text


def test_busy_from_lookup_passes_periods_through():
    period = BusyPeriod(start=_at(9), end=_at(10))

    assert busy_from_lookup("host-1", BusyLookup(periods=[period])) == [period]


@pytest.mark.asyncio
async def test_collect_unions_both_sources_for_the_window():
    external = BusyPeriod(start=_at(9), end=_at(10))
    booked = BusyPeriod(start=_at(11), end=_at(11, 30))
    reader = FakeCalendarReader(BusyLookup(periods=[external]))
    bookings = FakeBookingStore([booked])
    window = DayWindow.for_host_day(date(2025, 6, 2), "UTC")

    aggregator = BusyPeriodAggregator(reader, bookings)
    busy = await aggregator.collect("host-1", window)

    assert sorted(busy, key=lambda b: b.start) == [external, booked]
    assert reader.calls == [("host-1", window.start, window.end)]
    assert bookings.calls == [("host-1", window.start, window.end)]


@pytest.mark.asyncio
async def test_collect_fetches_sources_concurrently():
    # The reader only finishes once the booking query has started, which is
    # impossible if the two calls run one after the other.
    started = asyncio.Event()
    reader = FakeCalendarReader(wait_for=started)
    bookings = FakeBookingStore([BusyPeriod(start=_at(9), end=_at(10))], signal=started)
    window = DayWindow.for_host_day(date(2025, 6, 2), "UTC")

    aggregator = BusyPeriodAggregator(reader, bookings)
    busy = await asyncio.wait_for(aggregator.collect("host-1", window), timeout=2)

    assert len(busy) == 1


@pytest.mark.asyncio
async def test_calendar_failure_keeps_bookings():
    booked = BusyPeriod(start=_at(11), end=_at(11, 30))
    window = DayWindow.for_host_day(date(2025, 6, 2), "UTC")

    failing_lookup = BusyPeriodAggregator(
        FakeCalendarReader(BusyLookup.failed("503 from Google")),
        FakeBookingStore([booked]),
    )
    raising_reader = BusyPeriodAggregator(
        FakeCalendarReader(exc=CalendarClientError("boom")),
        FakeBookingStore([booked]),
    )
    unexpected_error = BusyPeriodAggregator(
        FakeCalendarReader(exc=ValueError("Expecting value: line 1 column 1")),
        FakeBookingStore([booked]),
    )

    assert await failing_lookup.collect("host-1", window) == [booked]
    assert await raising_reader.collect("host-1", window) == [booked]
    assert await unexpected_error.collect("host-1", window) == [booked]

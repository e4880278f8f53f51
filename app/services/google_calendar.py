# app/services/google_calendar.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import get_settings
from app.schemas.availability import BusyLookup, BusyPeriod
from app.schemas.calendar_token import CalendarTokenRead
from app.services.stores import SqlCalendarTokenStore

logger = logging.getLogger(__name__)


class CalendarClientError(RuntimeError):
    """
    Raised when the Google Calendar client cannot refresh a token or when a
    Calendar API call fails in a non-recoverable way.
    """


@dataclass
class TokenGrant:
    access_token: str
    expires_at: datetime
    refresh_token: str | None = None


class GoogleCalendarClient:
    """
    Minimal Google Calendar REST client for reading a host's events.

    Responsibilities
    ----------------
    - Refresh expired access tokens with the OAuth2 refresh_token grant.
    - List events of one calendar in a time window, following pagination.
    - Avoid leaking HTTP client details into the rest of the codebase.

    Notes
    -----
    - The client holds no per-host state; tokens are stored by the caller.
    - Every call uses its own short-lived httpx.AsyncClient with the
      configured timeout.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        token_url: str = "https://oauth2.googleapis.com/token",
        base_url: str = "https://www.googleapis.com/calendar/v3",
        timeout_seconds: float = 10.0,
    ) -> None:
        if not client_id or not client_secret:
            raise ValueError("client_id and client_secret are required")

        self._client_id = client_id
        self._client_secret = client_secret
        self._token_url = token_url
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    async def refresh_access_token(self, refresh_token: str) -> TokenGrant:
        """
        Exchange a refresh token for a fresh access token.
        """
        data = {
            "client_id": self._client_id,
            "client_secret": self._client_secret,
            "refresh_token": refresh_token,
            "grant_type": "refresh_token",
        }

        async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
            resp = await client.post(self._token_url, data=data)

        if resp.status_code != 200:
            raise CalendarClientError(
                f"Failed to refresh Google token (status={resp.status_code}): {resp.text}"
            )

        payload = resp.json()
        access_token = payload.get("access_token")
        expires_in = payload.get("expires_in", 3600)

        if not access_token or not isinstance(expires_in, (int, float)):
            raise CalendarClientError(
                "Invalid token response from Google (missing access_token/expires_in)"
            )

        now = datetime.now(tz=timezone.utc)
        return TokenGrant(
            access_token=access_token,
            expires_at=now + timedelta(seconds=float(expires_in)),
            refresh_token=payload.get("refresh_token"),
        )

    async def _request(
        self,
        method: str,
        path: str,
        access_token: str,
        *,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        url = f"{self._base_url}/{path.lstrip('/')}"
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        }

        async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
            resp = await client.request(
                method=method.upper(),
                url=url,
                headers=headers,
                params=params,
                json=None,
            )
        return resp

    async def get_json(
        self,
        path: str,
        access_token: str,
        *,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Issue a GET request and return the JSON payload.

        Raises CalendarClientError on non-2xx responses.
        """
        resp = await self._request("GET", path, access_token, params=params)
        if resp.status_code // 100 != 2:
            raise CalendarClientError(
                f"Google Calendar GET failed (status={resp.status_code}): {resp.text}"
            )
        return resp.json()

    async def list_events(
        self,
        access_token: str,
        calendar_id: str,
        time_min: datetime,
        time_max: datetime,
    ) -> List[Dict[str, Any]]:
        """
        All single (expanded) events of `calendar_id` between time_min and
        time_max, across every result page.
        """
        path = f"/calendars/{quote(calendar_id, safe='')}/events"
        params: Dict[str, Any] = {
            "timeMin": time_min.astimezone(timezone.utc).isoformat(),
            "timeMax": time_max.astimezone(timezone.utc).isoformat(),
            "singleEvents": "true",
            "orderBy": "startTime",
        }

        events: List[Dict[str, Any]] = []
        while True:
            payload = await self.get_json(path, access_token, params=params)
            events.extend(payload.get("items", []))
            page_token = payload.get("nextPageToken")
            if not page_token:
                return events
            params = {**params, "pageToken": page_token}


def _parse_event_time(raw: Any) -> Optional[datetime]:
    """
    Parse a Calendar API start/end object into an aware UTC datetime.

    Timed events carry `dateTime`; all-day events only carry `date`, which
    is read as UTC midnight. Returns None if the object is malformed or
    parsing fails.
    """
    if not isinstance(raw, dict):
        return None
    value = raw.get("dateTime") or raw.get("date")
    if not isinstance(value, str) or not value:
        return None
    try:
        dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def busy_periods_from_events(events: List[Dict[str, Any]]) -> List[BusyPeriod]:
    """
    Convert Calendar API events into busy periods.

    Rules
    -----
    - Cancelled events and events marked "transparent" (shown as free) are
      not busy.
    - Malformed events, and events with a missing or unparseable start/end,
      are skipped.
    """
    busy: List[BusyPeriod] = []
    for ev in events:
        if not isinstance(ev, dict):
            logger.debug("Skipping malformed calendar event %r", ev)
            continue
        if ev.get("status") == "cancelled" or ev.get("transparency") == "transparent":
            continue

        start = _parse_event_time(ev.get("start"))
        end = _parse_event_time(ev.get("end"))
        if start is None or end is None or end < start:
            logger.debug("Skipping calendar event %s without usable times", ev.get("id"))
            continue

        busy.append(BusyPeriod(start=start, end=end))
    return busy


class GoogleCalendarReader:
    """
    External calendar reader backed by each host's stored Google token.

    list_busy never raises: a disconnected calendar is an empty lookup, and
    any failure (including a malformed API payload) comes back as
    BusyLookup.error.
    """

    def __init__(
        self,
        client: GoogleCalendarClient,
        session_factory: async_sessionmaker[AsyncSession],
        refresh_margin_seconds: int = 300,
    ) -> None:
        self.client = client
        # A dedicated session per lookup; the booking store's session may be
        # in use concurrently.
        self.session_factory = session_factory
        self.refresh_margin = timedelta(seconds=refresh_margin_seconds)

    async def _valid_access_token(
        self,
        tokens: SqlCalendarTokenStore,
        credentials: CalendarTokenRead,
    ) -> str:
        now = datetime.now(tz=timezone.utc)
        if credentials.expires_at is None or credentials.expires_at > now + self.refresh_margin:
            return credentials.access_token

        if not credentials.refresh_token:
            raise CalendarClientError(
                f"Google token for host {credentials.host_id} expired and no refresh token is stored"
            )

        grant = await self.client.refresh_access_token(credentials.refresh_token)
        await tokens.save_access_token(
            host_id=credentials.host_id,
            access_token=grant.access_token,
            expires_at=grant.expires_at,
            refresh_token=grant.refresh_token,
        )
        return grant.access_token

    async def list_busy(self, host_id: str, start: datetime, end: datetime) -> BusyLookup:
        try:
            async with self.session_factory() as session:
                tokens = SqlCalendarTokenStore(session)
                credentials = await tokens.get(host_id)
                if credentials is None:
                    # Calendar not connected: nothing to block.
                    return BusyLookup()

                access_token = await self._valid_access_token(tokens, credentials)
                events = await self.client.list_events(
                    access_token, credentials.calendar_id, start, end
                )
            periods = busy_periods_from_events(events)
        except Exception as exc:
            # Any failure here means the calendar is unavailable for this lookup.
            return BusyLookup.failed(f"{type(exc).__name__}: {exc}")

        return BusyLookup(periods=periods)


class NullCalendarReader:
    """
    Reader used when no Google credentials are configured.
    """

    async def list_busy(self, host_id: str, start: datetime, end: datetime) -> BusyLookup:
        return BusyLookup()


# Simple singleton-style accessor wired to app settings
_calendar_client_instance: Optional[GoogleCalendarClient] = None


def get_google_calendar_client() -> GoogleCalendarClient:
    """
    Lazily construct a GoogleCalendarClient using application settings.
    """
    global _calendar_client_instance
    if _calendar_client_instance is None:
        settings = get_settings()
        if not settings.GOOGLE_CLIENT_ID or not settings.GOOGLE_CLIENT_SECRET:
            raise CalendarClientError(
                "GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET must be configured "
                "in settings to read hosts' Google calendars."
            )
        _calendar_client_instance = GoogleCalendarClient(
            client_id=settings.GOOGLE_CLIENT_ID,
            client_secret=settings.GOOGLE_CLIENT_SECRET,
            token_url=settings.GOOGLE_TOKEN_URL,
            base_url=settings.GOOGLE_CALENDAR_BASE_URL,
            timeout_seconds=settings.GOOGLE_TIMEOUT_SECONDS,
        )
    return _calendar_client_instance


def get_calendar_reader(
    session_factory: async_sessionmaker[AsyncSession],
) -> GoogleCalendarReader | NullCalendarReader:
    """
    Google-backed reader when credentials are configured, otherwise a reader
    that reports no external busy time.
    """
    try:
        client = get_google_calendar_client()
    except CalendarClientError as exc:
        logger.info("External calendar disabled: %s", exc)
        return NullCalendarReader()

    settings = get_settings()
    return GoogleCalendarReader(
        client=client,
        session_factory=session_factory,
        refresh_margin_seconds=settings.GOOGLE_TOKEN_REFRESH_MARGIN_SECONDS,
    )

# app/schemas/calendar_token.py
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CalendarTokenRead(BaseModel):
    """
    Stored Google OAuth credentials of a host whose calendar is connected.
    """

    model_config = ConfigDict(from_attributes=True)

    host_id: str = Field(..., description="Host owning the connected calendar.")
    access_token: str = Field(..., description="Current OAuth access token.")
    refresh_token: str | None = Field(
        None,
        description="Refresh token; without it an expired calendar counts as disconnected.",
    )
    expires_at: datetime | None = Field(
        None,
        description="Access token expiry (UTC). Unknown expiry is treated as still valid.",
    )
    calendar_id: str = Field("primary", description="Google calendar queried for busy time.")

    @field_validator("expires_at")
    @classmethod
    def _normalize_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("calendar_id", mode="before")
    @classmethod
    def _default_calendar(cls, value):
        return value or "primary"

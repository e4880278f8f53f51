# app/api/routes/health.py
from datetime import datetime, timezone

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.core.config import get_settings


router = APIRouter(tags=["Health"])


class HealthResponse(BaseModel):
    """
    Liveness payload for probes and uptime checks.
    """

    status: str = Field(..., description="Always 'ok' when the process answers.", examples=["ok"])
    app_name: str = Field(..., description="Configured APP_NAME.", examples=["CalendAI Availability"])
    environment: str = Field(..., description="Configured APP_ENV.", examples=["local"])
    external_calendar: str = Field(
        ...,
        description=(
            "'google' when Google credentials are configured, 'disabled' when "
            "slots are computed from bookings only."
        ),
        examples=["google"],
    )
    timestamp_utc: datetime = Field(..., description="Server time (UTC) of this response.")


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness check",
    description=(
        "Answers without touching the database or Google, so it stays green "
        "while downstream systems are degraded. Availability requests still "
        "succeed in that state, minus external calendar busy time."
    ),
)
async def health_check() -> HealthResponse:
    settings = get_settings()
    calendar_mode = (
        "google"
        if settings.GOOGLE_CLIENT_ID and settings.GOOGLE_CLIENT_SECRET
        else "disabled"
    )
    return HealthResponse(
        status="ok",
        app_name=settings.APP_NAME,
        environment=settings.APP_ENV,
        external_calendar=calendar_mode,
        timestamp_utc=datetime.now(tz=timezone.utc),
    )

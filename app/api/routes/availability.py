# app/api/routes/availability.py
from datetime import date as date_type
from http import HTTPStatus

from fastapi import APIRouter, Depends, Path, Query

from app.api.dependencies.availability import get_availability_engine
from app.schemas.availability import TimeSlot
from app.services.availability_engine import AvailabilityEngine

router = APIRouter(
    prefix="/public",
    tags=["Availability"],
)


@router.get(
    "/hosts/{host_id}/meeting-types/{meeting_type_id}/availability",
    response_model=list[TimeSlot],
    status_code=HTTPStatus.OK,
    summary="List bookable slots of a meeting type for one day",
    description=(
        "Compute the slots a guest can book for the given meeting type on the "
        "host-local calendar `date`.\n\n"
        "- Working hours are interpreted in the host's timezone.\n"
        "- Slots too close to now (minimum notice) are not listed.\n"
        "- Slots overlapping the host's calendar or confirmed bookings "
        "(buffers included) are listed with `available: false`.\n"
        "- `display_time` uses `timezone` when it is a valid IANA id, "
        "otherwise the host's timezone; `utc_instant` is always the same.\n\n"
        "Unknown meeting types and days outside the booking horizon return an "
        "empty list."
    ),
    responses={
        200: {
            "description": "Slots computed (possibly empty).",
            "content": {
                "application/json": {
                    "example": [
                        {
                            "display_time": "9:00 AM",
                            "available": True,
                            "utc_instant": "2025-06-02T13:00:00.000Z",
                        },
                        {
                            "display_time": "9:30 AM",
                            "available": False,
                            "utc_instant": "2025-06-02T13:30:00.000Z",
                        },
                    ]
                }
            },
        },
        422: {
            "description": "Validation error (e.g. missing or malformed date).",
        },
    },
)
async def get_availability(
    host_id: str = Path(..., description="Host owning the meeting type."),
    meeting_type_id: int = Path(..., description="Meeting type to compute slots for."),
    date: date_type = Query(
        ...,
        description="Host-local calendar day, in ISO format (YYYY-MM-DD).",
        examples=["2025-06-02"],
    ),
    timezone: str | None = Query(
        default=None,
        description="Viewer's IANA timezone for display labels.",
        examples=["Europe/London"],
    ),
    engine: AvailabilityEngine = Depends(get_availability_engine),
) -> list[TimeSlot]:
    """
    Return the day's slots for the booking page.
    """
    return await engine.compute_availability(
        host_id=host_id,
        meeting_type_id=meeting_type_id,
        day=date,
        viewer_timezone=timezone,
    )

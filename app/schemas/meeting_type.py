# app/schemas/meeting_type.py
from pydantic import BaseModel, ConfigDict, Field


class MeetingTypeRead(BaseModel):
    """
    Slot-relevant view of a bookable meeting type owned by a host.

    Only the fields the availability engine needs are exposed; names,
    slugs, branding and questions belong to the CRUD layer.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Database identifier of the meeting type.", examples=[1])
    host_id: str = Field(
        ...,
        description="Identifier of the host (user) who owns this meeting type.",
        examples=["user-1"],
    )
    duration: int = Field(
        ...,
        gt=0,
        description="Length of a booked meeting, in minutes.",
        examples=[30],
    )
    buffer_before: int | None = Field(
        default=None,
        ge=0,
        description=(
            "Padding in minutes required before the meeting. When absent, the "
            "host's default_buffer_before applies."
        ),
        examples=[0],
    )
    buffer_after: int | None = Field(
        default=None,
        ge=0,
        description=(
            "Padding in minutes required after the meeting. When absent, the "
            "host's default_buffer_after applies."
        ),
        examples=[15],
    )
    is_active: bool = Field(
        default=True,
        description="Inactive meeting types are never offered.",
    )

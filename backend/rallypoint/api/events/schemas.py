from datetime import datetime
from pydantic import Field

from rallypoint.api.events.models import DEFAULT_EVENT_SLOTS
from rallypoint.core.response.base_model import CustomBaseModel


class EventCreate(CustomBaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)
    date: datetime = Field(...)
    location: str = Field(..., min_length=1, max_length=255)
    slots_available: int = Field(DEFAULT_EVENT_SLOTS, ge=0)
    banner_image: str | None = Field(None)
    tags: list[str] = Field(default_factory=list)


class EventUpdate(CustomBaseModel):
    """Partial update: only fields present in the request body are applied."""

    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1)
    date: datetime | None = Field(None)
    location: str | None = Field(None, min_length=1, max_length=255)
    slots_available: int | None = Field(None, ge=0)
    banner_image: str | None = Field(None)
    tags: list[str] | None = Field(None)


class EventPublic(CustomBaseModel):
    id: int = Field(...)
    title: str = Field(...)
    description: str = Field(...)
    date: datetime = Field(...)
    location: str = Field(...)
    slots_available: int = Field(...)
    banner_image: str | None = Field(None)
    tags: list[str] = Field(default_factory=list)
    created_by_id: int = Field(...)
    created_at: datetime = Field(...)
    updated_at: datetime = Field(...)


class EventDetail(EventPublic):
    registration_count: int = Field(...)
    remaining_slots: int = Field(...)


class EventRef(CustomBaseModel):
    id: int
    title: str
    date: datetime

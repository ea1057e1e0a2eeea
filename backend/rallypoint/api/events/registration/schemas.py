from datetime import datetime
from pydantic import Field

from rallypoint.core.response.base_model import CustomBaseModel


class RegistrationResponse(CustomBaseModel):
    id: int = Field(...)
    volunteer_id: int = Field(...)
    event_id: int = Field(...)
    created_at: datetime = Field(...)


class WaitlistEntryResponse(CustomBaseModel):
    id: int = Field(...)
    volunteer_id: int = Field(...)
    event_id: int = Field(...)
    created_at: datetime = Field(...)

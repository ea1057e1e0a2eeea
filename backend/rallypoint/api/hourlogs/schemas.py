from datetime import date, datetime
from pydantic import Field

from rallypoint.api.events.schemas import EventRef
from rallypoint.api.hourlogs.models import HourLogStatus
from rallypoint.api.users.schemas import UserMin
from rallypoint.core.response.base_model import CustomBaseModel


class HourLogCreate(CustomBaseModel):
    hours: float = Field(..., gt=0)
    date_worked: date = Field(...)


class HourLogResponse(CustomBaseModel):
    id: int
    volunteer_id: int
    event_id: int | None = None
    hours: float
    date_worked: date
    status: HourLogStatus
    submitted_at: datetime


class HourLogWithEvent(HourLogResponse):
    event: EventRef | None = None


class PendingHourLog(HourLogWithEvent):
    volunteer: UserMin


class HourLogStatusUpdate(CustomBaseModel):
    status: str = Field(...)

from fastapi import APIRouter, status

from rallypoint.api.hourlogs import service
from rallypoint.api.hourlogs.schemas import HourLogCreate, HourLogResponse
from rallypoint.core.auth.dependencies import DependsAuth
from rallypoint.db.core import SessionDep

router = APIRouter(prefix="/events")


@router.post(
    "/{event_id}/loghours",
    status_code=status.HTTP_201_CREATED,
    summary="Log hours worked at a past event",
)
async def log_hours(
    event_id: int, log: HourLogCreate, user: DependsAuth, session: SessionDep
) -> HourLogResponse:
    return await service.submit_hours(session, user, event_id, log)

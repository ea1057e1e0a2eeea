from typing import List
from fastapi import APIRouter

from rallypoint.api.admin import service
from rallypoint.api.admin.schemas import AdminStats
from rallypoint.api.hourlogs import service as hourlog_service
from rallypoint.api.hourlogs.schemas import (
    HourLogResponse,
    HourLogStatusUpdate,
    PendingHourLog,
)
from rallypoint.core.auth.dependencies import AdminAuth
from rallypoint.db.core import SessionDep

router = APIRouter(prefix="/admin")


@router.get("/stats", summary="Dashboard counters")
async def dashboard_stats(user: AdminAuth, session: SessionDep) -> AdminStats:
    return await service.dashboard_stats(session)


@router.get("/pending-hours", summary="Hour logs waiting for review")
async def pending_hours(user: AdminAuth, session: SessionDep) -> List[PendingHourLog]:
    return await hourlog_service.list_pending_hours(session)


@router.put("/hours/{log_id}/status", summary="Approve or reject an hour log")
async def set_hour_log_status(
    log_id: int, request: HourLogStatusUpdate, user: AdminAuth, session: SessionDep
) -> HourLogResponse:
    return await hourlog_service.set_hour_log_status(session, log_id, request.status)

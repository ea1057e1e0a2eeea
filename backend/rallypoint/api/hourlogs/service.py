import logging
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rallypoint.api.events.models import Events
from rallypoint.api.events.registration.service import ensure_approved
from rallypoint.api.hourlogs.models import HourLogs, HourLogStatus
from rallypoint.api.hourlogs.schemas import HourLogCreate
from rallypoint.api.users.models import Users
from rallypoint.db.mixins import utcnow
from rallypoint.response import CustomHTTPException

logger = logging.getLogger(__name__)

ASSIGNABLE_STATUSES = (HourLogStatus.approved.value, HourLogStatus.rejected.value)


async def submit_hours(
    session: AsyncSession, volunteer: Users, event_id: int, log: HourLogCreate
) -> HourLogs:
    ensure_approved(volunteer, "log hours")
    event = await session.get(Events, event_id)
    if not event:
        raise CustomHTTPException(404, "Event not found")
    if event.date >= utcnow():
        raise CustomHTTPException(
            409, "You can only log hours for past events.", error_code="FUTURE_EVENT"
        )

    hour_log = HourLogs(
        volunteer_id=volunteer.id,
        event_id=event.id,
        hours=log.hours,
        date_worked=log.date_worked,
        status=HourLogStatus.pending,
    )
    session.add(hour_log)
    await session.commit()
    await session.refresh(hour_log)
    logger.info(f"Volunteer {volunteer.id} logged {log.hours}h for event {event.id}")
    return hour_log


async def list_my_hours(session: AsyncSession, volunteer_id: int) -> list[HourLogs]:
    query = (
        select(HourLogs)
        .where(HourLogs.volunteer_id == volunteer_id)
        .options(selectinload(HourLogs.event))
        .order_by(HourLogs.date_worked.desc(), HourLogs.id.desc())
    )
    return list(await session.scalars(query))


async def list_pending_hours(session: AsyncSession) -> list[HourLogs]:
    query = (
        select(HourLogs)
        .where(HourLogs.status == HourLogStatus.pending)
        .options(selectinload(HourLogs.event), selectinload(HourLogs.volunteer))
        .order_by(HourLogs.submitted_at.asc(), HourLogs.id.asc())
    )
    return list(await session.scalars(query))


async def set_hour_log_status(session: AsyncSession, log_id: int, status: str) -> HourLogs:
    if status not in ASSIGNABLE_STATUSES:
        raise CustomHTTPException(400, "Invalid status", error_code="INVALID_STATUS")

    hour_log = await session.get(HourLogs, log_id)
    if not hour_log:
        raise CustomHTTPException(404, "Hour log not found")
    hour_log.status = HourLogStatus(status)
    await session.commit()
    await session.refresh(hour_log)
    return hour_log

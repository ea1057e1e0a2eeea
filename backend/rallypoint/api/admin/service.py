from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rallypoint.api.admin.schemas import AdminStats
from rallypoint.api.events.models import Events
from rallypoint.api.hourlogs.models import HourLogs, HourLogStatus
from rallypoint.api.users.models import UserRoles, Users, UserStatus
from rallypoint.db.mixins import utcnow


async def dashboard_stats(session: AsyncSession) -> AdminStats:
    volunteers = Users.role == UserRoles.volunteer
    total_volunteers = await session.scalar(
        select(func.count(Users.id)).where(volunteers)
    )
    pending_volunteers = await session.scalar(
        select(func.count(Users.id)).where(volunteers, Users.status == UserStatus.pending)
    )
    upcoming_events = await session.scalar(
        select(func.count(Events.id)).where(Events.date >= utcnow())
    )
    total_hours = await session.scalar(
        select(func.coalesce(func.sum(HourLogs.hours), 0)).where(
            HourLogs.status == HourLogStatus.approved
        )
    )
    return AdminStats(
        total_volunteers=total_volunteers,
        pending_volunteers=pending_volunteers,
        upcoming_events=upcoming_events,
        total_hours_logged=float(total_hours or 0),
    )

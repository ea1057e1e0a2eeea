import logging
from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rallypoint.api.events.models import WaitlistEntries
from rallypoint.api.events.registration.service import (
    already_registered_error,
    count_registrations,
    ensure_approved,
    is_registered,
    lock_event,
)
from rallypoint.api.users.models import Users
from rallypoint.response import CustomHTTPException

logger = logging.getLogger(__name__)


def already_waitlisted_error():
    return CustomHTTPException(
        409,
        "You are already on the waitlist for this event",
        error_code="ALREADY_WAITLISTED",
    )


async def is_waitlisted(session: AsyncSession, volunteer_id: int, event_id: int) -> bool:
    return await session.scalar(
        select(
            exists().where(
                WaitlistEntries.volunteer_id == volunteer_id,
                WaitlistEntries.event_id == event_id,
            )
        )
    )


async def join_waitlist(
    session: AsyncSession, volunteer: Users, event_id: int
) -> WaitlistEntries:
    ensure_approved(volunteer, "join a waitlist")
    event = await lock_event(session, event_id)

    if await count_registrations(session, event.id) < event.slots_available:
        raise CustomHTTPException(
            409,
            "Event is not full, you can register directly",
            error_code="EVENT_NOT_FULL",
        )
    if await is_registered(session, volunteer.id, event.id):
        raise already_registered_error()
    if await is_waitlisted(session, volunteer.id, event.id):
        raise already_waitlisted_error()

    entry = WaitlistEntries(volunteer_id=volunteer.id, event_id=event.id)
    session.add(entry)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise already_waitlisted_error()
    await session.refresh(entry)
    logger.info(f"Volunteer {volunteer.id} joined the waitlist of event {event.id}")
    return entry


async def leave_waitlist(session: AsyncSession, volunteer_id: int, event_id: int):
    entry = await session.scalar(
        select(WaitlistEntries).where(
            WaitlistEntries.volunteer_id == volunteer_id,
            WaitlistEntries.event_id == event_id,
        )
    )
    if not entry:
        raise CustomHTTPException(404, "You are not on the waitlist for this event")
    await session.delete(entry)
    await session.commit()


async def waitlisted_event_ids(session: AsyncSession, volunteer_id: int) -> list[int]:
    return list(
        await session.scalars(
            select(WaitlistEntries.event_id)
            .where(WaitlistEntries.volunteer_id == volunteer_id)
            .order_by(WaitlistEntries.created_at.asc())
        )
    )

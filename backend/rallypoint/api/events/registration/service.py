"""Seat management for events.

Capacity is enforced by a single conditional ``INSERT ... SELECT`` that only
produces a row while the event still has a free seat, executed after the event
row has been locked with ``SELECT ... FOR UPDATE`` (a no-op on SQLite, where the
database-level write lock serializes the insert instead). The unique
(volunteer, event) constraint backs up the duplicate check.

Waitlisted volunteers are promoted, oldest entry first, in the same transaction
that frees a seat.
"""

import logging
from sqlalchemy import delete, exists, func, insert, literal, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rallypoint.api.events.models import Events, Registrations, WaitlistEntries
from rallypoint.api.users.models import Users, UserStatus
from rallypoint.core.utils.db_fields import TZAwareDateTime
from rallypoint.db.mixins import utcnow
from rallypoint.response import CustomHTTPException

logger = logging.getLogger(__name__)


def event_full_error():
    return CustomHTTPException(409, "Event is full", error_code="EVENT_FULL")


def already_registered_error():
    return CustomHTTPException(
        409,
        "You are already registered for this event",
        error_code="ALREADY_REGISTERED",
    )


def ensure_approved(volunteer: Users, action: str):
    if volunteer.status != UserStatus.approved:
        raise CustomHTTPException(
            403,
            f"Your account must be approved to {action}.",
            error_code="ACCOUNT_NOT_APPROVED",
        )


async def lock_event(session: AsyncSession, event_id: int) -> Events:
    event = await session.scalar(
        select(Events)
        .where(Events.id == event_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    if not event:
        raise CustomHTTPException(404, "Event not found")
    return event


async def count_registrations(session: AsyncSession, event_id: int) -> int:
    return await session.scalar(
        select(func.count(Registrations.id)).where(Registrations.event_id == event_id)
    )


async def is_registered(session: AsyncSession, volunteer_id: int, event_id: int) -> bool:
    return await session.scalar(
        select(
            exists().where(
                Registrations.volunteer_id == volunteer_id,
                Registrations.event_id == event_id,
            )
        )
    )


def _claim_seat_statement(volunteer_id: int, event_id: int):
    registrations = Registrations.__table__
    capacity = (
        select(Events.slots_available)
        .where(Events.id == event_id)
        .correlate(None)
        .scalar_subquery()
    )
    taken = (
        select(func.count(registrations.c.id))
        .where(registrations.c.event_id == event_id)
        .correlate(None)
        .scalar_subquery()
    )
    now = utcnow()
    return (
        insert(registrations)
        .from_select(
            ["volunteer_id", "event_id", "created_at", "updated_at"],
            select(
                literal(volunteer_id),
                literal(event_id),
                literal(now, TZAwareDateTime()),
                literal(now, TZAwareDateTime()),
            ).where(taken < capacity),
        )
        .returning(registrations.c.id)
    )


async def register(
    session: AsyncSession, volunteer: Users, event_id: int
) -> Registrations:
    ensure_approved(volunteer, "register for events")
    event = await lock_event(session, event_id)

    if await count_registrations(session, event.id) >= event.slots_available:
        raise event_full_error()
    if await is_registered(session, volunteer.id, event.id):
        raise already_registered_error()

    try:
        registration_id = await session.scalar(
            _claim_seat_statement(volunteer.id, event.id)
        )
    except IntegrityError:
        await session.rollback()
        raise already_registered_error()

    if registration_id is None:
        # Another request took the last seat between the check and the insert.
        await session.rollback()
        raise event_full_error()

    await session.execute(
        delete(WaitlistEntries).where(
            WaitlistEntries.volunteer_id == volunteer.id,
            WaitlistEntries.event_id == event.id,
        )
    )
    await session.commit()
    logger.info(f"Volunteer {volunteer.id} registered for event {event.id}")
    return await session.get(Registrations, registration_id)


async def promote_waitlisted(session: AsyncSession, event: Events) -> list[dict]:
    """
    Fill free seats from the waitlist, earliest entry first.

    Only approved volunteers are promoted. Runs inside the caller's transaction
    and returns the email payloads for the promoted volunteers.
    """
    free_seats = event.slots_available - await count_registrations(session, event.id)
    if free_seats <= 0:
        return []

    entries = await session.scalars(
        select(WaitlistEntries)
        .join(Users, Users.id == WaitlistEntries.volunteer_id)
        .where(
            WaitlistEntries.event_id == event.id,
            Users.status == UserStatus.approved,
        )
        .order_by(WaitlistEntries.created_at.asc(), WaitlistEntries.id.asc())
        .limit(free_seats)
        .options(selectinload(WaitlistEntries.volunteer))
    )

    promotions = []
    for entry in entries:
        session.add(Registrations(volunteer_id=entry.volunteer_id, event_id=event.id))
        await session.delete(entry)
        promotions.append(
            {
                "email": entry.volunteer.email,
                "full_name": entry.volunteer.full_name,
                "event_title": event.title,
                "event_date": event.date.strftime("%d %b %Y, %H:%M UTC"),
                "event_location": event.location,
            }
        )
        logger.info(
            f"Promoted volunteer {entry.volunteer_id} from the waitlist "
            f"of event {event.id}"
        )
    await session.flush()
    return promotions


async def unregister(
    session: AsyncSession, volunteer_id: int, event_id: int
) -> list[dict]:
    event = await lock_event(session, event_id)
    registration = await session.scalar(
        select(Registrations).where(
            Registrations.volunteer_id == volunteer_id,
            Registrations.event_id == event.id,
        )
    )
    if not registration:
        raise CustomHTTPException(404, "Registration not found")

    await session.delete(registration)
    await session.flush()
    promotions = await promote_waitlisted(session, event)
    await session.commit()
    logger.info(f"Volunteer {volunteer_id} unregistered from event {event.id}")
    return promotions


async def registered_event_ids(session: AsyncSession, volunteer_id: int) -> list[int]:
    return list(
        await session.scalars(
            select(Registrations.event_id)
            .where(Registrations.volunteer_id == volunteer_id)
            .order_by(Registrations.created_at.asc())
        )
    )

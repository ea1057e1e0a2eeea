import logging
from datetime import datetime, timezone
from fastapi import UploadFile
from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rallypoint.api.events.models import Events, Registrations, WaitlistEntries
from rallypoint.api.events.registration.service import (
    count_registrations,
    lock_event,
    promote_waitlisted,
)
from rallypoint.api.events.schemas import EventCreate, EventDetail, EventUpdate
from rallypoint.api.hourlogs.models import HourLogs
from rallypoint.api.users.models import Users
from rallypoint.core.response.pagination import _PaginationParams
from rallypoint.core.storage.images import upload_image
from rallypoint.db.mixins import utcnow
from rallypoint.response import CustomHTTPException

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "description", "date", "location", "slots_available")


def registration_count_column():
    return (
        select(func.count(Registrations.id))
        .where(Registrations.event_id == Events.id)
        .correlate(Events)
        .scalar_subquery()
    )


def annotate(event: Events, registration_count: int) -> EventDetail:
    """Attach the live registration count and the seats left to an event."""
    values = {c.name: getattr(event, c.name) for c in Events.__table__.columns}
    return EventDetail(
        **values,
        registration_count=registration_count,
        remaining_slots=max(0, event.slots_available - registration_count),
    )


async def create_event(
    session: AsyncSession,
    user_id: int,
    event: EventCreate,
    image: UploadFile | None = None,
) -> EventDetail:
    new_event = Events(**event.model_dump(), created_by_id=user_id)
    if image is not None and image.filename:
        new_event.banner_image = await upload_image(image, "events/banners")
    session.add(new_event)
    await session.commit()
    await session.refresh(new_event)
    logger.info(f"Event {new_event.id} created by user {user_id}")
    return annotate(new_event, 0)


async def list_upcoming_events(
    session: AsyncSession,
    pagination: _PaginationParams,
    location: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
) -> tuple[list[EventDetail], int]:
    """
    Upcoming events in date order.

    ``location`` matches case-insensitively anywhere in the event location.
    ``date_from`` can only narrow the window, never reach into the past.
    """
    start = utcnow()
    if date_from is not None:
        if date_from.tzinfo is None:
            date_from = date_from.replace(tzinfo=timezone.utc)
        start = max(start, date_from)
    filters = [Events.date >= start]
    if date_to is not None:
        filters.append(Events.date <= date_to)
    if location:
        filters.append(Events.location.ilike(f"%{location.strip()}%"))

    total = await session.scalar(select(func.count(Events.id)).where(*filters))
    rows = await session.execute(
        select(Events, registration_count_column())
        .where(*filters)
        .order_by(Events.date.asc(), Events.id.asc())
        .offset(pagination.offset)
        .limit(pagination.limit)
    )
    return [annotate(event, count) for event, count in rows.all()], total


async def get_event(session: AsyncSession, event_id: int) -> Events:
    event = await session.get(Events, event_id)
    if not event:
        raise CustomHTTPException(404, "Event not found")
    return event


async def get_event_detail(session: AsyncSession, event_id: int) -> EventDetail:
    event = await get_event(session, event_id)
    return annotate(event, await count_registrations(session, event.id))


async def update_event(
    session: AsyncSession, event_id: int, changes: EventUpdate
) -> tuple[EventDetail, list[dict]]:
    """
    Apply only the fields present in the request body.

    Growing ``slots_available`` promotes waitlisted volunteers into the new
    seats. Returns the updated event and the promotion email payloads.
    """
    values = changes.model_dump(exclude_unset=True)
    missing = {
        key: "This field may not be null"
        for key in REQUIRED_FIELDS
        if key in values and values[key] is None
    }
    if missing:
        raise CustomHTTPException(
            400, "Invalid event data", error_code="VALIDATION_ERROR", errors=missing
        )
    if "tags" in values and values["tags"] is None:
        values["tags"] = []

    event = await lock_event(session, event_id)
    for key, value in values.items():
        setattr(event, key, value)
    await session.flush()

    promotions = []
    if "slots_available" in values:
        promotions = await promote_waitlisted(session, event)
    await session.commit()
    await session.refresh(event)
    return annotate(event, await count_registrations(session, event.id)), promotions


async def delete_event(session: AsyncSession, event_id: int):
    event = await lock_event(session, event_id)
    await session.execute(
        delete(Registrations).where(Registrations.event_id == event.id)
    )
    await session.execute(
        delete(WaitlistEntries).where(WaitlistEntries.event_id == event.id)
    )
    await session.execute(
        update(HourLogs).where(HourLogs.event_id == event.id).values(event_id=None)
    )
    await session.delete(event)
    await session.commit()
    logger.info(f"Event {event_id} deleted")


async def event_volunteers(session: AsyncSession, event_id: int) -> list[Users]:
    event = await get_event(session, event_id)
    query = (
        select(Users)
        .join(Registrations, Registrations.volunteer_id == Users.id)
        .where(Registrations.event_id == event.id)
        .order_by(Registrations.created_at.asc(), Registrations.id.asc())
    )
    return list(await session.scalars(query))

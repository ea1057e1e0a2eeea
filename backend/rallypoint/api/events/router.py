from datetime import datetime
from typing import List
from fastapi import APIRouter, BackgroundTasks, File, Form, UploadFile, status

from rallypoint.api.auth.schemas import MessageResponse
from rallypoint.api.events import service
from rallypoint.api.events.models import DEFAULT_EVENT_SLOTS
from rallypoint.api.events.registration import service as registration_service
from rallypoint.api.events.registration.router import (
    router as registration_router,
    schedule_promotion_emails,
)
from rallypoint.api.events.schemas import EventCreate, EventDetail, EventUpdate
from rallypoint.api.events.waitlist import service as waitlist_service
from rallypoint.api.events.waitlist.router import router as waitlist_router
from rallypoint.api.users.schemas import VolunteerSummary
from rallypoint.api.users.service import normalize_tags
from rallypoint.core.auth.dependencies import AdminAuth, DependsAuth
from rallypoint.core.response.pagination import (
    PaginatedResponse,
    PaginationParams,
    paginated_response,
)
from rallypoint.db.core import SessionDep

router = APIRouter(prefix="/events")


@router.get("", summary="List upcoming events")
async def list_events(
    session: SessionDep,
    pagination: PaginationParams,
    location: str | None = None,
    date_from: datetime | None = None,
    date_to: datetime | None = None,
) -> PaginatedResponse[EventDetail]:
    events, total = await service.list_upcoming_events(
        session, pagination, location=location, date_from=date_from, date_to=date_to
    )
    return paginated_response(events, total, pagination, EventDetail)


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create a new event")
async def create_event(
    user: AdminAuth,
    session: SessionDep,
    title: str = Form(..., min_length=1, max_length=200),
    description: str = Form(..., min_length=1),
    date: datetime = Form(...),
    location: str = Form(..., min_length=1, max_length=255),
    slots_available: int = Form(DEFAULT_EVENT_SLOTS, ge=0),
    tags: List[str] | None = Form(None),
    banner_image: str | None = Form(None),
    image: UploadFile | None = File(None),
) -> EventDetail:
    event = EventCreate(
        title=title,
        description=description,
        date=date,
        location=location,
        slots_available=slots_available,
        tags=normalize_tags(tags),
        banner_image=banner_image,
    )
    return await service.create_event(session, user.id, event, image=image)


@router.get("/my-registrations", summary="Ids of events I am registered for")
async def my_registrations(user: DependsAuth, session: SessionDep) -> List[int]:
    return await registration_service.registered_event_ids(session, user.id)


@router.get("/my-waitlist", summary="Ids of events I am waitlisted for")
async def my_waitlist(user: DependsAuth, session: SessionDep) -> List[int]:
    return await waitlist_service.waitlisted_event_ids(session, user.id)


@router.get("/{event_id}", summary="Get event details")
async def get_event(event_id: int, session: SessionDep) -> EventDetail:
    return await service.get_event_detail(session, event_id)


@router.put("/{event_id}", summary="Update an event")
async def update_event(
    event_id: int,
    changes: EventUpdate,
    user: AdminAuth,
    session: SessionDep,
    background_tasks: BackgroundTasks,
) -> EventDetail:
    event, promotions = await service.update_event(session, event_id, changes)
    schedule_promotion_emails(background_tasks, promotions)
    return event


@router.delete("/{event_id}", summary="Delete an event")
async def delete_event(
    event_id: int, user: AdminAuth, session: SessionDep
) -> MessageResponse:
    await service.delete_event(session, event_id)
    return MessageResponse(message="Event removed")


@router.get("/{event_id}/volunteers", summary="Volunteers registered for an event")
async def event_volunteers(
    event_id: int, user: AdminAuth, session: SessionDep
) -> List[VolunteerSummary]:
    return await service.event_volunteers(session, event_id)


router.include_router(registration_router, tags=["registration"])
router.include_router(waitlist_router, tags=["waitlist"])

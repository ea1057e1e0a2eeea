from fastapi import APIRouter, BackgroundTasks, status

from rallypoint.api.auth.schemas import MessageResponse
from rallypoint.api.events.registration import service
from rallypoint.api.events.registration.background_tasks import send_promotion_emails
from rallypoint.api.events.registration.schemas import RegistrationResponse
from rallypoint.core.auth.dependencies import AdminAuth, DependsAuth
from rallypoint.db.core import SessionDep

router = APIRouter()


def schedule_promotion_emails(background_tasks: BackgroundTasks, promotions: list):
    if promotions:
        background_tasks.add_task(send_promotion_emails, promotions)


@router.post(
    "/{event_id}/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register for an event",
)
async def register_for_event(
    event_id: int, user: DependsAuth, session: SessionDep
) -> RegistrationResponse:
    return await service.register(session, user, event_id)


@router.delete("/{event_id}/unregister", summary="Cancel my registration")
async def unregister_from_event(
    event_id: int,
    user: DependsAuth,
    session: SessionDep,
    background_tasks: BackgroundTasks,
) -> MessageResponse:
    promotions = await service.unregister(session, user.id, event_id)
    schedule_promotion_emails(background_tasks, promotions)
    return MessageResponse(message="Successfully unregistered from event")


@router.delete(
    "/{event_id}/volunteers/{volunteer_id}",
    summary="Remove a volunteer from an event",
)
async def remove_volunteer(
    event_id: int,
    volunteer_id: int,
    user: AdminAuth,
    session: SessionDep,
    background_tasks: BackgroundTasks,
) -> MessageResponse:
    promotions = await service.unregister(session, volunteer_id, event_id)
    schedule_promotion_emails(background_tasks, promotions)
    return MessageResponse(message="Volunteer removed from event")

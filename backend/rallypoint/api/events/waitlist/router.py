from fastapi import APIRouter, status

from rallypoint.api.auth.schemas import MessageResponse
from rallypoint.api.events.registration.schemas import WaitlistEntryResponse
from rallypoint.api.events.waitlist import service
from rallypoint.core.auth.dependencies import DependsAuth
from rallypoint.db.core import SessionDep

router = APIRouter()


@router.post(
    "/{event_id}/waitlist",
    status_code=status.HTTP_201_CREATED,
    summary="Join the waitlist of a full event",
)
async def join_waitlist(
    event_id: int, user: DependsAuth, session: SessionDep
) -> WaitlistEntryResponse:
    return await service.join_waitlist(session, user, event_id)


@router.delete("/{event_id}/waitlist", summary="Leave the waitlist of an event")
async def leave_waitlist(
    event_id: int, user: DependsAuth, session: SessionDep
) -> MessageResponse:
    await service.leave_waitlist(session, user.id, event_id)
    return MessageResponse(message="Removed from waitlist")

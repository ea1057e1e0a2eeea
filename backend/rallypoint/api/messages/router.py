from typing import List
from fastapi import APIRouter, status

from rallypoint.api.messages import service
from rallypoint.api.messages.schemas import (
    MessageCreate,
    MessageReply,
    MessageResponse,
    MessageWithSender,
)
from rallypoint.core.auth.dependencies import AdminAuth, DependsAuth
from rallypoint.db.core import SessionDep

router = APIRouter(prefix="/messages")


@router.post(
    "", status_code=status.HTTP_201_CREATED, summary="Send a message to the admins"
)
async def create_message(
    user: DependsAuth, message: MessageCreate, session: SessionDep
) -> MessageResponse:
    return await service.create_message(session, user.id, message)


@router.get("", summary="List all support messages")
async def list_messages(user: AdminAuth, session: SessionDep) -> List[MessageWithSender]:
    return await service.list_messages(session)


@router.get("/my", summary="List my support messages")
async def list_my_messages(user: DependsAuth, session: SessionDep) -> List[MessageResponse]:
    return await service.list_my_messages(session, user.id)


@router.put("/{message_id}/read", summary="Mark a message as read")
async def mark_read(message_id: int, user: AdminAuth, session: SessionDep) -> MessageResponse:
    return await service.mark_read(session, message_id)


@router.put("/{message_id}/reply", summary="Reply to a message")
async def reply_to_message(
    message_id: int, reply: MessageReply, user: AdminAuth, session: SessionDep
) -> MessageResponse:
    return await service.reply_to_message(session, message_id, reply.reply_text)

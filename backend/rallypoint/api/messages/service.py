from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rallypoint.api.messages.models import MessageStatus, SupportMessages
from rallypoint.api.messages.schemas import MessageCreate
from rallypoint.db.mixins import utcnow
from rallypoint.response import CustomHTTPException


async def create_message(
    session: AsyncSession, user_id: int, message: MessageCreate
) -> SupportMessages:
    new_message = SupportMessages(
        user_id=user_id,
        subject=message.subject.strip(),
        body=message.body,
        status=MessageStatus.unread,
    )
    session.add(new_message)
    await session.commit()
    await session.refresh(new_message)
    return new_message


async def list_messages(session: AsyncSession) -> list[SupportMessages]:
    query = (
        select(SupportMessages)
        .options(selectinload(SupportMessages.user))
        .order_by(SupportMessages.created_at.desc(), SupportMessages.id.desc())
    )
    return list(await session.scalars(query))


async def list_my_messages(session: AsyncSession, user_id: int) -> list[SupportMessages]:
    query = (
        select(SupportMessages)
        .where(SupportMessages.user_id == user_id)
        .order_by(SupportMessages.created_at.desc(), SupportMessages.id.desc())
    )
    return list(await session.scalars(query))


async def get_message(session: AsyncSession, message_id: int) -> SupportMessages:
    message = await session.get(SupportMessages, message_id)
    if not message:
        raise CustomHTTPException(404, "Message not found")
    return message


async def mark_read(session: AsyncSession, message_id: int) -> SupportMessages:
    message = await get_message(session, message_id)
    message.status = MessageStatus.read
    await session.commit()
    await session.refresh(message)
    return message


async def reply_to_message(
    session: AsyncSession, message_id: int, reply_text: str
) -> SupportMessages:
    message = await get_message(session, message_id)
    message.admin_reply = reply_text
    message.replied_at = utcnow()
    message.status = MessageStatus.replied
    await session.commit()
    await session.refresh(message)
    return message

from datetime import datetime
from pydantic import Field

from rallypoint.api.messages.models import MessageStatus
from rallypoint.api.users.schemas import UserMin
from rallypoint.core.response.base_model import CustomBaseModel


class MessageCreate(CustomBaseModel):
    subject: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1)


class MessageReply(CustomBaseModel):
    reply_text: str = Field(..., min_length=1)


class MessageResponse(CustomBaseModel):
    id: int
    user_id: int
    subject: str
    body: str
    status: MessageStatus
    admin_reply: str | None = None
    replied_at: datetime | None = None
    created_at: datetime


class MessageWithSender(MessageResponse):
    user: UserMin

import enum
from sqlalchemy import Column, Enum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from rallypoint.db.base import AbstractSQLModel
from rallypoint.db.mixins import TimestampsMixin
from rallypoint.core.utils.db_fields import TZAwareDateTime


class MessageStatus(str, enum.Enum):
    unread = "unread"
    read = "read"
    replied = "replied"


class SupportMessages(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "support_messages"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    subject = Column(String(200), nullable=False)
    body = Column(Text, nullable=False)
    status = Column(Enum(MessageStatus), nullable=False, default=MessageStatus.unread)
    admin_reply = Column(Text, nullable=True)
    replied_at = Column(TZAwareDateTime(timezone=True), nullable=True)

    user = relationship("Users", back_populates="messages")

import enum
from sqlalchemy import Column, Date, Enum, Float, ForeignKey, Integer
from sqlalchemy.orm import relationship

from rallypoint.db.base import AbstractSQLModel
from rallypoint.db.mixins import TimestampsMixin, utcnow
from rallypoint.core.utils.db_fields import TZAwareDateTime


class HourLogStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class HourLogs(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "hour_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    volunteer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # Cleared when the event is deleted so approved hours still count.
    event_id = Column(Integer, ForeignKey("events.id"), nullable=True)
    hours = Column(Float, nullable=False)
    date_worked = Column(Date, nullable=False)
    status = Column(
        Enum(HourLogStatus), nullable=False, default=HourLogStatus.pending, index=True
    )
    submitted_at = Column(TZAwareDateTime(timezone=True), nullable=False, default=utcnow)

    volunteer = relationship("Users")
    event = relationship("Events")

from sqlalchemy import (
    JSON,
    Column,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from rallypoint.db.base import AbstractSQLModel
from rallypoint.db.mixins import TimestampsMixin
from rallypoint.core.utils.db_fields import TZAwareDateTime

DEFAULT_EVENT_SLOTS = 10


class Events(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=False)
    date = Column(TZAwareDateTime(timezone=True), nullable=False, index=True)
    location = Column(String(255), nullable=False)
    slots_available = Column(Integer, nullable=False, default=DEFAULT_EVENT_SLOTS)
    banner_image = Column(String, nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    created_by = relationship("Users")
    registrations = relationship("Registrations", back_populates="event")
    waitlist = relationship("WaitlistEntries", back_populates="event")


class Registrations(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "registrations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    volunteer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)

    volunteer = relationship("Users", back_populates="registrations")
    event = relationship("Events", back_populates="registrations")

    __table_args__ = (UniqueConstraint("volunteer_id", "event_id"),)


class WaitlistEntries(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "waitlist_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    volunteer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)

    volunteer = relationship("Users")
    event = relationship("Events", back_populates="waitlist")

    __table_args__ = (UniqueConstraint("volunteer_id", "event_id"),)

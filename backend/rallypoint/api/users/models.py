import enum
from sqlalchemy import (
    JSON,
    Column,
    Enum,
    Integer,
    String,
)
from sqlalchemy.orm import relationship

from rallypoint.db.base import AbstractSQLModel
from rallypoint.db.mixins import TimestampsMixin
from rallypoint.core.utils.db_fields import TZAwareDateTime


class UserRoles(str, enum.Enum):
    volunteer = "volunteer"
    admin = "admin"


class UserStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class Users(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(100), nullable=False)
    role = Column(Enum(UserRoles), nullable=False, default=UserRoles.volunteer)
    status = Column(Enum(UserStatus), nullable=False, default=UserStatus.pending)
    skills = Column(JSON, nullable=False, default=list)
    availability = Column(JSON, nullable=False, default=list)
    profile_picture = Column(String, nullable=True)

    password_reset_token = Column(String(64), nullable=True, index=True)
    password_reset_expires = Column(TZAwareDateTime(timezone=True), nullable=True)

    registrations = relationship("Registrations", back_populates="volunteer")
    messages = relationship("SupportMessages", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRoles.admin

    @property
    def is_approved(self) -> bool:
        return self.status == UserStatus.approved

    def __repr__(self):
        return f"<Users {self.email}>"

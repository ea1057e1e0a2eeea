from datetime import datetime
from pydantic import EmailStr, Field

from rallypoint.api.auth.schemas import Token
from rallypoint.api.users.models import UserRoles, UserStatus
from rallypoint.core.response.base_model import CustomBaseModel


class UserCreate(CustomBaseModel):
    full_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr = Field(...)
    password: str = Field(..., min_length=6)


class UserPublic(CustomBaseModel):
    id: int = Field(...)
    full_name: str = Field(...)
    email: str = Field(...)
    role: UserRoles = Field(...)
    status: UserStatus = Field(...)
    skills: list[str] = Field(default_factory=list)
    availability: list[str] = Field(default_factory=list)
    profile_picture: str | None = Field(None)
    created_at: datetime = Field(...)


class UserRegisterResponse(UserPublic):
    token: Token


class UserMin(CustomBaseModel):
    id: int
    full_name: str
    email: str


class VolunteerSummary(UserMin):
    skills: list[str] = Field(default_factory=list)


class UserStatusUpdate(CustomBaseModel):
    # Kept as a plain string so an unknown value is a 400, not a schema error.
    status: str = Field(...)

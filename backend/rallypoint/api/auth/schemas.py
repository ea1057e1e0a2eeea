from pydantic import EmailStr, Field
from rallypoint.core.response.base_model import CustomBaseModel
from rallypoint.api.users.models import UserRoles, UserStatus


class Token(CustomBaseModel):
    token_type: str
    access_token: str
    refresh_token: str


class AuthTokenData(CustomBaseModel):
    user_id: int
    token_type: str


class AuthUser(CustomBaseModel):
    id: int
    full_name: str
    email: str
    role: UserRoles
    status: UserStatus


class LoginRequest(CustomBaseModel):
    email: EmailStr = Field(...)
    password: str = Field(..., min_length=1)


class LoginResponse(AuthUser):
    profile_picture: str | None = None
    token: Token


class RefreshRequest(CustomBaseModel):
    refresh_token: str = Field(...)


class ForgotPasswordRequest(CustomBaseModel):
    email: EmailStr = Field(...)


class ResetPasswordRequest(CustomBaseModel):
    password: str = Field(..., min_length=6)


class MessageResponse(CustomBaseModel):
    message: str

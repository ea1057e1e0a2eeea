from datetime import datetime, timedelta, timezone
import logging
from fastapi import BackgroundTasks, status
import jwt
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rallypoint.api.auth.background_tasks import send_password_reset_email
from rallypoint.api.auth.schemas import AuthTokenData, Token
from rallypoint.api.users.models import Users, UserStatus
from rallypoint.config import settings
from rallypoint.core.auth.authentication import (
    authenticate_user,
    get_password_hash,
    get_user,
)
from rallypoint.core.auth.jwt import create_access_token, decode_jwt_token
from rallypoint.core.utils.keys import generate_reset_token, hash_token
from rallypoint.response import CustomHTTPException

logger = logging.getLogger(__name__)

ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES
REFRESH_TOKEN_EXPIRE_DAYS = settings.REFRESH_TOKEN_EXPIRE_DAYS


async def create_access_refresh_tokens(user: Users) -> Token:
    access_token_expires = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    refresh_token_expires = timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS)
    access_token_data = AuthTokenData(user_id=user.id, token_type="access_token")
    refresh_token_data = AuthTokenData(user_id=user.id, token_type="refresh_token")
    access_token = create_access_token(
        data=access_token_data.model_dump(), expires_delta=access_token_expires
    )
    refresh_token = create_access_token(
        data=refresh_token_data.model_dump(), expires_delta=refresh_token_expires
    )
    return Token(
        access_token=access_token, refresh_token=refresh_token, token_type="Bearer"
    )


async def login_payload(user: Users) -> dict:
    return {
        "id": user.id,
        "full_name": user.full_name,
        "email": user.email,
        "role": user.role,
        "status": user.status,
        "profile_picture": user.profile_picture,
        "token": await create_access_refresh_tokens(user),
    }


async def login(session: AsyncSession, email: str, password: str) -> dict:
    user = await authenticate_user(session, email, password)
    if not user:
        raise CustomHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message="Invalid email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if user.status == UserStatus.pending:
        raise CustomHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message="Your account is pending approval.",
            error_code="ACCOUNT_PENDING",
        )
    if user.status == UserStatus.rejected:
        raise CustomHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message="Your account application has been rejected.",
            error_code="ACCOUNT_REJECTED",
        )
    return await login_payload(user)


async def forgot_password(
    session: AsyncSession, email: str, background_tasks: BackgroundTasks
) -> None:
    user = await get_user(session, email)
    if not user:
        logger.info("Password reset requested for unknown email %s", email)
        return None

    token, hashed_token = generate_reset_token()
    user.password_reset_token = hashed_token
    user.password_reset_expires = datetime.now(timezone.utc) + timedelta(
        minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES
    )
    await session.commit()

    background_tasks.add_task(
        send_password_reset_email,
        recipient=user.email,
        full_name=user.full_name,
        reset_url=f"{settings.FRONTEND_URL.rstrip('/')}/resetpassword/{token}",
    )
    return None


async def reset_password(session: AsyncSession, token: str, password: str) -> Users:
    user = await session.scalar(
        select(Users).where(
            Users.password_reset_token == hash_token(token),
            Users.password_reset_expires > datetime.now(timezone.utc),
        )
    )
    if not user:
        raise CustomHTTPException(
            400,
            message="Token is invalid or has expired",
            error_code="INVALID_RESET_TOKEN",
        )
    user.password = get_password_hash(password)
    user.password_reset_token = None
    user.password_reset_expires = None
    await session.commit()
    return user


async def refresh_access_token(session: AsyncSession, refresh_token: str) -> Token:
    credentials_exception = CustomHTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        message="Invalid refresh token",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = AuthTokenData(**decode_jwt_token(refresh_token))
    except jwt.ExpiredSignatureError:
        raise CustomHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message="Refresh token has expired",
            error_code="TOKEN_EXPIRED",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except (jwt.InvalidTokenError, ValidationError):
        raise credentials_exception
    if payload.token_type != "refresh_token":
        raise credentials_exception

    user = await get_user(session, payload.user_id)
    if not user:
        raise credentials_exception

    access_token_data = AuthTokenData(user_id=user.id, token_type="access_token")
    access_token = create_access_token(
        data=access_token_data.model_dump(),
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    return Token(
        access_token=access_token, refresh_token=refresh_token, token_type="Bearer"
    )

from passlib.context import CryptContext
from fastapi.security import HTTPBearer
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from rallypoint.api.users.models import Users
from rallypoint.config import settings

ALGORITHM = "HS256"


pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.BCRYPT_ROUNDS
)

bearer_scheme = HTTPBearer(auto_error=False)


def verify_password(plain_password, hashed_password):
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password):
    return pwd_context.hash(password)


async def get_user(session: AsyncSession, email_or_id: int | str):
    query = select(Users)
    if isinstance(email_or_id, int):
        query = query.where(Users.id == email_or_id)
    else:
        query = query.where(func.lower(Users.email) == email_or_id.lower())
    return await session.scalar(query)


async def authenticate_user(session: AsyncSession, email: str, password: str):
    user = await get_user(session, email)
    if not user:
        return False
    if not verify_password(password, user.password):
        return False
    return user

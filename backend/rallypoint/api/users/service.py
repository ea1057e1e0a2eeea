from typing import Iterable
from fastapi import BackgroundTasks, UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rallypoint.response import CustomHTTPException
from rallypoint.api.users.models import UserRoles, UserStatus, Users
from rallypoint.api.users.background_tasks import send_welcome_email
from rallypoint.api.events.models import Events, Registrations
from rallypoint.core.auth.authentication import get_password_hash, verify_password
from rallypoint.core.storage.images import upload_image
from rallypoint.core.validations.schema import validate_unique

ASSIGNABLE_STATUSES = (UserStatus.approved.value, UserStatus.rejected.value)


def normalize_tags(values: Iterable[str] | None) -> list[str]:
    """Split comma separated entries, trim them and drop duplicates in order."""
    result = []
    for value in values or []:
        for item in value.split(","):
            item = item.strip()
            if item and item not in result:
                result.append(item)
    return result


async def create_user(
    session: AsyncSession,
    full_name: str,
    email: str,
    password: str,
    role: UserRoles = UserRoles.volunteer,
    status: UserStatus = UserStatus.pending,
    background_tasks: BackgroundTasks | None = None,
) -> Users:
    await validate_unique(
        session, {"email": (Users, email)}, message="User already exists"
    )
    user = Users(
        full_name=full_name.strip(),
        email=email.lower(),
        password=get_password_hash(password),
        role=role,
        status=status,
        skills=[],
        availability=[],
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)

    if background_tasks is not None:
        background_tasks.add_task(
            send_welcome_email, recipient=user.email, full_name=user.full_name
        )
    return user


async def update_profile(
    session: AsyncSession,
    user: Users,
    full_name: str | None = None,
    email: str | None = None,
    skills: list[str] | None = None,
    availability: list[str] | None = None,
    current_password: str | None = None,
    new_password: str | None = None,
    image: UploadFile | None = None,
) -> Users:
    """Apply only the profile fields that were supplied."""
    if new_password:
        if not current_password:
            raise CustomHTTPException(
                400, "Please provide your current password to make changes."
            )
        if not verify_password(current_password, user.password):
            raise CustomHTTPException(401, "Incorrect current password.")
        user.password = get_password_hash(new_password)

    if email and email.lower() != user.email:
        await validate_unique(
            session,
            {"email": (Users, email)},
            message="Email is already in use",
            exclude_id=user.id,
        )
        user.email = email.lower()

    if full_name:
        user.full_name = full_name.strip()
    if skills is not None:
        user.skills = normalize_tags(skills)
    if availability is not None:
        user.availability = normalize_tags(availability)
    if image is not None and image.filename:
        user.profile_picture = await upload_image(image, "users/profile_pictures")

    await session.commit()
    await session.refresh(user)
    return user


async def list_volunteers(
    session: AsyncSession, status: UserStatus | None = None
) -> list[Users]:
    query = select(Users).where(Users.role == UserRoles.volunteer)
    if status is not None:
        query = query.where(Users.status == status)
    query = query.order_by(Users.created_at.desc(), Users.id.desc())
    return list(await session.scalars(query))


async def update_user_status(session: AsyncSession, user_id: int, status: str) -> Users:
    if status not in ASSIGNABLE_STATUSES:
        raise CustomHTTPException(400, "Invalid status", error_code="INVALID_STATUS")

    user = await session.get(Users, user_id)
    if not user:
        raise CustomHTTPException(404, "User not found")
    user.status = UserStatus(status)
    await session.commit()
    return user


async def registered_events(session: AsyncSession, user_id: int) -> list[Events]:
    query = (
        select(Events)
        .join(Registrations, Registrations.event_id == Events.id)
        .where(Registrations.volunteer_id == user_id)
        .order_by(Events.date.asc())
    )
    return list(await session.scalars(query))

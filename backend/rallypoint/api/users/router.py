from typing import List
from fastapi import APIRouter, BackgroundTasks, File, Form, UploadFile, status
from pydantic import EmailStr

from rallypoint.api.auth import service as auth_service
from rallypoint.api.events.schemas import EventPublic
from rallypoint.api.hourlogs import service as hourlog_service
from rallypoint.api.hourlogs.schemas import HourLogWithEvent
from rallypoint.api.users import service
from rallypoint.api.users.models import UserStatus
from rallypoint.api.users.schemas import (
    UserCreate,
    UserPublic,
    UserRegisterResponse,
    UserStatusUpdate,
)
from rallypoint.core.auth.dependencies import AdminAuth, DependsAuth
from rallypoint.db.core import SessionDep

router = APIRouter(prefix="/users")


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    summary="Register a new volunteer",
)
async def register_user(
    user: UserCreate, session: SessionDep, background_tasks: BackgroundTasks
) -> UserRegisterResponse:
    new_user = await service.create_user(
        session,
        full_name=user.full_name,
        email=user.email,
        password=user.password,
        background_tasks=background_tasks,
    )
    return UserRegisterResponse(
        **UserPublic.model_validate(new_user).model_dump(),
        token=await auth_service.create_access_refresh_tokens(new_user),
    )


@router.get("/profile", summary="Get my profile")
async def get_profile(user: DependsAuth) -> UserPublic:
    return user


@router.put("/profile", summary="Update my profile")
async def update_profile(
    user: DependsAuth,
    session: SessionDep,
    full_name: str | None = Form(None),
    email: EmailStr | None = Form(None),
    skills: List[str] | None = Form(None),
    availability: List[str] | None = Form(None),
    current_password: str | None = Form(None),
    new_password: str | None = Form(None),
    image: UploadFile | None = File(None),
) -> UserPublic:
    return await service.update_profile(
        session,
        user,
        full_name=full_name,
        email=email,
        skills=skills,
        availability=availability,
        current_password=current_password,
        new_password=new_password,
        image=image,
    )


@router.get("", summary="List volunteers")
async def list_volunteers(
    user: AdminAuth, session: SessionDep, status: UserStatus | None = None
) -> List[UserPublic]:
    return await service.list_volunteers(session, status=status)


@router.get("/my-events", summary="Events I am registered for")
async def my_events(user: DependsAuth, session: SessionDep) -> List[EventPublic]:
    return await service.registered_events(session, user.id)


@router.get("/my-hours", summary="My logged hours")
async def my_hours(user: DependsAuth, session: SessionDep) -> List[HourLogWithEvent]:
    return await hourlog_service.list_my_hours(session, user.id)


@router.put("/{user_id}/status", summary="Approve or reject a volunteer")
async def update_user_status(
    user_id: int, request: UserStatusUpdate, user: AdminAuth, session: SessionDep
) -> UserPublic:
    return await service.update_user_status(session, user_id, request.status)

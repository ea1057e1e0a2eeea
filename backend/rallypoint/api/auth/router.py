from fastapi import APIRouter, BackgroundTasks

from rallypoint.api.auth import service
from rallypoint.api.auth.schemas import (
    AuthUser,
    ForgotPasswordRequest,
    LoginRequest,
    LoginResponse,
    MessageResponse,
    RefreshRequest,
    ResetPasswordRequest,
    Token,
)
from rallypoint.core.auth.dependencies import DependsAuth
from rallypoint.db.core import SessionDep

router = APIRouter(prefix="/auth")


@router.post("/login", summary="Log in with email and password")
async def login(request: LoginRequest, session: SessionDep) -> LoginResponse:
    return await service.login(session, request.email, request.password)


@router.post("/refresh", summary="Refresh access token")
async def refresh_access_token(request: RefreshRequest, session: SessionDep) -> Token:
    return await service.refresh_access_token(session, request.refresh_token)


@router.get("/me", summary="Get the logged in user")
async def me(user: DependsAuth) -> AuthUser:
    return user


@router.post("/forgotpassword", summary="Request a password reset email")
async def forgot_password(
    request: ForgotPasswordRequest,
    session: SessionDep,
    background_tasks: BackgroundTasks,
) -> MessageResponse:
    await service.forgot_password(session, request.email, background_tasks)
    return MessageResponse(
        message="If an account exists for that email, a reset link has been sent."
    )


@router.put("/resetpassword/{token}", summary="Reset password with an emailed token")
async def reset_password(
    token: str, request: ResetPasswordRequest, session: SessionDep
) -> LoginResponse:
    user = await service.reset_password(session, token, request.password)
    return await service.login_payload(user)

from typing import Annotated, List, Optional, Union
from fastapi import Depends, status
from fastapi.security import HTTPAuthorizationCredentials
from jwt.exceptions import InvalidTokenError, ExpiredSignatureError
from pydantic import ValidationError

from rallypoint.core.auth.authentication import get_user, bearer_scheme
from rallypoint.api.users.models import Users
from rallypoint.response import CustomHTTPException
from rallypoint.api.auth.schemas import AuthTokenData
from rallypoint.core.auth.jwt import decode_jwt_token
from rallypoint.db.core import SessionDep


async def get_current_user(
    credentials: Annotated[
        Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)
    ],
    session: SessionDep,
):
    if not credentials or not credentials.credentials:
        return None
    credentials_exception = CustomHTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        message="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_jwt_token(credentials.credentials)
        token_data = AuthTokenData(**payload)
    except ExpiredSignatureError:
        raise CustomHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            message="Token has expired",
            error_code="TOKEN_EXPIRED",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except (InvalidTokenError, ValidationError):
        raise credentials_exception
    if token_data.token_type != "access_token":
        raise credentials_exception
    user = await get_user(session, token_data.user_id)
    if user is None:
        raise credentials_exception
    return user


def check_user_role(required_roles: Union[str, List[str]]):
    """
    Creates a dependency that checks if the current user has the required role(s).

    Args:
        required_roles: Single role string or list of role strings that are allowed

    Returns:
        Dependency function that validates user roles
    """
    if isinstance(required_roles, str):
        required_roles = [required_roles]

    async def role_checker(
        current_user: Annotated[Optional[Users], Depends(get_current_user)],
    ) -> Users:
        if not current_user:
            raise CustomHTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                message="Not authorized, no token",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if current_user.role.value not in required_roles:
            raise CustomHTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                message="Not authorized as an admin",
                error_code="INSUFFICIENT_PERMISSIONS",
            )
        return current_user

    return role_checker


DependsAuth = Annotated[Users, Depends(check_user_role(["volunteer", "admin"]))]
AdminAuth = Annotated[Users, Depends(check_user_role(["admin"]))]
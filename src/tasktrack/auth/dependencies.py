"""FastAPI auth dependencies.

Used as Depends() in route handlers (or at router level) to turn the
session cookie into the identity making the request:

    no cookie            → UnauthenticatedError (401)
    bad / expired token  → InvalidTokenError    (401)
    user no longer exists→ UserNotFoundError    (404)
    otherwise            → CurrentUser, also stored on request.state.user

/auth/me uses get_session_user, which reports a missing cookie as
NotLoggedInError instead.

Nothing else about the request is touched and the token is never renewed.
"""

import uuid
from dataclasses import dataclass

import structlog
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrack.auth.tokens import TokenError, verify_session_token
from tasktrack.config import Settings
from tasktrack.db.engine import get_db
from tasktrack.errors import (
    InvalidTokenError,
    NotLoggedInError,
    UnauthenticatedError,
    UserNotFoundError,
)
from tasktrack.services.task_service import TaskRepository
from tasktrack.services.user_service import UserService

logger = structlog.get_logger()


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated identity. All task access is scoped by `id`."""
    id: uuid.UUID
    email: str


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with."""
    return request.app.state.settings


def get_user_service(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
) -> UserService:
    return UserService(db, bcrypt_rounds=settings.bcrypt_rounds)


async def get_current_user(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    users: UserService = Depends(get_user_service),
) -> CurrentUser:
    """Resolve the session cookie to a CurrentUser or fail the request."""
    token = request.cookies.get(settings.session_cookie_name)
    if not token:
        raise UnauthenticatedError()

    try:
        claims = verify_session_token(token, settings)
    except TokenError:
        logger.info("auth.invalid_token", path=request.url.path)
        raise InvalidTokenError()

    user = await users.get(claims.user_id)
    if not user:
        logger.info("auth.user_missing", user_id=str(claims.user_id))
        raise UserNotFoundError()

    identity = CurrentUser(id=user.id, email=user.email)
    request.state.user = identity
    return identity


async def get_session_user(
    request: Request,
    settings: Settings = Depends(get_app_settings),
    users: UserService = Depends(get_user_service),
) -> CurrentUser:
    """get_current_user for /auth/me, where a missing cookie is "not logged in"."""
    if not request.cookies.get(settings.session_cookie_name):
        raise NotLoggedInError()
    return await get_current_user(request, settings, users)


def get_task_repository(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
) -> TaskRepository:
    """A repository that can only see the current user's tasks."""
    return TaskRepository(db, owner_id=user.id)

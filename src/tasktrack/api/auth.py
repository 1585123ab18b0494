"""Auth API — registration, login, current user, logout.

- POST /auth/register → create an account, set the session cookie
- POST /auth/login    → check credentials, set the session cookie
- GET  /auth/me       → the user behind the session cookie
- POST /auth/logout   → clear the session cookie

Logout only clears the cookie in the browser. Tokens are not stored
server side, so a copied token stays valid until it expires.
"""

from fastapi import APIRouter, Depends, Response

from tasktrack.auth.cookies import clear_session_cookie, set_session_cookie
from tasktrack.auth.dependencies import (
    CurrentUser,
    get_app_settings,
    get_session_user,
    get_user_service,
)
from tasktrack.auth.tokens import create_session_token
from tasktrack.config import Settings
from tasktrack.messages import translate
from tasktrack.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    RegisterRequest,
    RegisterResponse,
)
from tasktrack.schemas.base import MessageResponse
from tasktrack.services.user_service import UserService

router = APIRouter(prefix="/auth")


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(
    body: RegisterRequest,
    response: Response,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_app_settings),
):
    """Create a new account and log it in."""
    user = await users.register(body.email, body.password)
    set_session_cookie(response, create_session_token(user.id, settings), settings)
    return {
        "message": translate("auth.registered", settings.locale),
        "user": user,
    }


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    response: Response,
    users: UserService = Depends(get_user_service),
    settings: Settings = Depends(get_app_settings),
):
    """Login with email and password → session cookie."""
    user = await users.verify(body.email, body.password)
    set_session_cookie(response, create_session_token(user.id, settings), settings)
    return {"user": user}


@router.get("/me", response_model=MeResponse)
async def get_me(user: CurrentUser = Depends(get_session_user)):
    """The authenticated user's id and email."""
    return {"user": {"id": user.id, "email": user.email}}


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    settings: Settings = Depends(get_app_settings),
):
    clear_session_cookie(response, settings)
    return {"message": translate("auth.logged_out", settings.locale)}

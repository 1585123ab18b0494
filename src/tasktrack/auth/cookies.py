"""Session cookie helpers.

The cookie is HttpOnly (not readable from page scripts), SameSite=Lax,
scoped to the whole site, and marked Secure in production. Its lifetime
matches the token it carries.
"""

from fastapi import Response

from tasktrack.config import Settings


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_ttl_hours * 3600,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    """Overwrite the cookie with an already-expired empty one."""
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )

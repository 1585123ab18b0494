"""Session token creation and verification.

A session token is an HS256 JWT carrying the user id (sub), issue time
(iat) and absolute expiry (exp, 24h by default). Nothing is stored server
side: a token is valid iff its signature verifies against the configured
secret and it has not expired.

Every verification failure raises the same TokenError with the same
message, so callers cannot tell a forged token from an expired one.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from tasktrack.config import Settings

_INVALID = "Invalid or expired session token"


class TokenError(Exception):
    """Raised when a session token cannot be verified."""


@dataclass(frozen=True)
class SessionClaims:
    user_id: uuid.UUID
    expires_at: datetime


def create_session_token(
    user_id: uuid.UUID | str,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Create a signed session token for a user."""
    now = datetime.now(timezone.utc)
    expires = now + (expires_delta or timedelta(hours=settings.session_ttl_hours))
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": expires,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_session_token(token: str, settings: Settings) -> SessionClaims:
    """Verify a session token and return its claims.

    Raises TokenError on a bad signature, tampered or malformed payload,
    missing claims, or expiry.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
        return SessionClaims(
            user_id=uuid.UUID(payload["sub"]),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (jwt.InvalidTokenError, ValueError, TypeError, AttributeError) as e:
        raise TokenError(_INVALID) from e

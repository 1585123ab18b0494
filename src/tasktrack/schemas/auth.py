"""Pydantic schemas for registration, login and the current user."""

import uuid
from datetime import datetime

from pydantic import Field

from tasktrack.schemas.base import CamelModel

# Deliberately loose: one "@", no whitespace, a dot in the domain.
EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
PASSWORD_MIN_LENGTH = 6


class Credentials(CamelModel):
    email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=128)


class RegisterRequest(Credentials):
    pass


class LoginRequest(Credentials):
    pass


class UserRead(CamelModel):
    """A user as returned to clients — never includes the password hash."""
    id: uuid.UUID
    email: str
    created_at: datetime
    updated_at: datetime


class CurrentUserRead(CamelModel):
    id: uuid.UUID
    email: str


class RegisterResponse(CamelModel):
    message: str
    user: UserRead


class LoginResponse(CamelModel):
    user: UserRead


class MeResponse(CamelModel):
    user: CurrentUserRead

"""Credential store — registration and password verification.

Emails are matched exactly (case-sensitive). Unknown emails and wrong
passwords both raise InvalidCredentialsError, and the unknown-email path
still runs a bcrypt comparison so neither the response nor its timing
reveals whether an account exists.

bcrypt is CPU-bound; it runs in a worker thread so the event loop keeps
serving other requests while a hash is computed.
"""

import asyncio
import uuid
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tasktrack.auth.password import dummy_hash, hash_password, verify_password
from tasktrack.db.models import User
from tasktrack.errors import EmailTakenError, InvalidCredentialsError

logger = structlog.get_logger()


class UserService:
    """Business logic for accounts."""

    def __init__(self, db: AsyncSession, bcrypt_rounds: int = 10):
        self.db = db
        self.bcrypt_rounds = bcrypt_rounds

    async def get(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def register(self, email: str, password: str) -> User:
        """Create an account. Raises EmailTakenError if the email exists."""
        if await self.get_by_email(email):
            raise EmailTakenError()

        password_hash = await asyncio.to_thread(
            hash_password, password, self.bcrypt_rounds
        )
        user = User(email=email, password_hash=password_hash)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email.
            await self.db.rollback()
            raise EmailTakenError()

        logger.info("auth.registered", user_id=str(user.id), email=email)
        return user

    async def verify(self, email: str, password: str) -> User:
        """Return the user for valid credentials, else InvalidCredentialsError."""
        user = await self.get_by_email(email)
        if user:
            stored_hash = user.password_hash
        else:
            # The first dummy hash per rounds value is a full bcrypt run.
            stored_hash = await asyncio.to_thread(dummy_hash, self.bcrypt_rounds)

        valid = await asyncio.to_thread(verify_password, password, stored_hash)
        if not user or not valid:
            logger.info("auth.login_failed", email=email)
            raise InvalidCredentialsError()
        return user

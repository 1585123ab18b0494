"""Password hashing utilities.

Uses bcrypt, which salts automatically and is deliberately slow. The work
factor comes from settings (TASKTRACK_BCRYPT_ROUNDS, default 10).
Passwords are truncated to 72 bytes, bcrypt's input limit.
"""

from functools import lru_cache

import bcrypt


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:72]


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a password with bcrypt. Output starts with "$2b$"."""
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a password against a stored hash. Malformed hashes never match."""
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@lru_cache(maxsize=8)
def dummy_hash(rounds: int = 10) -> str:
    """A throwaway hash to compare against when the email is unknown.

    Running a real comparison keeps the unknown-user path as slow as the
    wrong-password path.
    """
    return hash_password("tasktrack-dummy-password", rounds)

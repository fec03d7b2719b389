"""Password hashing and session token primitives.

Passwords are stored as bcrypt hashes. Session tokens are random url-safe
strings handed to the client once; only their SHA-256 digest is persisted so a
leaked ``sessions`` table cannot be replayed.
"""

from __future__ import annotations

import hashlib
import secrets
from functools import lru_cache

import bcrypt

from .config import settings

TOKEN_BYTES = 32


def hash_password(plain: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Constant-time comparison of ``plain`` against a stored bcrypt hash."""

    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password(secrets.token_urlsafe(16))


def burn_verification(plain: str) -> None:
    """Spend the same bcrypt work as a real check when no user matched."""

    verify_password(plain, _dummy_hash())


def generate_session_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()

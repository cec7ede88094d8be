"""Password hashing, JWT creation/verification, and role checks for authentication."""

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime
from functools import lru_cache
from typing import Any

import bcrypt
import jwt

from app.core.config import settings
from app.core.durations import parse_duration
from app.core.exceptions import InsufficientPermissionsError

# Bcrypt cost (log rounds).
BCRYPT_ROUNDS = 10

# Claims every access token must carry.
REQUIRED_CLAIMS = ("id", "username", "role", "exp", "iat")


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt only looks at the first 72 bytes.
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash."""
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return hash_password("not-a-real-password")


def burn_password_check(plain_password: str) -> None:
    """Spend the same bcrypt work as a real check, for lookups that found no user."""
    verify_password(plain_password, _dummy_hash())


def create_access_token(user: Mapping[str, Any], expires_in: str | None = None) -> str:
    """
    Create a signed JWT carrying id, username, role and email of a verified user.

    Lifetime is JWT_EXPIRES_IN unless expires_in (e.g. "15m") is given.
    """
    now = datetime.now(UTC)
    lifetime = parse_duration(expires_in or settings.JWT_EXPIRES_IN)
    payload: dict[str, Any] = {
        "id": user["id"],
        "username": user["username"],
        "role": user["role"],
        "email": user.get("email"),
        "iat": now,
        "exp": now + lifetime,
    }
    return jwt.encode(
        payload,
        settings.JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate a JWT; return its claims.
    Raises jwt.PyJWTError on a bad signature, malformed token, expiry, or missing claims.
    """
    return jwt.decode(
        token,
        settings.JWT_SECRET.get_secret_value(),
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": list(REQUIRED_CLAIMS)},
    )


def ensure_role(role: str | None, allowed: Iterable[str]) -> None:
    """Raise InsufficientPermissionsError unless role is one of allowed."""
    required = [str(r) for r in allowed]
    if role is None or role not in required:
        raise InsufficientPermissionsError(required=required, current=role)

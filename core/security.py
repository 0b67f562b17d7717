# core/security.py
"""
Password hashing and JWT token helpers.
"""
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from jose import JWTError, jwt

from config import settings

# JWT configuration
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 12  # one working shift
REFRESH_TOKEN_EXPIRE_DAYS = 7

ACCESS = "access"
REFRESH = "refresh"


def get_secret_key() -> str:
    """JWT secret from settings, or a fixed development key."""
    secret = getattr(settings, "SECRET_KEY", None)
    if secret:
        return secret
    # Development fallback - NOT for production!
    return "dev-secret-key-change-in-production-apar"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its bcrypt hash."""
    return bcrypt.checkpw(
        plain_password.encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def get_password_hash(password: str) -> str:
    """Hash a password for storage."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def _create_token(data: dict[str, Any], token_type: str, expires_delta: timedelta) -> str:
    to_encode = data.copy()
    to_encode.update({
        "exp": datetime.now(timezone.utc) + expires_delta,
        "type": token_type,
    })
    return jwt.encode(to_encode, get_secret_key(), algorithm=ALGORITHM)


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload, at least {"sub": "<user id>"}
        expires_delta: Optional custom expiration time
    """
    return _create_token(
        data,
        ACCESS,
        expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(data: dict[str, Any]) -> str:
    """Create a JWT refresh token with longer expiration."""
    return _create_token(data, REFRESH, timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS))


def create_token_pair(user_id: int, role: str) -> tuple[str, str]:
    """Access and refresh token for a freshly authenticated user."""
    token_data = {"sub": str(user_id), "role": role}
    return create_access_token(token_data), create_refresh_token(token_data)


def decode_token(token: str) -> dict[str, Any] | None:
    """Decoded payload if the token is valid and unexpired, else None."""
    try:
        return jwt.decode(token, get_secret_key(), algorithms=[ALGORITHM])
    except JWTError:
        return None


def verify_token_type(token: str, expected_type: str) -> dict[str, Any] | None:
    """Decode token and check it is an 'access' or 'refresh' token as expected."""
    payload = decode_token(token)
    if payload is None:
        return None
    if payload.get("type") != expected_type:
        return None
    return payload

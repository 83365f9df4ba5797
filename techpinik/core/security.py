"""Security utilities for admin session tokens."""

from datetime import datetime, timedelta, timezone
from typing import Any

from jose import JWTError, jwt
from pydantic import BaseModel

from techpinik.core.config import get_settings

settings = get_settings()

# JWT Configuration
ALGORITHM = "HS256"


class TokenData(BaseModel):
    """Data encoded in an admin session token."""

    user_id: str
    email: str
    is_admin: bool
    exp: datetime


def create_access_token(
    user_id: str,
    email: str,
    is_admin: bool,
    expires_delta: timedelta | None = None,
) -> str:
    """Create a JWT access token.

    Args:
        user_id: The auth provider's user ID
        email: The user's email
        is_admin: Whether the user resolved as an admin at sign-in
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.session_max_age_minutes)
    expire = datetime.now(timezone.utc) + expires_delta

    to_encode: dict[str, Any] = {
        "sub": user_id,
        "email": email,
        "role": "admin" if is_admin else "user",
        "exp": expire,
    }

    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str) -> TokenData | None:
    """Decode and validate a JWT access token.

    Returns:
        TokenData if valid, None if invalid or expired
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
        user_id = payload.get("sub")
        email = payload.get("email")
        exp = payload.get("exp")

        if user_id is None or email is None:
            return None

        return TokenData(
            user_id=user_id,
            email=email,
            is_admin=payload.get("role") == "admin",
            exp=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
    except JWTError:
        return None


def create_cookie_token(user_id: str, email: str, is_admin: bool) -> tuple[str, int]:
    """Create a token suitable for httpOnly cookie storage.

    Returns:
        Tuple of (token, max_age_seconds)
    """
    token = create_access_token(user_id, email, is_admin)
    return token, settings.session_max_age_minutes * 60

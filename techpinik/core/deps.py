"""Dependency injection utilities for FastAPI routes."""

from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request

from techpinik.core.config import get_settings
from techpinik.core.errors import AuthenticationError, PermissionDeniedError
from techpinik.core.security import decode_access_token

settings = get_settings()


@dataclass(frozen=True)
class AdminSession:
    """Per-request view of the signed-in back-office user."""

    user_id: str
    email: str
    is_admin: bool


def get_token_from_cookie(request: Request) -> str | None:
    """Extract the session token from its httpOnly cookie."""
    return request.cookies.get(settings.session_cookie_name)


async def get_session_context(
    token: Annotated[str | None, Depends(get_token_from_cookie)],
) -> AdminSession:
    """Resolve the session cookie into a session context.

    Raises AuthenticationError if the cookie is missing, invalid or expired.
    """
    if token is None:
        raise AuthenticationError("Not authenticated")

    token_data = decode_access_token(token)
    if token_data is None:
        raise AuthenticationError("Invalid or expired session")

    return AdminSession(
        user_id=token_data.user_id,
        email=token_data.email,
        is_admin=token_data.is_admin,
    )


async def get_admin_session(
    session: Annotated[AdminSession, Depends(get_session_context)],
) -> AdminSession:
    """Require an authenticated admin.

    Use this for every back-office route.
    """
    if not session.is_admin:
        raise PermissionDeniedError("Admin access required")
    return session


# Type aliases for dependency injection
SessionContext = Annotated[AdminSession, Depends(get_session_context)]
CurrentAdmin = Annotated[AdminSession, Depends(get_admin_session)]

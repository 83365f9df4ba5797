"""Admin sign-in: credential check and admin role resolution."""

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from techpinik.core.auth_provider import AuthProviderClient, AuthUser
from techpinik.core.config import get_settings
from techpinik.core.deps import AdminSession
from techpinik.core.errors import PermissionDeniedError
from techpinik.models.profile import Profile

settings = get_settings()
logger = structlog.get_logger()

ADMIN_ROLE = "admin"


async def get_profile_role(
    session_factory: async_sessionmaker[AsyncSession],
    user_id: str,
) -> str | None:
    """Role stored in the user's profile row, or None when there is no row."""
    async with session_factory() as session:
        result = await session.execute(select(Profile.role).where(Profile.id == user_id))
        return result.scalar_one_or_none()


async def upsert_admin_profile(
    session_factory: async_sessionmaker[AsyncSession],
    user: AuthUser,
) -> None:
    """Create or promote the user's profile row to the admin role.

    Failures are logged and swallowed; sign-in does not depend on the row.
    """
    try:
        async with session_factory() as session:
            await session.merge(Profile(id=user.id, email=user.email, role=ADMIN_ROLE))
            await session.commit()
        logger.info("Admin profile created", user_id=user.id)
    except SQLAlchemyError as e:
        logger.warning("Failed to create admin profile", user_id=user.id, error=str(e))


async def resolve_admin_status(
    session_factory: async_sessionmaker[AsyncSession],
    user: AuthUser,
    admin_email: str | None = None,
) -> bool:
    """Decide whether a signed-in user is an admin.

    Checked in order:
    1. the role on the user's profile row, when the row exists;
    2. `role` in the auth provider's user metadata;
    3. the configured admin email, which also upserts an admin profile.

    If the profiles table cannot be read at all, only the email check applies.
    """
    admin_email = admin_email or settings.admin_email

    try:
        role = await get_profile_role(session_factory, user.id)
    except SQLAlchemyError as e:
        logger.warning(
            "Profiles not accessible, using email fallback",
            user_id=user.id,
            error=str(e),
        )
        return user.email == admin_email

    if role is not None:
        return role == ADMIN_ROLE

    if user.user_metadata.get("role") == ADMIN_ROLE:
        return True

    if user.email == admin_email:
        logger.info("Admin access granted via email fallback", user_id=user.id)
        await upsert_admin_profile(session_factory, user)
        return True

    return False


async def sign_in_admin(
    provider: AuthProviderClient,
    session_factory: async_sessionmaker[AsyncSession],
    email: str,
    password: str,
) -> AdminSession:
    """Sign in with email and password and require the admin role.

    Raises:
        AuthenticationError: The credentials were rejected.
        PermissionDeniedError: The user is not an admin.
    """
    user = await provider.sign_in_with_password(email, password)
    is_admin = await resolve_admin_status(session_factory, user)
    if not is_admin:
        logger.info("Non-admin sign in refused", user_id=user.id)
        raise PermissionDeniedError("Admin access required")

    return AdminSession(user_id=user.id, email=user.email, is_admin=True)

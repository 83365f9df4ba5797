"""Admin authentication endpoints backed by the hosted auth provider."""

import structlog
from fastapi import APIRouter, Request, Response

from techpinik.core.auth_provider import AuthProviderDep
from techpinik.core.config import get_settings
from techpinik.core.database import SessionFactoryDep
from techpinik.core.deps import CurrentAdmin
from techpinik.core.rate_limit import RATE_LIMIT_AUTH, limiter
from techpinik.core.security import create_cookie_token
from techpinik.schemas.auth import AdminSessionResponse, LoginRequest
from techpinik.schemas.common import ApiResponse
from techpinik.services import admin_auth_service

settings = get_settings()
logger = structlog.get_logger()

router = APIRouter(prefix="/admin/auth", tags=["admin-auth"])


@router.post("/login", response_model=ApiResponse[AdminSessionResponse])
@limiter.limit(RATE_LIMIT_AUTH)
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    provider: AuthProviderDep,
    session_factory: SessionFactoryDep,
) -> ApiResponse[AdminSessionResponse]:
    """Sign in to the back office.

    Sets the session token in an httpOnly cookie. Non-admin accounts are
    refused with 403 even when the password is right.
    """
    admin = await admin_auth_service.sign_in_admin(
        provider=provider,
        session_factory=session_factory,
        email=credentials.email,
        password=credentials.password,
    )

    token_value, max_age = create_cookie_token(admin.user_id, admin.email, admin.is_admin)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token_value,
        max_age=max_age,
        httponly=True,
        secure=not settings.debug,
        samesite="lax",
        path="/",
    )

    logger.info("Admin signed in", user_id=admin.user_id)
    return ApiResponse[AdminSessionResponse](
        data=AdminSessionResponse(
            user_id=admin.user_id,
            email=admin.email,
            is_admin=admin.is_admin,
        ),
        message="Signed in successfully",
    )


@router.get("/me", response_model=ApiResponse[AdminSessionResponse])
async def get_current_admin(admin: CurrentAdmin) -> ApiResponse[AdminSessionResponse]:
    """Get the signed-in admin."""
    return ApiResponse[AdminSessionResponse](
        data=AdminSessionResponse(
            user_id=admin.user_id,
            email=admin.email,
            is_admin=admin.is_admin,
        ),
    )


@router.post("/logout", response_model=ApiResponse[None])
async def logout(response: Response, admin: CurrentAdmin) -> ApiResponse[None]:
    """Sign out by clearing the session cookie."""
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
    )
    logger.info("Admin signed out", user_id=admin.user_id)
    return ApiResponse[None](message="Signed out successfully")

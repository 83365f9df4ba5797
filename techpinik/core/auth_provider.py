"""Client for the hosted auth provider (GoTrue-compatible REST API)."""

from typing import Annotated, Any

import httpx
import structlog
from fastapi import Depends
from pydantic import BaseModel, Field

from techpinik.core.config import get_settings
from techpinik.core.errors import AuthenticationError, AuthProviderError

settings = get_settings()
logger = structlog.get_logger()


class AuthUser(BaseModel):
    """User record returned by the auth provider."""

    id: str
    email: str
    user_metadata: dict[str, Any] = Field(default_factory=dict)


class AuthProviderClient:
    """Thin async client for password sign-in against the auth provider.

    Usage:
        client = AuthProviderClient(base_url, api_key)
        user = await client.sign_in_with_password(email, password)
    """

    def __init__(self, base_url: str, api_key: str, timeout: float = 10.0):
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout = timeout

    async def sign_in_with_password(self, email: str, password: str) -> AuthUser:
        """Exchange email and password for the provider's user record.

        Raises:
            AuthenticationError: Credentials were rejected.
            AuthProviderError: The provider was unreachable or answered unexpectedly.
        """
        url = f"{self._base_url}/token"
        headers = {"apikey": self._api_key} if self._api_key else {}

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.post(
                    url,
                    params={"grant_type": "password"},
                    json={"email": email, "password": password},
                    headers=headers,
                )
        except httpx.RequestError as e:
            logger.warning("Auth provider connection error", error=str(e))
            raise AuthProviderError("Authentication service unavailable") from e

        if response.status_code in (400, 401, 422):
            logger.info("Sign in rejected", email=email, status_code=response.status_code)
            raise AuthenticationError("Invalid email or password")

        if response.status_code != 200:
            logger.warning(
                "Auth provider error",
                status_code=response.status_code,
            )
            raise AuthProviderError("Authentication service unavailable")

        payload = response.json()
        user = payload.get("user")
        if not user:
            raise AuthProviderError("No user data returned")

        return AuthUser(
            id=str(user["id"]),
            email=user.get("email") or email,
            user_metadata=user.get("user_metadata") or {},
        )


def get_auth_provider() -> AuthProviderClient:
    """Dependency that provides the auth provider client."""
    return AuthProviderClient(
        base_url=settings.auth_provider_url,
        api_key=settings.auth_provider_api_key,
    )


AuthProviderDep = Annotated[AuthProviderClient, Depends(get_auth_provider)]

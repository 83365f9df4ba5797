"""Tests for back-office sign-in and the admin session."""

import asyncio

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from techpinik.core.auth_provider import AuthUser, get_auth_provider
from techpinik.core.config import get_settings
from techpinik.core.errors import AuthenticationError
from techpinik.core.security import create_access_token, decode_access_token
from techpinik.main import app
from techpinik.models import Profile
from techpinik.services.admin_auth import resolve_admin_status

settings = get_settings()

PASSWORD = "correct-horse"


class FakeAuthProvider:
    """Auth provider that knows a fixed set of users."""

    def __init__(self, users: dict[str, AuthUser]):
        self.users = users

    async def sign_in_with_password(self, email: str, password: str) -> AuthUser:
        user = self.users.get(email)
        if user is None or password != PASSWORD:
            raise AuthenticationError("Invalid email or password")
        return user


ADMIN_USER = AuthUser(id="user-admin", email=settings.admin_email)
STAFF_USER = AuthUser(
    id="user-staff",
    email="staff@techpinik.com",
    user_metadata={"role": "admin"},
)
SHOPPER = AuthUser(id="user-shopper", email="shopper@example.com")


@pytest.fixture
def provider(client):
    fake = FakeAuthProvider({u.email: u for u in (ADMIN_USER, STAFF_USER, SHOPPER)})
    app.dependency_overrides[get_auth_provider] = lambda: fake
    return fake


def login(client, email: str, password: str = PASSWORD):
    return client.post("/api/admin/auth/login", json={"email": email, "password": password})


class TestLogin:
    """Tests for POST /api/admin/auth/login."""

    def test_admin_email_signs_in(self, client, db, provider):
        response = login(client, settings.admin_email)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Signed in successfully"
        assert body["data"] == {
            "user_id": "user-admin",
            "email": settings.admin_email,
            "is_admin": True,
        }

        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{settings.session_cookie_name}=")
        assert "HttpOnly" in set_cookie
        assert "samesite=lax" in set_cookie.lower()

        token = set_cookie.split(";")[0].split("=", 1)[1]
        token_data = decode_access_token(token)
        assert token_data.user_id == "user-admin"
        assert token_data.is_admin is True

    def test_email_fallback_creates_admin_profile(self, client, db, provider):
        login(client, settings.admin_email)

        profile = db.get(Profile, "user-admin")
        assert profile is not None
        assert profile.role == "admin"

    def test_metadata_role_signs_in(self, client, provider):
        response = login(client, STAFF_USER.email)

        assert response.status_code == 200
        assert response.json()["data"]["is_admin"] is True

    def test_non_admin_refused(self, client, provider):
        response = login(client, SHOPPER.email)

        assert response.status_code == 403
        assert response.json() == {"success": False, "error": "Admin access required"}
        assert "set-cookie" not in response.headers

    def test_wrong_password(self, client, provider):
        response = login(client, settings.admin_email, password="wrong")

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid email or password"

    def test_invalid_email_rejected(self, client, provider):
        response = login(client, "not-an-email")

        assert response.status_code == 422


class TestResolveAdminStatus:
    """Tests for the admin role lookup order."""

    def test_profile_role_wins_over_email(self, client, db):
        db.add(Profile(id="user-admin", email=settings.admin_email, role="user"))

        is_admin = client.portal.call(resolve_admin_status, db.session_factory, ADMIN_USER)

        assert is_admin is False

    def test_profile_admin_role(self, client, db):
        db.add(Profile(id="user-shopper", email=SHOPPER.email, role="admin"))

        is_admin = client.portal.call(resolve_admin_status, db.session_factory, SHOPPER)

        assert is_admin is True

    def test_metadata_role_without_profile(self, client, db):
        is_admin = client.portal.call(resolve_admin_status, db.session_factory, STAFF_USER)

        assert is_admin is True
        assert db.get(Profile, STAFF_USER.id) is None

    def test_unknown_user_is_not_admin(self, client, db):
        is_admin = client.portal.call(resolve_admin_status, db.session_factory, SHOPPER)

        assert is_admin is False

    def test_unreadable_profiles_fall_back_to_email(self, tmp_path):
        # No tables exist in this database
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'empty.db'}")
        session_factory = async_sessionmaker(engine, expire_on_commit=False)

        async def check(user: AuthUser) -> bool:
            try:
                return await resolve_admin_status(session_factory, user)
            finally:
                await engine.dispose()

        assert asyncio.run(check(ADMIN_USER)) is True
        assert asyncio.run(check(STAFF_USER)) is False


class TestSession:
    """Tests for /api/admin/auth/me and logout."""

    def test_me_without_cookie(self, client):
        response = client.get("/api/admin/auth/me")

        assert response.status_code == 401
        assert response.json() == {"success": False, "error": "Not authenticated"}

    def test_me_with_invalid_token(self, client):
        client.cookies.set(settings.session_cookie_name, "garbage")

        response = client.get("/api/admin/auth/me")

        assert response.status_code == 401
        assert response.json()["error"] == "Invalid or expired session"

    def test_me_with_admin_token(self, client):
        token = create_access_token("user-admin", settings.admin_email, is_admin=True)
        client.cookies.set(settings.session_cookie_name, token)

        response = client.get("/api/admin/auth/me")

        assert response.status_code == 200
        assert response.json()["data"] == {
            "user_id": "user-admin",
            "email": settings.admin_email,
            "is_admin": True,
        }

    def test_me_with_non_admin_token(self, client):
        token = create_access_token("user-shopper", SHOPPER.email, is_admin=False)
        client.cookies.set(settings.session_cookie_name, token)

        response = client.get("/api/admin/auth/me")

        assert response.status_code == 403

    def test_logout_clears_cookie(self, client):
        token = create_access_token("user-admin", settings.admin_email, is_admin=True)
        client.cookies.set(settings.session_cookie_name, token)

        response = client.post("/api/admin/auth/logout")

        assert response.status_code == 200
        assert response.json()["message"] == "Signed out successfully"
        set_cookie = response.headers["set-cookie"]
        assert set_cookie.startswith(f"{settings.session_cookie_name}=")
        assert "Max-Age=0" in set_cookie

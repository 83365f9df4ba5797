"""Admin authentication schemas."""

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    """Credentials posted to the admin login endpoint."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=256)


class AdminSessionResponse(BaseModel):
    """The signed-in back-office user."""

    user_id: str
    email: str
    is_admin: bool

"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class RegisterRequest(BaseModel):
    """Registration form. Fields are optional here so presence is reported as 400, not 422."""

    name: str | None = Field(default=None, max_length=100, description="Display name")
    email: str | None = Field(default=None, max_length=255, description="Email address")
    password: str | None = Field(default=None, description="Plain-text password")


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: str | None = Field(default=None, description="Email address")
    password: str | None = Field(default=None, description="Password")


class UserPublic(BaseModel):
    """User fields safe to return to clients (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class CurrentUser(UserPublic):
    """Authenticated user decoded from the bearer token claims."""


class AuthResponse(BaseModel):
    """Response for register and login: signed token plus the user."""

    success: bool = True
    token: str = Field(..., description="JWT access token, send as 'Authorization: Bearer <token>'")
    user: UserPublic


class MeResponse(BaseModel):
    """Response for GET /me."""

    success: bool = True
    user: UserPublic

"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field

from app.models.user import UserLevel


class LoginRequest(BaseModel):
    """Credentials for login. Empty values are rejected by the authenticator with 401, not 422."""

    username: str = Field(default="", description="Username")
    password: str = Field(default="", description="Password")


class UserSummary(BaseModel):
    """Public user summary returned with a fresh token (no password)."""

    id: int
    username: str | None
    name: str | None
    level: UserLevel
    roles: list[str]


class LoginResponse(BaseModel):
    """JWT returned after successful login; send it as `Authorization: Bearer <token>`."""

    token: str = Field(..., description="JWT access token")
    user: UserSummary


class LogoutResponse(BaseModel):
    message: str


class CurrentUserResponse(BaseModel):
    """Identity resolved from the bearer token, with roles derived from the stored level."""

    id: int
    username: str | None
    roles: list[str]

"""Pydantic request/response schemas."""

from app.schemas.auth import (
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    UserSummary,
)
from app.schemas.health import HealthResponse
from app.schemas.user import UserCandidate, UserRead, UserWrite

__all__ = [
    "CurrentUserResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    "UserCandidate",
    "UserRead",
    "UserSummary",
    "UserWrite",
]

"""JWT login/logout and auth dependencies (get_current_user, require_admin)."""

import json
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request
from fastapi.security import APIKeyHeader
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.models import User
from app.schemas.auth import (
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    UserSummary,
)
from app.services import auth as auth_service
from app.services.policy import ensure_admin, roles_for

router = APIRouter()
# Read the raw header; the "Bearer " prefix is checked by the authenticator.
authorization_header = APIKeyHeader(
    name="Authorization",
    auto_error=False,
    description="Bearer <token> from POST /auth/login",
)


def get_current_user(
    authorization: Annotated[str | None, Depends(authorization_header)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Dependency: require a valid Bearer JWT for an existing, active user. Raises 401 otherwise."""
    return auth_service.authenticate_bearer(db, authorization)


def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """Dependency: require an authenticated admin. Raises 403 for other levels."""
    ensure_admin(current_user)
    return current_user


async def request_body(request: Request) -> bytes:
    """Dependency: the raw request body, parsed by the route only after its access checks."""
    return await request.body()


def json_body_schema(model: type[Any]) -> dict[str, Any]:
    """openapi_extra documenting a JSON body that the route reads through request_body."""
    return {
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": model.model_json_schema()}},
        }
    }


def _text(value: object) -> str:
    return value if isinstance(value, str) else ""


def credentials_from_body(raw: bytes) -> LoginRequest:
    """
    Extract username/password from a login body.

    Anything that is not a JSON object with string fields yields empty
    credentials, which the authenticator rejects with 401.
    """
    try:
        data = json.loads(raw) if raw else None
    except ValueError:
        return LoginRequest()
    if not isinstance(data, dict):
        return LoginRequest()
    return LoginRequest(username=_text(data.get("username")), password=_text(data.get("password")))


@router.post("/login", response_model=LoginResponse, openapi_extra=json_body_schema(LoginRequest))
def login(
    db: Annotated[Session, Depends(get_db)],
    raw: Annotated[bytes, Depends(request_body)],
) -> LoginResponse:
    """
    Authenticate with username and password; returns a JWT and a user summary.
    Include the token in the Authorization header as: Bearer <token>
    """
    credentials = credentials_from_body(raw)
    result = auth_service.login(db, credentials.username, credentials.password)
    user = result.user
    return LoginResponse(
        token=result.token,
        user=UserSummary(
            id=user.id,
            username=user.username,
            name=user.name,
            level=user.level,
            roles=result.roles,
        ),
    )


@router.post("/logout", response_model=LogoutResponse)
def logout(
    _user: Annotated[User, Depends(get_current_user)],
) -> LogoutResponse:
    """Tokens are stateless; the client discards its token. Only acknowledges."""
    return LogoutResponse(message="Successfully logged out")


@router.get("/me", response_model=CurrentUserResponse)
def me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> CurrentUserResponse:
    """Return the identity behind the bearer token with roles derived from the stored level."""
    return CurrentUserResponse(
        id=current_user.id,
        username=current_user.username,
        roles=roles_for(current_user.level),
    )

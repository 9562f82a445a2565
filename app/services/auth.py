"""Login (username/password -> token) and bearer-token authentication."""

import logging
from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.core.errors import AuthFailed, InvalidToken
from app.core.security import decode_access_token, issue_token_for, verify_password
from app.models import User
from app.services import user_store
from app.services.policy import roles_for

logger = logging.getLogger(__name__)

BEARER_PREFIX = "Bearer "

# Single client-visible message for every login failure.
LOGIN_FAILED_MESSAGE = "Invalid credentials."


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: User
    roles: list[str]


def _login_failed(reason: str, username: str) -> AuthFailed:
    logger.info(
        "Login failed",
        extra={"auth_status": "failure", "reason": reason, "username": username[:100]},
    )
    return AuthFailed(LOGIN_FAILED_MESSAGE)


def login(db: Session, username: str, password: str) -> LoginResult:
    """
    Check username/password against the store and issue a token for the user.

    Raises AuthFailed for missing credentials, unknown or inactive users and
    wrong passwords; the reason is logged but not returned.
    """
    if not username or not password:
        raise _login_failed("missing credentials", username or "")

    user = user_store.find_by_username(db, username)
    if user is None:
        raise _login_failed("user not found", username)
    if not user.active:
        raise _login_failed("inactive", username)
    if not verify_password(password, user.password_hash):
        raise _login_failed("bad password", username)

    roles = roles_for(user.level)
    token = issue_token_for(user.username, roles)
    logger.info("Login succeeded", extra={"auth_status": "success", "user_id": user.id})
    return LoginResult(token=token, user=user, roles=roles)


def authenticate_bearer(db: Session, authorization: str | None) -> User:
    """
    Resolve the acting identity from an `Authorization: Bearer <token>` header.

    The user is re-read from the store on every call, so deleted or
    deactivated accounts are rejected even while their token is still valid.
    """
    if not authorization:
        raise AuthFailed("Not privileged to request the resource.")
    if not authorization.startswith(BEARER_PREFIX):
        raise AuthFailed("Invalid Authorization header.")

    token = authorization[len(BEARER_PREFIX):].strip()
    try:
        payload = decode_access_token(token)
    except InvalidToken as e:
        logger.info("Bearer token rejected", extra={"reason": str(e)[:200]})
        raise AuthFailed("Invalid JWT token.") from e

    user = user_store.find_by_username(db, payload["sub"])
    if user is None:
        raise AuthFailed("Invalid JWT token.")
    if not user.active:
        raise AuthFailed("Account is inactive.")
    return user

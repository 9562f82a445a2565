"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime
from typing import Any

import bcrypt
import jwt

from app.core.config import settings
from app.core.errors import InvalidToken

# Tokens are always HMAC-SHA256; the algorithm is not configurable.
JWT_ALGORITHM = "HS256"

# Claims every token must carry.
REQUIRED_CLAIMS = ("exp", "iat", "sub")

PASSWORD_MAX_LEN = 128


def _now_ts() -> int:
    return int(datetime.now(UTC).timestamp())


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    # bcrypt has a 72-byte limit; truncate to avoid errors (validation already limits length).
    pw_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.hashpw(pw_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain_password: str, hashed: str | None) -> bool:
    """Verify a plain password against a stored hash. A missing hash never matches."""
    if not hashed:
        return False
    pw_bytes = plain_password.encode("utf-8")[:72]
    try:
        return bcrypt.checkpw(pw_bytes, hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def create_access_token(claims: dict[str, Any]) -> str:
    """Sign a claim set as a compact HS256 JWT (header.payload.signature)."""
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(claims, secret, algorithm=JWT_ALGORITHM)


def issue_token_for(username: str, roles: list[str], now: int | None = None) -> str:
    """Create an access token with sub, roles, iat and exp = iat + JWT_TOKEN_TTL_SECONDS."""
    issued_at = _now_ts() if now is None else now
    return create_access_token(
        {
            "iat": issued_at,
            "exp": issued_at + settings.JWT_TOKEN_TTL_SECONDS,
            "sub": username,
            "roles": list(roles),
        }
    )


def decode_access_token(token: str, now: int | None = None) -> dict[str, Any]:
    """
    Verify signature and expiry; return payload (iat, exp, sub, roles).

    A token whose exp equals the current second is already expired.
    Raises InvalidToken on any failure.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[JWT_ALGORITHM],
            options={"require": list(REQUIRED_CLAIMS), "verify_exp": False},
        )
    except jwt.PyJWTError as e:
        raise InvalidToken(str(e)) from e

    exp = payload.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        raise InvalidToken("Expiration Time claim (exp) must be a number")
    current = _now_ts() if now is None else now
    if exp <= current:
        raise InvalidToken("Signature has expired")
    if not isinstance(payload.get("sub"), str) or not payload["sub"]:
        raise InvalidToken("Subject claim (sub) must be a non-empty string")
    return payload

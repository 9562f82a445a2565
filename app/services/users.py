"""User CRUD with per-field update permissions."""

import logging
from typing import Any

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.errors import Conflict, NotFound, ValidationFailed
from app.core.security import hash_password
from app.models import User, UserLevel
from app.schemas.user import UserCandidate, UserWrite
from app.services import user_store
from app.services.policy import ensure_can_update, parse_level, updatable_fields

logger = logging.getLogger(__name__)


def _error_lines(e: ValidationError) -> list[str]:
    return [
        f"{'.'.join(str(part) for part in err['loc']) or 'body'}: {err['msg']}" for err in e.errors()
    ]


def _validate_candidate(**fields: Any) -> UserCandidate:
    """Validate the complete post-change state of a user; raise ValidationFailed listing every problem."""
    try:
        return UserCandidate(**fields)
    except ValidationError as e:
        raise ValidationFailed("Invalid user data", errors=_error_lines(e)) from e


def parse_user_write(raw: bytes) -> UserWrite:
    """
    Parse a create/update request body.

    Called only after authentication and access checks, so a caller without
    access never learns whether their payload was well formed.
    """
    try:
        return UserWrite.model_validate_json(raw)
    except ValidationError as e:
        raise ValidationFailed("Malformed request.", errors=_error_lines(e)) from e


def _ensure_username_free(db: Session, username: str | None, exclude_id: int | None = None) -> None:
    if username is not None and user_store.username_taken(db, username, exclude_id=exclude_id):
        raise Conflict("Username is already taken.")


def list_users(db: Session) -> list[User]:
    return user_store.find_all(db)


def get_user(db: Session, user_id: int) -> User:
    user = user_store.find_by_id(db, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def create_user(db: Session, payload: UserWrite) -> User:
    """
    Create a user from an admin request.

    level defaults to basic and active to false. Nothing is written unless the
    whole record validates and the username is free.
    """
    level = UserLevel.BASIC if payload.level is None else parse_level(payload.level)
    candidate = _validate_candidate(
        name=payload.name,
        username=payload.username,
        password=payload.password,
        level=level,
        active=False if payload.active is None else payload.active,
    )
    _ensure_username_free(db, candidate.username)

    user = User(
        name=candidate.name,
        username=candidate.username,
        password_hash=hash_password(candidate.password) if candidate.password else None,
        level=candidate.level,
        active=candidate.active,
    )
    user_store.save(db, user)
    logger.info("User created", extra={"user_id": user.id, "level": user.level.value})
    return user


def get_update_target(db: Session, actor: User, user_id: int) -> User:
    """Load the user to update and check the actor may touch it (404, then 403)."""
    target = get_user(db, user_id)
    ensure_can_update(actor, target)
    return target


def update_user(db: Session, actor: User, target: User, payload: UserWrite) -> User:
    """
    Apply the fields of payload the actor is permitted to change on target.

    Order: check access, drop non-permitted fields, validate the merged
    candidate, then write every change at once.
    """
    ensure_can_update(actor, target)

    allowed = updatable_fields(actor, target)
    requested = payload.model_dump(exclude_none=True)
    changes = {field: value for field, value in requested.items() if field in allowed}
    ignored = sorted(set(requested) - allowed)
    if ignored:
        logger.info(
            "Ignoring fields the actor may not change",
            extra={"actor_id": actor.id, "target_id": target.id, "fields": ",".join(ignored)},
        )

    if "level" in changes:
        changes["level"] = parse_level(changes["level"])

    candidate = _validate_candidate(
        name=changes.get("name", target.name),
        username=changes.get("username", target.username),
        password=changes.get("password"),
        level=changes.get("level", target.level),
        active=changes.get("active", target.active),
    )
    if "username" in changes:
        _ensure_username_free(db, candidate.username, exclude_id=target.id)

    target.name = candidate.name
    target.username = candidate.username
    target.level = candidate.level
    target.active = candidate.active
    if candidate.password is not None:
        target.password_hash = hash_password(candidate.password)

    user_store.save(db, target)
    logger.info(
        "User updated",
        extra={"actor_id": actor.id, "target_id": target.id, "fields": ",".join(sorted(changes))},
    )
    return target


def delete_user(db: Session, user_id: int) -> None:
    user = get_user(db, user_id)
    user_store.delete(db, user)
    logger.info("User deleted", extra={"user_id": user_id})

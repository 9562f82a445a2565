"""User CRUD endpoints. Admin-only except PUT, which also allows self-updates."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.api.auth import get_current_user, json_body_schema, request_body, require_admin
from app.core.database import get_db
from app.models import User
from app.schemas.user import UserRead, UserWrite
from app.services import users as user_service

router = APIRouter()


def get_update_target(
    user_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    """Dependency: the user to update, after the admin-or-self check (404, then 403)."""
    return user_service.get_update_target(db, current_user, user_id)


@router.get("", response_model=list[UserRead])
def list_users(
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[User]:
    """List all users ordered by id (admin only)."""
    return user_service.list_users(db)


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> User:
    return user_service.get_user(db, user_id)


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    openapi_extra=json_body_schema(UserWrite),
)
def create_user(
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
    raw: Annotated[bytes, Depends(request_body)],
) -> User:
    """Create a user (admin only). level defaults to basic, active to false."""
    return user_service.create_user(db, user_service.parse_user_write(raw))


@router.put("/{user_id}", response_model=UserRead, openapi_extra=json_body_schema(UserWrite))
def update_user(
    target: Annotated[User, Depends(get_update_target)],
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    raw: Annotated[bytes, Depends(request_body)],
) -> User:
    """
    Update a user. Admins may change any field of any user; other users may
    change name, username and password on their own record only. level and
    active sent by a non-admin are ignored. The body is only parsed once
    access is granted, so a forbidden request is 403 whatever it contains.
    """
    payload = user_service.parse_user_write(raw)
    return user_service.update_user(db, current_user, target, payload)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    _admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    user_service.delete_user(db, user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

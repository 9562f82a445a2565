"""Request/response schemas for the user CRUD endpoints."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from app.core.security import PASSWORD_MAX_LEN
from app.models.user import UserLevel

NAME_MAX_LEN = 100
USERNAME_MAX_LEN = 100


class UserWrite(BaseModel):
    """
    Inbound body for create and update; every field is optional.

    `level` and `active` are left untyped here so that they are only checked
    when the acting identity is allowed to change them. Fields sent as null
    are treated as absent.
    """

    name: str | None = None
    username: str | None = None
    password: str | None = None
    level: Any = None
    active: Any = None


class UserCandidate(BaseModel):
    """Fully assembled user state validated as a whole before anything is persisted."""

    name: str | None = Field(default=None, max_length=NAME_MAX_LEN)
    username: str | None = Field(default=None, min_length=1, max_length=USERNAME_MAX_LEN)
    # Plaintext, present only when the password is being set.
    password: str | None = Field(default=None, min_length=1, max_length=PASSWORD_MAX_LEN)
    level: UserLevel
    active: bool


class UserRead(BaseModel):
    """Outbound user representation; the password hash is never included."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str | None
    username: str | None
    level: UserLevel
    active: bool

"""ORM model for application users (auth and role-tiered access control)."""

import enum

from sqlalchemy import Boolean, Column, Enum, Integer, String, false

from app.models.base import Base


class UserLevel(str, enum.Enum):
    """Closed set of access levels; see app.services.policy.roles_for for the role mapping."""

    BASIC = "basic"
    ADVANCED = "advanced"
    ADMIN = "admin"


class User(Base):
    """
    User account for JWT authentication and role-tiered access control.

    username is nullable but unique when present; password_hash holds a bcrypt
    hash and is never serialized.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=True)
    username = Column(String(100), nullable=True, unique=True, index=True)
    password_hash = Column(String(255), nullable=True)
    level = Column(
        Enum(
            UserLevel,
            name="user_level",
            native_enum=False,
            length=16,
            values_callable=lambda levels: [lvl.value for lvl in levels],
        ),
        nullable=False,
    )
    active = Column(Boolean, nullable=False, default=False, server_default=false())

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r} level={self.level}>"

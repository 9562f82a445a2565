"""SQLAlchemy ORM models."""

from app.models.base import Base
from app.models.user import User, UserLevel

__all__ = ["Base", "User", "UserLevel"]

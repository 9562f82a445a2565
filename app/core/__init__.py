"""Core app configuration, database session, security primitives and domain errors."""

from app.core.config import get_settings, settings
from app.core.database import get_db
from app.core.errors import AuthFailed, Conflict, Forbidden, NotFound, ServiceError, ValidationFailed

__all__ = [
    "AuthFailed",
    "Conflict",
    "Forbidden",
    "NotFound",
    "ServiceError",
    "ValidationFailed",
    "get_db",
    "get_settings",
    "settings",
]

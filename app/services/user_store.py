"""Credential store: single-record lookups and writes against the users table."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import Conflict
from app.models import User

logger = logging.getLogger(__name__)


def find_by_username(db: Session, username: str) -> User | None:
    return db.query(User).filter(User.username == username).first()


def find_by_id(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def find_all(db: Session) -> list[User]:
    return db.query(User).order_by(User.id).all()


def username_taken(db: Session, username: str, exclude_id: int | None = None) -> bool:
    """True if another user already holds this username."""
    query = db.query(User.id).filter(User.username == username)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    return query.first() is not None


def save(db: Session, user: User) -> User:
    """
    Insert or update a user in one transaction.

    A unique-constraint violation (username collision that slipped past the
    pre-check) rolls the transaction back and raises Conflict.
    """
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.info("User write rejected by store constraint", extra={"reason": str(e.orig)[:200]})
        raise Conflict("Username is already taken.") from e
    db.refresh(user)
    return user


def delete(db: Session, user: User) -> None:
    db.delete(user)
    db.commit()

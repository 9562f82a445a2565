"""SQLAlchemy declarative Base; Alembic autogenerate reads Base.metadata."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass

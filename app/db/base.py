"""
SQLAlchemy declarative base and metadata.
Challenge: Single place for table definitions and migrations.
Design: Deterministic constraint names so Alembic autogenerate diffs stay stable.
"""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_N_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """Base class for the users and items tables read by discovery."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

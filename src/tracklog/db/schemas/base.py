"""SQLAlchemy declarative base shared by the tracking log tables."""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# Explicitly named constraints are matched by name when translating driver errors.
NAMING_CONVENTION = {
    "ix": "idx_%(table_name)s_%(column_0_name)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "chk_%(table_name)s_%(constraint_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)

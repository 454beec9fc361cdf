# lifetrack/app/db/base.py
"""
Declarative base for the ORM models.

engine, AsyncSessionLocal and get_db are re-exported from db.session so
callers can import everything database related from one place.
"""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


from lifetrack.app.db.session import (  # noqa: E402
    engine,
    AsyncSessionLocal,
    get_db,
)

__all__ = [
    "Base",
    "engine",
    "AsyncSessionLocal",
    "get_db",
]

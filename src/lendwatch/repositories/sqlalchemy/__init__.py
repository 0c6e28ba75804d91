"""SQLAlchemy repository implementations."""

from lendwatch.repositories.sqlalchemy.database import (
    get_engine,
    get_session_factory,
    init_db,
    Base,
)
from lendwatch.repositories.sqlalchemy.cache_store import SqlAlchemyCacheStore

__all__ = [
    "get_engine",
    "get_session_factory",
    "init_db",
    "Base",
    "SqlAlchemyCacheStore",
]

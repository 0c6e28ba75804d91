"""SQLAlchemy ORM model definitions."""

from sqlalchemy import Column, String, DateTime, Text

from lendwatch.repositories.sqlalchemy.database import Base


class CacheEntryORM(Base):
    """SQLAlchemy model for a cache entry (JSON payload + update time)."""

    __tablename__ = "cache_entries"

    key = Column(String(255), primary_key=True)
    update_timestamp = Column(DateTime(timezone=True), nullable=False)
    payload = Column(Text, nullable=False)

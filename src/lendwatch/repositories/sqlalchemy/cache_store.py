"""SQLAlchemy implementation of CacheStore."""

import json
from datetime import datetime
from typing import Any, Optional

from sqlalchemy.orm import Session

from lendwatch.core.timezone import now_utc, to_utc
from lendwatch.domain.models import CacheEntry
from lendwatch.repositories.sqlalchemy.orm_models import CacheEntryORM


class SqlAlchemyCacheStore:
    """SQLAlchemy-backed cache store for derived data."""

    def __init__(self, db: Session):
        self._db = db

    def get(self, key: str) -> Optional[CacheEntry[Any]]:
        """Retrieve the entry stored under key, or None."""
        orm_entry = self._db.query(CacheEntryORM).filter(CacheEntryORM.key == key).first()
        return self._to_domain(orm_entry) if orm_entry else None

    def set(self, key: str, data: Any, update_timestamp: Optional[datetime] = None) -> None:
        """Insert or overwrite the entry under key."""
        timestamp = to_utc(update_timestamp) if update_timestamp else now_utc()
        payload = json.dumps(data)

        orm_entry = self._db.query(CacheEntryORM).filter(CacheEntryORM.key == key).first()
        if orm_entry:
            orm_entry.update_timestamp = timestamp
            orm_entry.payload = payload
        else:
            orm_entry = CacheEntryORM(
                key=key,
                update_timestamp=timestamp,
                payload=payload,
            )
            self._db.add(orm_entry)

        self._db.commit()

    @staticmethod
    def _to_domain(orm: CacheEntryORM) -> CacheEntry[Any]:
        """Convert ORM entry to domain model."""
        # SQLite drops tzinfo; stored values are always UTC
        return CacheEntry(
            update_timestamp=to_utc(orm.update_timestamp),
            data=json.loads(orm.payload),
        )

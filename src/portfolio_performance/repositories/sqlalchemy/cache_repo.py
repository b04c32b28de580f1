"""SQLAlchemy implementation of the Cache protocol."""

import json
from datetime import datetime, timedelta
from typing import Any, Callable, Optional

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from portfolio_performance.core.timezone import now_utc
from portfolio_performance.repositories.sqlalchemy.orm_models import CacheEntryORM

# Dialects with INSERT ... ON CONFLICT DO UPDATE
_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _naive_utc(dt: datetime) -> datetime:
    return dt.replace(tzinfo=None)


class SqlAlchemyCache:
    """SQLAlchemy-backed key-value cache with optional expiry."""

    def __init__(self, db: Session, clock: Callable[[], datetime] = now_utc):
        self._db = db
        self._clock = clock

    def get(self, key: str) -> Optional[Any]:
        """Return the decoded value, dropping the entry when expired."""
        orm_entry = self._db.get(CacheEntryORM, key)
        if orm_entry is None:
            return None
        if orm_entry.expires_at is not None and _naive_utc(self._clock()) >= orm_entry.expires_at:
            self._db.delete(orm_entry)
            self._db.commit()
            return None
        return json.loads(orm_entry.value)

    def put(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """Insert or replace the entry under key; the last concurrent writer wins."""
        expires_at = None
        if ttl_seconds is not None:
            expires_at = _naive_utc(self._clock() + timedelta(seconds=ttl_seconds))

        values = {
            "key": key,
            "value": json.dumps(value),
            "expires_at": expires_at,
            "updated_at": _naive_utc(now_utc()),
        }
        dialect = self._db.get_bind().dialect.name
        if dialect in _UPSERT_DIALECTS:
            statement = _UPSERT_DIALECTS[dialect](CacheEntryORM).values(**values)
            statement = statement.on_conflict_do_update(
                index_elements=[CacheEntryORM.key],
                set_={
                    "value": statement.excluded.value,
                    "expires_at": statement.excluded.expires_at,
                    "updated_at": statement.excluded.updated_at,
                },
            )
            self._db.execute(statement)
            self._db.commit()
            return

        try:
            self._db.merge(CacheEntryORM(**values))
            self._db.commit()
        except IntegrityError:
            # Another writer inserted the key between our lookup and insert
            self._db.rollback()
            self._db.query(CacheEntryORM).filter(CacheEntryORM.key == key).update(
                {k: v for k, v in values.items() if k != "key"}
            )
            self._db.commit()

    def delete_expired(self) -> int:
        """Remove all expired entries; returns how many were removed."""
        removed = (
            self._db.query(CacheEntryORM)
            .filter(
                CacheEntryORM.expires_at.isnot(None),
                CacheEntryORM.expires_at <= _naive_utc(self._clock()),
            )
            .delete()
        )
        self._db.commit()
        return removed

"""SQLAlchemy ORM model definitions."""

from datetime import datetime

from sqlalchemy import Column, String, DateTime, Text

from portfolio_performance.repositories.sqlalchemy.database import Base


class CacheEntryORM(Base):
    """SQLAlchemy model for a cached lookup result."""

    __tablename__ = "cache_entries"

    key = Column(String(512), primary_key=True)
    value = Column(Text, nullable=False)  # JSON document
    expires_at = Column(DateTime, nullable=True)  # naive UTC; NULL never expires
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

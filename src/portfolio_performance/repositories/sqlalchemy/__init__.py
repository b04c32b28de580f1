"""SQLAlchemy repository implementations."""

from portfolio_performance.repositories.sqlalchemy.database import (
    create_cache_engine,
    get_engine,
    get_session_factory,
    get_session,
    init_db,
    Base,
)
from portfolio_performance.repositories.sqlalchemy.cache_repo import SqlAlchemyCache

__all__ = [
    "create_cache_engine",
    "get_engine",
    "get_session_factory",
    "get_session",
    "init_db",
    "Base",
    "SqlAlchemyCache",
]

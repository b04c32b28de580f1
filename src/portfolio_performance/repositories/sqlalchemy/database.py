"""Database connection and session management for the persistent cache."""

from typing import Optional

from sqlalchemy import create_engine, Engine
from sqlalchemy.orm import sessionmaker, Session, declarative_base

from portfolio_performance.config.settings import get_settings

Base = declarative_base()

# Module-level database state, created on first use
_engine: Optional[Engine] = None
_SessionLocal: Optional[sessionmaker] = None


def create_cache_engine(database_url: str) -> Engine:
    """Create an engine for the given URL."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(database_url, connect_args=connect_args, echo=False)


def get_engine() -> Engine:
    """Get or create the database engine."""
    global _engine
    if _engine is None:
        settings = get_settings()
        if not settings.cache_database_url:
            raise RuntimeError("cache_database_url is not configured")
        _engine = create_cache_engine(settings.cache_database_url)
    return _engine


def get_session_factory() -> sessionmaker:
    """Get or create the session factory."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=get_engine(),
        )
    return _SessionLocal


def get_session() -> Session:
    """Get a new database session (for non-generator use)."""
    SessionLocal = get_session_factory()
    return SessionLocal()


def init_db() -> None:
    """Initialize database tables."""
    from portfolio_performance.repositories.sqlalchemy import orm_models  # noqa: F401

    engine = get_engine()
    Base.metadata.create_all(bind=engine)

"""
Database engine and session management.

One engine per process, created lazily from Settings.database_url.
Route handlers receive a session per request via get_db_session.
"""

import logging
from typing import Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from asset_hub.config import get_settings
from asset_hub.db_base import Base

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_engine() -> Engine:
    """Return the process-wide engine, creating it on first use."""
    global _engine, _session_factory
    if _engine is None:
        database_url = get_settings().database_url
        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        _engine = create_engine(database_url, pool_pre_ping=True, connect_args=connect_args)
        _session_factory = sessionmaker(autocommit=False, autoflush=False, bind=_engine)
        logger.info("Database engine created", extra={"dialect": _engine.dialect.name})
    return _engine


def get_session_factory() -> sessionmaker:
    get_engine()
    return _session_factory


def create_all_tables() -> None:
    """Create tables for all registered models (development and tests)."""
    import asset_hub.models  # noqa: F401  registers models on Base.metadata

    Base.metadata.create_all(get_engine())


def get_db_session() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a request-scoped session."""
    session = get_session_factory()()
    try:
        yield session
    finally:
        session.close()

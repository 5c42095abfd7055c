"""
Database connection and session management.

The feed renderer is synchronous, so a single sync engine and session
factory serve both the FastAPI dependency and scripts.
"""

import logging
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine, event, text
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from tickerfeed.config import get_config
from tickerfeed.database.models.base import Base

logger = logging.getLogger(__name__)

_engine = None
_session_factory = None


def _get_pool_kwargs(url: str) -> dict[str, Any]:
    """Get pool configuration for the database type."""
    if url.startswith("sqlite"):
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }

    return {
        "poolclass": QueuePool,
        "pool_size": 10,
        "max_overflow": 20,
        "pool_timeout": 30,
        "pool_recycle": 3600,
        "pool_pre_ping": True,  # Verify connections before use
    }


def init_db(url: str | None = None, create_tables: bool = True) -> None:
    """
    Initialize the database engine and session factory.

    Args:
        url: Database URL (defaults to the configured one)
        create_tables: Create missing tables after connecting
    """
    global _engine, _session_factory

    config = get_config()
    db_url = url or config.database.url

    _engine = create_engine(
        db_url,
        echo=config.database.echo,
        future=True,
        **_get_pool_kwargs(db_url),
    )

    if db_url.startswith("sqlite") and ":memory:" not in db_url:
        @event.listens_for(_engine, "connect")
        def on_connect(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    _session_factory = sessionmaker(
        _engine,
        class_=Session,
        expire_on_commit=False,
        autoflush=False,
    )

    if create_tables:
        Base.metadata.create_all(_engine)

    logger.info(f"Database initialized: {_engine.url.render_as_string(hide_password=True)}")


def get_session_factory() -> sessionmaker:
    """Get the session factory, initializing the engine on first use."""
    if _session_factory is None:
        init_db()
    return _session_factory


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Get a database session that is closed on exit."""
    session = get_session_factory()()
    try:
        yield session
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency for database sessions."""
    with get_session() as session:
        yield session


def check_connection(session: Session | None = None) -> dict[str, Any]:
    """Run a trivial query and report whether the database answered."""
    try:
        if session is not None:
            session.execute(text("SELECT 1"))
        else:
            with get_session() as own_session:
                own_session.execute(text("SELECT 1"))
        return {"status": "ok"}
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return {"status": "error", "error": str(e)}


def close_db() -> None:
    """Dispose of the engine and reset the session factory."""
    global _engine, _session_factory

    if _engine is not None:
        _engine.dispose()
        _engine = None
        _session_factory = None

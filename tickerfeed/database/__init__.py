"""
TickerFeed Database Module

Provides SQLAlchemy models and connection utilities.
"""

from tickerfeed.database.connection import (
    check_connection,
    close_db,
    get_db,
    get_session,
    get_session_factory,
    init_db,
)
from tickerfeed.database.models import Base

__all__ = [
    "Base",
    "check_connection",
    "close_db",
    "get_db",
    "get_session",
    "get_session_factory",
    "init_db",
]

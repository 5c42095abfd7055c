"""
TickerFeed Test Configuration

Shared fixtures and configuration for all tests.
"""

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import tickerfeed.config as config_module
from tickerfeed.config import TickerFeedConfig
from tickerfeed.database.connection import get_db
from tickerfeed.database.models import Base
from tickerfeed.feed.models import RenderContext
from tickerfeed.feed.repository import ContentRepository

# Wednesday 2024-06-12 14:30 UTC
FIXED_NOW = datetime(2024, 6, 12, 14, 30, tzinfo=timezone.utc)


# ============ Database Fixtures ============


@pytest.fixture(scope="function")
def engine():
    """Create a test database engine (in-memory SQLite)."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(engine) -> Generator[Session, None, None]:
    """Create a new database session for each test."""
    SessionLocal = sessionmaker(autoflush=False, expire_on_commit=False, bind=engine)
    session = SessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def db(db_session: Session) -> Generator[Session, None, None]:
    """Alias for db_session."""
    yield db_session


@pytest.fixture
def repository(db: Session) -> ContentRepository:
    return ContentRepository(db)


# ============ Render Fixtures ============


@pytest.fixture
def now() -> datetime:
    """Fixed reference instant for schedule-dependent tests."""
    return FIXED_NOW


@pytest.fixture
def ticker_config() -> TickerFeedConfig:
    """Default configuration, independent of the environment."""
    return TickerFeedConfig()


@pytest.fixture
def render_context(now: datetime) -> RenderContext:
    return RenderContext(timezone="UTC", now=now)


# ============ FastAPI Test Client Fixtures ============


@pytest.fixture(scope="function")
def app(db_session: Session) -> FastAPI:
    """Create a test FastAPI application."""
    from tickerfeed.main import create_app

    app = create_app(use_lifespan=False)

    # Override the database dependency
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    return app


@pytest.fixture(scope="function")
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """Create a synchronous test client."""
    with TestClient(app) as client:
        yield client


# ============ Temporary File Fixtures ============


@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(scope="function")
def temp_config_file(temp_dir: Path) -> Path:
    """Create a temporary config file."""
    config_file = temp_dir / "config.yaml"
    config_content = """
server:
  host: "127.0.0.1"
  port: 8500
  debug: true

database:
  url: "sqlite:///:memory:"

ticker:
  timezone: "America/New_York"
  image_cache_path: "C:\\\\ticker\\\\images"

logging:
  level: "DEBUG"
"""
    config_file.write_text(config_content)
    return config_file


# ============ Environment Fixtures ============


@pytest.fixture(autouse=True)
def clean_environment():
    """Clean environment variables and the config singleton for each test."""
    original_env = os.environ.copy()

    for key in list(os.environ.keys()):
        if key.startswith(("TICKERFEED_", "TICKER_")):
            del os.environ[key]
    config_module._config = None

    yield

    os.environ.clear()
    os.environ.update(original_env)
    config_module._config = None


# ============ Markers ============


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")

"""
TickerFeed Main Application

FastAPI application serving tickerfeed XML to broadcast playout.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

from tickerfeed import __version__
from tickerfeed.config import get_config, load_config
from tickerfeed.database import close_db, init_db

# Logger
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown tasks:
    - Load configuration
    - Initialize database
    """
    logger.info(f"Starting TickerFeed v{__version__}")

    config = load_config()
    logger.info(
        f"Configuration loaded, server port: {config.server.port}, "
        f"default timezone: {config.ticker.timezone}"
    )

    init_db()

    yield

    close_db()
    logger.info("TickerFeed stopped")


def create_app(use_lifespan: bool = True) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        use_lifespan: Run the startup/shutdown handlers (tests provide
            their own database and disable them)

    Returns:
        Configured FastAPI application instance.
    """
    from tickerfeed.api import health_router, ticker_router
    from tickerfeed.middleware import PreflightCORSMiddleware, TimingMiddleware

    app = FastAPI(
        title="TickerFeed",
        description="Schedule-gated ticker feed generator for broadcast graphics playout",
        version=__version__,
        lifespan=lifespan if use_lifespan else None,
    )

    config = get_config()
    app.add_middleware(
        TimingMiddleware,
        slow_request_threshold_ms=config.ticker.slow_request_threshold_ms,
    )
    # Outermost; answers preflight requests before routing
    app.add_middleware(PreflightCORSMiddleware)

    app.include_router(ticker_router)
    app.include_router(health_router)

    return app


app = create_app()


def main() -> None:
    """
    Main entry point for running the server.

    Called via the ``tickerfeed`` console script.
    """
    import uvicorn
    from tickerfeed.utils.logging_setup import parse_size, setup_logging

    config = load_config()

    setup_logging(
        log_level=config.logging.level,
        log_file_name=config.logging.file,
        log_to_console=True,
        log_to_file=True,
        max_bytes=parse_size(config.logging.max_size),
        backup_count=config.logging.backup_count,
        log_format=config.logging.format,
    )

    logger.info(f"Starting TickerFeed v{__version__}")

    uvicorn.run(
        "tickerfeed.main:app",
        host=config.server.host,
        port=config.server.port,
        reload=config.server.debug,
        log_level=config.server.log_level.lower(),
    )


if __name__ == "__main__":
    main()

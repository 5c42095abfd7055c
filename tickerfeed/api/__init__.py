"""API routes for TickerFeed"""

from tickerfeed.api.health import router as health_router
from tickerfeed.api.ticker import router as ticker_router

__all__ = ["health_router", "ticker_router"]

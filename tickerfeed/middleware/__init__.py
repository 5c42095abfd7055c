"""HTTP middleware for TickerFeed."""

from tickerfeed.middleware.http import CORS_HEADERS, PreflightCORSMiddleware, TimingMiddleware

__all__ = ["CORS_HEADERS", "PreflightCORSMiddleware", "TimingMiddleware"]

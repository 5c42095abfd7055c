"""
HTTP middleware for FastAPI.

Provides:
- Permissive CORS headers for playout clients and the authoring dashboards
- Request timing and slow request logging
"""

import logging
import time
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


# ============================================================================
# CORS Middleware
# ============================================================================

class PreflightCORSMiddleware(BaseHTTPMiddleware):
    """
    Adds CORS headers to every response.

    Preflight ``OPTIONS`` requests are answered directly with ``ok``.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.method == "OPTIONS":
            return PlainTextResponse("ok", headers=CORS_HEADERS)

        response = await call_next(request)
        for name, value in CORS_HEADERS.items():
            response.headers[name] = value
        return response


# ============================================================================
# Timing Middleware
# ============================================================================

class TimingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that tracks request timing.

    Features:
    - Slow request logging
    - ``X-Response-Time`` header
    """

    def __init__(
        self,
        app: ASGIApp,
        slow_request_threshold_ms: float = 2000,
        enable_header: bool = True,
    ):
        super().__init__(app)
        self.slow_request_threshold_ms = slow_request_threshold_ms
        self.enable_header = enable_header

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000

        if duration_ms > self.slow_request_threshold_ms:
            logger.warning(
                f"Slow request: {request.method} {request.url.path} "
                f"took {duration_ms:.2f}ms"
            )

        if self.enable_header:
            response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"

        return response


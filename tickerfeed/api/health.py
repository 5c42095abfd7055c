"""Health check API endpoint for TickerFeed"""

import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tickerfeed import __version__
from tickerfeed.config import get_config
from tickerfeed.database import check_connection, get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
def health_check(db: Session = Depends(get_db)) -> dict[str, Any]:
    """
    Report service status.

    Returns:
        Status, version, default timezone and a database check
    """
    database = check_connection(db)
    status = "healthy" if database["status"] == "ok" else "degraded"
    if status != "healthy":
        logger.warning(f"Health check degraded: {database.get('error')}")

    return {
        "status": status,
        "version": __version__,
        "timezone": get_config().ticker.timezone,
        "database": database,
        "timestamp": datetime.utcnow().isoformat(),
    }

"""Ticker feed endpoints (tickerfeed XML and image listing)"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, Response
from sqlalchemy.orm import Session

from tickerfeed.config import get_config
from tickerfeed.database import get_db
from tickerfeed.feed import ChannelNotFoundError, TickerFeedRenderer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ticker", tags=["Ticker"])

NO_CACHE_HEADERS = {"Cache-Control": "no-cache, no-store, must-revalidate"}


def _is_true(value: Optional[str]) -> bool:
    return value == "true"


def _error_response(error: Exception, context: str) -> JSONResponse:
    if isinstance(error, ChannelNotFoundError):
        return JSONResponse(status_code=404, content={"error": str(error)})

    logger.error(f"Error {context}: {error}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "details": str(error)},
    )


@router.get("/{channel_name}/images")
def get_channel_images(
    channel_name: str,
    include_inactive: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """List the image URLs referenced by a channel's on-air content."""
    try:
        renderer = TickerFeedRenderer(db, get_config())
        images = renderer.collect_images(channel_name, include_inactive=_is_true(include_inactive))
    except Exception as e:
        return _error_response(e, f"listing images for channel {channel_name}")

    return JSONResponse(content=images, headers=NO_CACHE_HEADERS)


@router.get("/{channel_name}")
def get_ticker_feed(
    channel_name: str,
    include_inactive: Optional[str] = Query(None),
    include_ids: Optional[str] = Query(None, alias="includeIds"),
    region_id: Optional[str] = Query(None),
    zone_id: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Render a channel as tickerfeed XML.

    Query parameters:
        include_inactive=true: ignore the ``active`` flag on nodes
        includeIds=true: emit element IDs
        region_id / zone_id: region passthrough for school closings
    """
    try:
        renderer = TickerFeedRenderer(db, get_config())
        xml_content = renderer.render_xml(
            channel_name,
            include_inactive=_is_true(include_inactive),
            include_ids=_is_true(include_ids),
            region_id=region_id,
            zone_id=zone_id,
        )
    except Exception as e:
        return _error_response(e, f"rendering channel {channel_name}")

    return Response(
        content=xml_content,
        media_type="application/xml; charset=utf-8",
        headers=NO_CACHE_HEADERS,
    )

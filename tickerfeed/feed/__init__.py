"""
Ticker feed generation.

Walks a channel's schedule-gated content tree and renders it to the
tickerfeed XML format, or lists the images it references.
"""

from tickerfeed.feed.errors import ChannelNotFoundError, TickerFeedError
from tickerfeed.feed.models import (
    Element,
    ElementField,
    ElementTTL,
    GroupOutput,
    PlaylistOutput,
    RegionPassthrough,
    RenderContext,
    TickerDocument,
)
from tickerfeed.feed.renderer import TickerFeedRenderer, determine_playlist_type
from tickerfeed.feed.schedule import is_active
from tickerfeed.feed.serializer import TickerFeedSerializer

__all__ = [
    "ChannelNotFoundError",
    "Element",
    "ElementField",
    "ElementTTL",
    "GroupOutput",
    "PlaylistOutput",
    "RegionPassthrough",
    "RenderContext",
    "TickerDocument",
    "TickerFeedError",
    "TickerFeedRenderer",
    "TickerFeedSerializer",
    "determine_playlist_type",
    "is_active",
]

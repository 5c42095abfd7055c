"""
Ticker feed renderer.

Entry point for rendering a channel: resolves the channel, walks its
on-air content and either builds the XML document or lists the images the
content references.
"""

import logging
from datetime import datetime, timezone as dt_timezone
from typing import Optional

from sqlalchemy.orm import Session

from tickerfeed.config import TickerFeedConfig, get_config
from tickerfeed.database.models import ContentNode, FeedNode, NodeType
from tickerfeed.feed.elements import ElementBuilder, is_metadata_field
from tickerfeed.feed.errors import ChannelNotFoundError
from tickerfeed.feed.images import is_image_url
from tickerfeed.feed.models import (
    GroupOutput,
    PlaylistOutput,
    RegionPassthrough,
    RenderContext,
    TickerDocument,
)
from tickerfeed.feed.processors import ComponentRegistry, create_default_registry
from tickerfeed.feed.repository import ContentRepository
from tickerfeed.feed.serializer import TickerFeedSerializer
from tickerfeed.feed.synthetic import SyntheticItemGenerator
from tickerfeed.feed.traversal import ContentTreeWalker, TreeVisitor

logger = logging.getLogger(__name__)


def determine_playlist_type(playlist: FeedNode) -> str:
    """Explicit type, else flipping for breaking/urgent playlists, else scrolling."""
    if playlist.playlist_type:
        return playlist.playlist_type
    name = (playlist.name or "").lower()
    if "breaking" in name or "urgent" in name:
        return "flipping_carousel"
    return "scrolling_carousel"


class DocumentBuilder(TreeVisitor):
    """Visitor that builds the document, pruning empty buckets and playlists."""

    def __init__(
        self,
        channel: FeedNode,
        context: RenderContext,
        elements: ElementBuilder,
        generator: SyntheticItemGenerator,
    ):
        self.document = TickerDocument(channel_name=channel.name)
        self.context = context
        self.elements = elements
        self.generator = generator
        self._current: Optional[PlaylistOutput] = None

    def begin_playlist(self, playlist: FeedNode) -> None:
        self._current = PlaylistOutput(name=playlist.name, type=determine_playlist_type(playlist))

    def visit_bucket(self, bucket: FeedNode, items: list[ContentNode]) -> None:
        elements = []
        for item in items:
            elements.extend(self.elements.build(item, self.context))

        if not elements:
            logger.debug(f"Bucket {bucket.name} ({bucket.id}) has no elements")
            return

        generated = self.generator.generate(bucket, self.context)
        if generated is not None:
            elements.insert(0, generated)

        self._current.groups.append(
            GroupOutput(
                bucket_id=bucket.id,
                name=bucket.name,
                content_id=bucket.content_id,
                elements=elements,
            )
        )

    def end_playlist(self, playlist: FeedNode) -> None:
        if self._current and self._current.groups:
            self.document.playlists.append(self._current)
        else:
            logger.debug(f"Playlist {playlist.name} ({playlist.id}) has no content, omitted")
        self._current = None


class ImageCollector(TreeVisitor):
    """Visitor that gathers image URLs from on-air item fields, first seen first."""

    def __init__(self, repository: ContentRepository):
        self.repository = repository
        self._images: dict[str, None] = {}

    def visit_bucket(self, bucket: FeedNode, items: list[ContentNode]) -> None:
        for item in items:
            try:
                fields = self.repository.get_fields(item.id)
            except Exception as e:
                logger.error(f"Error fetching fields for item {item.id}: {e}")
                continue
            for item_field in fields:
                if is_metadata_field(item_field.name):
                    continue
                if is_image_url(item_field.value):
                    self._images.setdefault(item_field.value, None)

    @property
    def images(self) -> list[str]:
        return list(self._images)


class TickerFeedRenderer:
    """
    Renders channels.

    Usage:
        renderer = TickerFeedRenderer(session)
        xml = renderer.render_xml("News", include_ids=True)
        images = renderer.collect_images("News")
    """

    def __init__(
        self,
        session: Session,
        config: Optional[TickerFeedConfig] = None,
        registry: Optional[ComponentRegistry] = None,
    ):
        self.config = config or get_config()
        self.repository = ContentRepository(session)
        self.registry = registry or create_default_registry()
        self.serializer = TickerFeedSerializer(self.config.ticker)

    def resolve_channel(self, channel_name: str) -> FeedNode:
        channel = self.repository.get_node_by_name_and_type(channel_name, NodeType.CHANNEL)
        if channel is None:
            raise ChannelNotFoundError(channel_name)
        return channel

    def create_context(
        self,
        channel: FeedNode,
        include_inactive: bool = False,
        include_ids: bool = False,
        region_id: Optional[str] = None,
        zone_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> RenderContext:
        """Fresh per-render context; the channel's zone wins over the default."""
        reference = now or datetime.now(dt_timezone.utc)
        if reference.tzinfo is None:
            reference = reference.replace(tzinfo=dt_timezone.utc)

        return RenderContext(
            timezone=channel.timezone or self.config.ticker.timezone,
            now=reference,
            include_inactive=include_inactive,
            include_ids=include_ids,
            passthrough=RegionPassthrough(region_id=region_id or None, zone_id=zone_id or None),
            image_cache_path=self.config.ticker.image_cache_path,
        )

    def render(
        self,
        channel_name: str,
        include_inactive: bool = False,
        include_ids: bool = False,
        region_id: Optional[str] = None,
        zone_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> TickerDocument:
        """
        Build the document for a channel.

        Args:
            channel_name: Channel name
            include_inactive: Ignore the ``active`` column (schedules still apply)
            include_ids: Emit element IDs when serialized
            region_id: Request region for school-closings passthrough
            zone_id: Request zone for school-closings passthrough
            now: Reference instant

        Returns:
            Rendered document

        Raises:
            ChannelNotFoundError: No channel with this name
        """
        channel = self.resolve_channel(channel_name)
        context = self.create_context(channel, include_inactive, include_ids, region_id, zone_id, now)
        logger.info(f"Rendering channel {channel_name} (timezone {context.timezone})")

        builder = DocumentBuilder(
            channel,
            context,
            ElementBuilder(self.repository, self.registry, self.config.ticker),
            SyntheticItemGenerator(self.repository),
        )
        ContentTreeWalker(self.repository, context).walk(channel, builder)

        document = builder.document
        logger.info(f"Rendered channel {channel_name}: {len(document.playlists)} playlists")
        return document

    def render_xml(
        self,
        channel_name: str,
        include_inactive: bool = False,
        include_ids: bool = False,
        region_id: Optional[str] = None,
        zone_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> str:
        document = self.render(channel_name, include_inactive, include_ids, region_id, zone_id, now)
        return self.serializer.serialize(document, include_ids=include_ids)

    def collect_images(
        self,
        channel_name: str,
        include_inactive: bool = False,
        now: Optional[datetime] = None,
    ) -> list[str]:
        """List the distinct image URLs referenced by a channel's on-air items."""
        channel = self.resolve_channel(channel_name)
        context = self.create_context(channel, include_inactive=include_inactive, now=now)

        collector = ImageCollector(self.repository)
        ContentTreeWalker(self.repository, context).walk(channel, collector)

        logger.info(f"Collected {len(collector.images)} images for channel {channel_name}")
        return collector.images

"""
Channel tree traversal.

Walks channel -> playlist -> bucket -> (item | itemFolder)* applying the
``active`` query filter and schedule gates at every level, and reports what
is on air to a visitor. Feed rendering and image listing are both visitors
of the same walk.
"""

import logging
from typing import Optional

from tickerfeed.database.models import ContentNode, FeedNode, NodeType
from tickerfeed.feed.models import RenderContext
from tickerfeed.feed.repository import ContentRepository
from tickerfeed.feed.schedule import is_active

logger = logging.getLogger(__name__)


class TreeVisitor:
    """
    Receives the on-air part of a channel.

    ``begin_playlist`` is only called for playlists with at least one
    active bucket; every ``visit_bucket`` call falls between a
    ``begin_playlist`` and the matching ``end_playlist``.
    """

    def begin_playlist(self, playlist: FeedNode) -> None:
        pass

    def visit_bucket(self, bucket: FeedNode, items: list[ContentNode]) -> None:
        pass

    def end_playlist(self, playlist: FeedNode) -> None:
        pass


class ContentTreeWalker:
    """
    Schedule-gated walk of one channel.

    Usage:
        walker = ContentTreeWalker(repository, context)
        walker.walk(channel, visitor)
    """

    def __init__(self, repository: ContentRepository, context: RenderContext):
        self.repository = repository
        self.context = context

    def is_on_air(self, node: FeedNode | ContentNode) -> bool:
        return is_active(node.schedule, self.context.timezone, self.context.now)

    def walk(self, channel: FeedNode, visitor: TreeVisitor) -> None:
        """Visit every on-air playlist and bucket of a channel, in order."""
        playlists = self.repository.get_children(
            channel.id, NodeType.PLAYLIST, active_only=self.context.active_only
        )
        for playlist in playlists:
            if not self.is_on_air(playlist):
                logger.debug(f"Skipping playlist {playlist.name} ({playlist.id}): outside schedule")
                continue

            buckets = self.active_buckets(playlist)
            if not buckets:
                logger.debug(f"Skipping playlist {playlist.name} ({playlist.id}): no active buckets")
                continue

            visitor.begin_playlist(playlist)
            for bucket in buckets:
                visitor.visit_bucket(bucket, self.collect_items(bucket.content_id))
            visitor.end_playlist(playlist)

    def active_buckets(self, playlist: FeedNode) -> list[FeedNode]:
        buckets = self.repository.get_children(
            playlist.id, NodeType.BUCKET, active_only=self.context.active_only
        )
        active = []
        for bucket in buckets:
            if self.is_on_air(bucket):
                active.append(bucket)
            else:
                logger.debug(f"Skipping bucket {bucket.name} ({bucket.id}): outside schedule")
        return active

    def collect_items(self, container_id: Optional[str]) -> list[ContentNode]:
        """
        Collect on-air items below a content node, depth first.

        An item folder that is off air hides everything inside it,
        whatever the descendants' own schedules say.
        """
        if not container_id:
            return []

        items: list[ContentNode] = []
        for child in self.repository.get_content_children(
            container_id, active_only=self.context.active_only
        ):
            if child.type == NodeType.ITEM:
                if self.is_on_air(child):
                    items.append(child)
                else:
                    logger.debug(f"Skipping item {child.id}: outside schedule")
            elif child.type == NodeType.ITEM_FOLDER:
                if self.is_on_air(child):
                    items.extend(self.collect_items(child.id))
                else:
                    logger.debug(f"Skipping item folder {child.id}: outside schedule")
        return items

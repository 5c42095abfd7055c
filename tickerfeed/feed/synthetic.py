"""
Synthetic bucket items.

A bucket's content root may carry a ``generateItem`` config::

    {"generateItem": {"enabled": true, "templateId": "...",
                      "fieldName": "...", "fieldValue": "...", "duration": 10}}

When enabled, one generated element is put in front of the bucket's real
elements. Its ID is the content root ID plus an instance number counting
how often that content has been rendered in the current document.
"""

import json
import logging
from typing import Any, Optional

from tickerfeed.database.models import FeedNode
from tickerfeed.feed.models import Element, RenderContext
from tickerfeed.feed.repository import ContentRepository
from tickerfeed.utils.text import to_text

logger = logging.getLogger(__name__)


def load_generate_config(config: Any) -> Optional[dict[str, Any]]:
    """Extract the ``generateItem`` block from a content root config."""
    if isinstance(config, str):
        try:
            config = json.loads(config)
        except ValueError:
            logger.warning("Invalid content config JSON, ignoring generateItem")
            return None
    if not isinstance(config, dict):
        return None
    generate = config.get("generateItem")
    return generate if isinstance(generate, dict) else None


class SyntheticItemGenerator:
    """Builds generated elements for buckets."""

    def __init__(self, repository: ContentRepository):
        self.repository = repository

    def generate(self, bucket: FeedNode, context: RenderContext) -> Optional[Element]:
        """
        Build the generated element for a bucket.

        Args:
            bucket: Bucket being rendered
            context: Render context holding the instance counters

        Returns:
            Element, or None when the bucket has nothing to generate
        """
        if not bucket.content_id:
            return None

        try:
            root = self.repository.get_content_node(bucket.content_id)
            if root is None:
                return None

            generate = load_generate_config(root.config)
            if not generate or not generate.get("enabled"):
                return None

            template = self.repository.get_template(to_text(generate.get("templateId")) or None)
        except Exception as e:
            logger.error(f"Error fetching generateItem content {bucket.content_id}: {e}", exc_info=True)
            return None

        if template is None:
            logger.warning(f"generateItem template not found for content {bucket.content_id}")
            return None

        index = context.next_instance(bucket.content_id)
        element = Element(id=f"{bucket.content_id}_{index}", template=template.name)

        field_name = generate.get("fieldName")
        if field_name:
            element.add_field(str(field_name), to_text(generate.get("fieldValue")))

        try:
            duration = int(generate.get("duration") or 0)
        except (TypeError, ValueError):
            duration = 0
        if duration > 0:
            element.duration = str(duration)

        logger.debug(f"Generated element {element.id} for bucket {bucket.name}")
        return element

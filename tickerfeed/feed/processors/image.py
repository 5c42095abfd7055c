"""
Image and plain field processing.
"""

from typing import Any

from tickerfeed.database.models import ItemField
from tickerfeed.feed.images import to_local_cache_path
from tickerfeed.feed.models import ElementField
from tickerfeed.feed.processors.base import (
    BaseProcessor,
    ComponentType,
    FieldAugmentation,
    ProcessorContext,
)


class ImageProcessor(BaseProcessor):
    """
    Emits a field unchanged except for image URLs, which are rewritten to
    the local image cache.

    Also used for fields without a dedicated component, since undeclared
    fields may still hold image URLs.
    """

    component_types = (ComponentType.IMAGE,)

    def process(
        self,
        item_field: ItemField,
        component: dict[str, Any],
        context: ProcessorContext,
    ) -> FieldAugmentation:
        value = to_local_cache_path(item_field.value, context.render.image_cache_path)
        return FieldAugmentation(fields=[ElementField(name=item_field.name, value=value or "")])

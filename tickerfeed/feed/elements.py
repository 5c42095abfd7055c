"""
Element construction.

Turns one content item into its output elements. Normally an item becomes
a single element holding its fields; an item with a field bound to an
item-replacing component (election, school closings) becomes whatever that
component's processor returns instead.
"""

import logging
from typing import Any, Iterable, Optional

from tickerfeed.config import TickerConfig
from tickerfeed.database.models import ContentNode, ItemField
from tickerfeed.feed.models import Element, ElementTTL, RenderContext
from tickerfeed.feed.processors import (
    ComponentRegistry,
    FieldAugmentation,
    ItemReplacement,
    ProcessorContext,
)
from tickerfeed.feed.repository import ContentRepository
from tickerfeed.feed.schema import find_component_in_schema

logger = logging.getLogger(__name__)

METADATA_PREFIX = "__"

TIME_SENSITIVE_KEYWORDS = ("breaking", "urgent", "live", "now", "alert")


def is_metadata_field(name: Optional[str]) -> bool:
    return bool(name) and name.startswith(METADATA_PREFIX)


def has_time_sensitive_field(fields: Iterable[ItemField]) -> bool:
    """Whether any field name or value mentions a time-sensitivity keyword."""
    for item_field in fields:
        name = (item_field.name or "").lower()
        value = (item_field.value or "").lower()
        if any(keyword in name or keyword in value for keyword in TIME_SENSITIVE_KEYWORDS):
            return True
    return False


class ElementBuilder:
    """
    Builds elements for content items.

    Usage:
        builder = ElementBuilder(repository, registry, config.ticker)
        elements = builder.build(item, context)
    """

    def __init__(
        self,
        repository: ContentRepository,
        registry: ComponentRegistry,
        settings: TickerConfig,
    ):
        self.repository = repository
        self.registry = registry
        self.settings = settings

    def build(self, item: ContentNode, context: RenderContext) -> list[Element]:
        """
        Build the output elements for one item.

        Args:
            item: Active content item
            context: Render context

        Returns:
            Elements in output order (possibly empty)
        """
        try:
            fields, template_name, schema = self._load_item(item)
        except Exception as e:
            logger.error(f"Error fetching content for item {item.id}: {e}", exc_info=True)
            return []

        components: list[tuple[ItemField, Optional[dict[str, Any]]]] = []
        for item_field in fields:
            if is_metadata_field(item_field.name):
                continue
            component = find_component_in_schema(schema, item_field.name) if schema else None
            components.append((item_field, component))

        processor_context = ProcessorContext(
            repository=self.repository,
            render=context,
            item=item,
            settings=self.settings,
        )

        # A single item-replacing field determines the whole output
        for item_field, component in components:
            component_type = component.get("type") if component else None
            if self.registry.is_item_replacing(component_type):
                return self._replace_item(item_field, component, processor_context)

        element = Element(id=item.id, template=template_name)
        for item_field, component in components:
            self._augment(element, item_field, component, processor_context)

        if item.duration and item.duration > 0:
            element.duration = str(item.duration)

        if has_time_sensitive_field(fields):
            element.ttl = ElementTTL(value=str(self.settings.ttl_seconds))

        return [element]

    def _replace_item(
        self,
        item_field: ItemField,
        component: dict[str, Any],
        context: ProcessorContext,
    ) -> list[Element]:
        processor = self.registry.get(component.get("type"))
        logger.debug(f"Item {context.item.id} replaced by {processor.name} via field {item_field.name}")
        try:
            result = processor.process(item_field, component, context)
        except Exception as e:
            logger.error(f"{processor.name} failed for item {context.item.id}: {e}", exc_info=True)
            return []

        if isinstance(result, ItemReplacement):
            return result.elements
        logger.warning(f"{processor.name} returned {type(result).__name__} for item {context.item.id}")
        return []

    def _augment(
        self,
        element: Element,
        item_field: ItemField,
        component: Optional[dict[str, Any]],
        context: ProcessorContext,
    ) -> None:
        component_type = component.get("type") if component else None
        processor = self.registry.resolve(component_type)
        if processor is None:
            element.add_field(item_field.name, item_field.value or "")
            return

        try:
            result = processor.process(item_field, component or {}, context)
        except Exception as e:
            logger.error(
                f"{processor.name} failed for field {item_field.name} on item {context.item.id}: {e}",
                exc_info=True,
            )
            return

        if not isinstance(result, FieldAugmentation):
            logger.warning(f"{processor.name} returned {type(result).__name__} for field {item_field.name}")
            return

        element.fields.extend(result.fields)
        if result.template:
            element.template = result.template

    def _load_item(self, item: ContentNode) -> tuple[list[ItemField], Optional[str], Any]:
        """Fetch an item's fields, template name and form schema."""
        fields = self.repository.get_fields(item.id)

        template_name = None
        schema: Any = None
        if item.template_id:
            template = self.repository.get_template(item.template_id)
            if template is not None:
                template_name = template.name
            else:
                logger.warning(f"Template {item.template_id} not found for item {item.id}")

            form = self.repository.get_template_form(item.template_id)
            if form is not None:
                schema = form.form_schema

        return fields, template_name, schema

"""
School closings component processor.

One field expands into one element per matching closing. Region and zone
come from the stored field value, falling back to the component defaults;
when the stored value sets ``passthrough`` the request's ``region_id`` /
``zone_id`` take precedence, so one authored item can serve every regional
variant of a channel.
"""

import logging
from typing import Any

from tickerfeed.database.models import ItemField, SchoolClosing
from tickerfeed.feed.models import Element
from tickerfeed.feed.processors.base import (
    BaseProcessor,
    ComponentType,
    ItemReplacement,
    ProcessorContext,
    parse_json_value,
)
from tickerfeed.utils.text import fill_placeholders, to_text

logger = logging.getLogger(__name__)


def closing_variables(closing: SchoolClosing) -> dict[str, str]:
    """Placeholder values for one closing."""
    return {
        "organization": closing.organization_name or "N/A",
        "region": closing.region_name or closing.region_id or "N/A",
        "zone": closing.zone_name or closing.zone_id or "N/A",
        "status": closing.status_description or "Closed",
        "statusDay": closing.status_day or "N/A",
        "city": closing.city or "",
        "county": closing.county_name or "",
        "state": closing.state or "",
    }


class SchoolClosingsProcessor(BaseProcessor):
    """Builds one element per school closing."""

    component_types = (ComponentType.SCHOOL_CLOSINGS,)
    replaces_item = True

    def resolve_filters(
        self,
        item_field: ItemField,
        component: dict[str, Any],
        context: ProcessorContext,
    ) -> tuple[str, str]:
        """
        Work out the region and zone to query.

        Returns:
            (region_id, zone_id); empty strings mean "no filter"
        """
        region_id = to_text(component.get("defaultRegionId"))
        zone_id = to_text(component.get("defaultZoneId"))

        filters = parse_json_value(item_field.value)
        if filters is None and item_field.value:
            logger.debug(f"Could not parse school closings value on item {context.item.id}, using defaults")
        if not isinstance(filters, dict):
            return region_id, zone_id

        region_id = to_text(filters.get("regionId")) or region_id
        zone_id = to_text(filters.get("zoneId")) or zone_id

        if filters.get("passthrough"):
            passthrough = context.render.passthrough
            region_id = passthrough.region_id or region_id
            zone_id = passthrough.zone_id or zone_id

        return region_id, zone_id

    def process(
        self,
        item_field: ItemField,
        component: dict[str, Any],
        context: ProcessorContext,
    ) -> ItemReplacement:
        template_name = component.get("templateName") or None
        field1 = component.get("field1") or "01"
        field2 = component.get("field2") or "02"
        format1 = component.get("format1") or "{{organization}}"
        format2 = component.get("format2") or "{{status}}"

        region_id, zone_id = self.resolve_filters(item_field, component, context)
        logger.debug(f"School closings filters: region_id={region_id!r}, zone_id={zone_id!r}")

        try:
            closings = context.repository.get_school_closings(region_id or None, zone_id or None)
        except Exception as e:
            logger.error(f"Error fetching school closings for item {context.item.id}: {e}")
            return ItemReplacement()

        elements = []
        for index, closing in enumerate(closings):
            variables = closing_variables(closing)
            element = Element(
                id=f"{context.item.id}_closing_{index}",
                template=template_name,
                duration=context.item_duration,
            )
            element.add_field(field1, fill_placeholders(format1, variables))
            element.add_field(field2, fill_placeholders(format2, variables))
            elements.append(element)

        logger.debug(f"School closings item {context.item.id} produced {len(elements)} elements")
        return ItemReplacement(elements=elements)

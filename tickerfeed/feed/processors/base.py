"""
Base component processor and common types.

A processor turns one item field bound to a form-schema component into
output. Two result shapes exist:

- ``ItemReplacement``: the processor produces the item's entire output as a
  list of elements (election, school closings).
- ``FieldAugmentation``: the processor contributes fields, and optionally a
  template override, to the item's single element (weather, image, plain
  fields).
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union

from tickerfeed.config import TickerConfig
from tickerfeed.database.models import ContentNode, ItemField
from tickerfeed.feed.models import Element, ElementField, RenderContext
from tickerfeed.feed.repository import ContentRepository

logger = logging.getLogger(__name__)


class ComponentType(str, Enum):
    """Form-schema component types with dedicated processing."""

    WEATHER_CITIES = "weatherCities"
    WEATHER_LOCATIONS = "weatherLocations"  # Legacy alias of weatherCities
    WEATHER_FORECAST = "weatherForecast"
    ELECTION = "election"
    SCHOOL_CLOSINGS = "schoolClosings"
    IMAGE = "image"


@dataclass
class ItemReplacement:
    """Elements that replace an item's normal output."""

    elements: list[Element] = field(default_factory=list)


@dataclass
class FieldAugmentation:
    """Fields added to an item's element."""

    fields: list[ElementField] = field(default_factory=list)
    template: Optional[str] = None


ProcessorResult = Union[ItemReplacement, FieldAugmentation]


@dataclass
class ProcessorContext:
    """
    Everything a processor may read while handling one field.

    Attributes:
        repository: Data access
        render: Per-render state (reference time, passthrough, cache path)
        item: Item being rendered
        settings: Ticker configuration
    """

    repository: ContentRepository
    render: RenderContext
    item: ContentNode
    settings: TickerConfig

    @property
    def item_duration(self) -> Optional[str]:
        """Item duration as text when set and positive."""
        duration = self.item.duration
        if duration and duration > 0:
            return str(duration)
        return None


def parse_json_value(value: Optional[str], default: Any = None) -> Any:
    """Parse a JSON field value, returning ``default`` on failure."""
    if value is None or value == "":
        return default
    try:
        return json.loads(value)
    except (ValueError, TypeError):
        return default


class BaseProcessor(ABC):
    """
    Abstract base class for component processors.

    Subclasses set ``component_types`` to the component types they handle
    and ``replaces_item`` when their output replaces the whole item.
    """

    component_types: tuple[ComponentType, ...] = ()
    replaces_item: bool = False

    @abstractmethod
    def process(
        self,
        item_field: ItemField,
        component: dict[str, Any],
        context: ProcessorContext,
    ) -> ProcessorResult:
        """
        Process one field.

        Args:
            item_field: Stored field
            component: Component definition from the form schema
            context: Processing context

        Returns:
            ItemReplacement for item-replacing processors,
            FieldAugmentation otherwise
        """
        pass

    @property
    def name(self) -> str:
        return self.__class__.__name__

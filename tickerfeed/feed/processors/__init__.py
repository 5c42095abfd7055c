"""
Component processor registry.

Maps form-schema component types to the processors that handle them.
Fields whose component has no registered processor go to the fallback
processor.
"""

import logging
from typing import Optional

from tickerfeed.feed.processors.base import (
    BaseProcessor,
    ComponentType,
    FieldAugmentation,
    ItemReplacement,
    ProcessorContext,
    ProcessorResult,
)
from tickerfeed.feed.processors.election import ElectionProcessor
from tickerfeed.feed.processors.image import ImageProcessor
from tickerfeed.feed.processors.school_closings import SchoolClosingsProcessor
from tickerfeed.feed.processors.weather import (
    WeatherCitiesProcessor,
    WeatherForecastProcessor,
)

logger = logging.getLogger(__name__)


class ComponentRegistry:
    """
    Component type to processor lookup.

    Usage:
        registry = ComponentRegistry(fallback=ImageProcessor())
        registry.register_processor(WeatherForecastProcessor())
        processor = registry.get("weatherForecast")
    """

    def __init__(self, fallback: Optional[BaseProcessor] = None):
        self._processors: dict[str, BaseProcessor] = {}
        self.fallback = fallback

    def register_processor(
        self,
        processor: BaseProcessor,
        component_types: Optional[list[str]] = None,
    ) -> None:
        """
        Register a processor.

        Args:
            processor: Processor instance
            component_types: Types to register it for (defaults to the
                processor's own ``component_types``)
        """
        types = component_types or [t.value for t in processor.component_types]
        for component_type in types:
            key = component_type.value if isinstance(component_type, ComponentType) else str(component_type)
            self._processors[key] = processor
            logger.debug(f"Registered {processor.name} for component type {key}")

    def get(self, component_type: Optional[str]) -> Optional[BaseProcessor]:
        """Processor registered for a component type, if any."""
        if not component_type:
            return None
        return self._processors.get(str(component_type))

    def resolve(self, component_type: Optional[str]) -> Optional[BaseProcessor]:
        """Registered processor, else the fallback."""
        return self.get(component_type) or self.fallback

    def is_item_replacing(self, component_type: Optional[str]) -> bool:
        processor = self.get(component_type)
        return processor is not None and processor.replaces_item

    @property
    def component_types(self) -> list[str]:
        return sorted(self._processors)


def create_default_registry() -> ComponentRegistry:
    """Registry with the built-in weather, election, school-closings and image processors."""
    image = ImageProcessor()
    registry = ComponentRegistry(fallback=image)
    registry.register_processor(WeatherCitiesProcessor())
    registry.register_processor(WeatherForecastProcessor())
    registry.register_processor(ElectionProcessor())
    registry.register_processor(SchoolClosingsProcessor())
    registry.register_processor(image)
    return registry


__all__ = [
    "BaseProcessor",
    "ComponentRegistry",
    "ComponentType",
    "ElectionProcessor",
    "FieldAugmentation",
    "ImageProcessor",
    "ItemReplacement",
    "ProcessorContext",
    "ProcessorResult",
    "SchoolClosingsProcessor",
    "WeatherCitiesProcessor",
    "WeatherForecastProcessor",
    "create_default_registry",
]

"""
Test Fixtures

Factories for content, template and domain test data.
"""

from .factories import (
    ChannelFactory,
    ContentFactory,
    ElectionFactory,
    SchoolClosingFactory,
    TemplateFactory,
    WeatherFactory,
)

__all__ = [
    "ChannelFactory",
    "ContentFactory",
    "ElectionFactory",
    "SchoolClosingFactory",
    "TemplateFactory",
    "WeatherFactory",
]

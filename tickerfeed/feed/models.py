"""
Render data types.

A render produces a ``TickerDocument`` of playlists, groups (one per bucket)
and elements. ``RenderContext`` carries everything one render needs and is
created fresh for every request.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone as dt_timezone
from typing import Optional


@dataclass
class ElementField:
    """Name/value pair shown by a template."""

    name: str
    value: str


@dataclass
class ElementTTL:
    """Expiry instruction for the playout side."""

    action: str = "remove"
    value: str = "3600"


@dataclass
class Element:
    """
    One unit of rendered output.

    Attributes:
        fields: Template fields, in output order
        id: Element ID (only serialized when IDs are requested)
        template: Template name
        duration: Display duration in seconds, as text
        ttl: Expiry instruction for time-sensitive content
    """

    fields: list[ElementField] = field(default_factory=list)
    id: Optional[str] = None
    template: Optional[str] = None
    duration: Optional[str] = None
    ttl: Optional[ElementTTL] = None

    def add_field(self, name: str, value: str) -> None:
        self.fields.append(ElementField(name=name, value=value))


@dataclass
class GroupOutput:
    """Rendered bucket."""

    bucket_id: str
    name: str
    content_id: Optional[str]
    elements: list[Element] = field(default_factory=list)


@dataclass
class PlaylistOutput:
    """Rendered playlist."""

    name: str
    type: str
    groups: list[GroupOutput] = field(default_factory=list)


@dataclass
class TickerDocument:
    """Rendered channel."""

    channel_name: str
    playlists: list[PlaylistOutput] = field(default_factory=list)


@dataclass
class RegionPassthrough:
    """Region/zone request parameters forwarded to school-closings items."""

    region_id: Optional[str] = None
    zone_id: Optional[str] = None


@dataclass
class RenderContext:
    """
    Per-render state threaded through traversal and element construction.

    Attributes:
        timezone: Zone name schedules are evaluated in
        now: Reference instant for schedules and forecasts
        include_inactive: Skip the ``active`` column filter on queries
        include_ids: Emit element IDs
        passthrough: Request region/zone for school closings
        image_cache_path: Local prefix used to rewrite image URLs
    """

    timezone: str = "UTC"
    now: datetime = field(default_factory=lambda: datetime.now(dt_timezone.utc))
    include_inactive: bool = False
    include_ids: bool = False
    passthrough: RegionPassthrough = field(default_factory=RegionPassthrough)
    image_cache_path: Optional[str] = None
    _instances: dict[str, int] = field(default_factory=dict, repr=False)

    @property
    def active_only(self) -> bool:
        return not self.include_inactive

    def next_instance(self, key: str) -> int:
        """Return the next synthetic instance number for ``key`` (0, 1, ...)."""
        index = self._instances.get(key, 0)
        self._instances[key] = index + 1
        return index

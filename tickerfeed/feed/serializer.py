"""
Tickerfeed XML serializer.

Output shape::

    <?xml version="1.0" encoding="UTF-8"?>
    <!DOCTYPE tickerfeed SYSTEM "...tickerfeed-2.4.dtd">
    <tickerfeed version="2.4">
      <playlist type="scrolling_carousel" name="News" target="carousel">
        <defaults>
          <template>default_template</template>
          <gui-color>#FF5733</gui-color>
        </defaults>
        <group use_existing="{content_id}">
          <description>{bucket name}</description>
          <gui-color>#4ECDC4</gui-color>
          <elements>
            <element>
              <id>...</id>
              <field name="headline">...</field>
              <duration>10</duration>
              <template>...</template>
              <ttl action="remove">3600</ttl>
            </element>
          </elements>
        </group>
      </playlist>
    </tickerfeed>
"""

from typing import Optional
from xml.sax.saxutils import escape as xml_escape

from tickerfeed.config import TickerConfig
from tickerfeed.feed.models import Element, GroupOutput, PlaylistOutput, TickerDocument

PLAYLIST_COLORS = (
    "#FF5733",
    "#33FF57",
    "#3357FF",
    "#FF33F5",
    "#F5FF33",
    "#33FFF5",
)

BUCKET_COLORS = (
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#F7DC6F",
    "#BB8FCE",
    "#52C234",
    "#FF8C42",
    "#6C5CE7",
    "#A8E6CF",
    "#FFD93D",
    "#F8B195",
    "#C7CEEA",
    "#FF6B9D",
    "#2ECC71",
    "#E74C3C",
    "#3498DB",
    "#F39C12",
    "#9B59B6",
    "#1ABC9C",
    "#34495E",
)

BOOLEAN_VALUES = {"true": "1", "false": "0"}

INDENT = "  "


def escape_xml(value: Optional[str]) -> str:
    """Escape ``& < > " '`` for text and attribute content."""
    if value is None:
        return ""
    return xml_escape(str(value), {'"': "&quot;", "'": "&apos;"})


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def string_hash(value: str) -> int:
    """
    ``hash = code + ((hash << 5) - hash)`` over UTF-16 code units.

    The shift wraps to a signed 32-bit integer while the running sum does
    not, which keeps colors identical to feeds produced by older
    generators.
    """
    result = 0
    data = value.encode("utf-16-le")
    for i in range(0, len(data), 2):
        code = data[i] | (data[i + 1] << 8)
        result = code + (_to_int32(_to_int32(result) << 5) - result)
    return result


def pick_color(value: str, palette: tuple[str, ...]) -> str:
    return palette[abs(string_hash(value)) % len(palette)]


def playlist_color(name: str) -> str:
    return pick_color(name or "", PLAYLIST_COLORS)


def bucket_color(bucket_id: Optional[str], name: Optional[str] = None) -> str:
    """Color keyed by bucket ID, or by name for buckets without one."""
    return pick_color(bucket_id or name or "", BUCKET_COLORS)


def format_field_value(value: Optional[str]) -> str:
    """Rewrite the literal strings ``true``/``false`` to ``1``/``0``."""
    if value is None:
        return ""
    return BOOLEAN_VALUES.get(value, value)


class TickerFeedSerializer:
    """
    Renders a ``TickerDocument`` to tickerfeed XML.

    Usage:
        serializer = TickerFeedSerializer(config.ticker)
        xml = serializer.serialize(document, include_ids=True)
    """

    def __init__(self, settings: Optional[TickerConfig] = None):
        self.settings = settings or TickerConfig()

    def serialize(self, document: TickerDocument, include_ids: bool = False) -> str:
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            f'<!DOCTYPE tickerfeed SYSTEM "{escape_xml(self.settings.dtd_url)}">',
            f'<tickerfeed version="{escape_xml(self.settings.feed_version)}">',
        ]
        for playlist in document.playlists:
            lines.extend(self._playlist_lines(playlist, include_ids))
        lines.append("</tickerfeed>")
        return "\n".join(lines) + "\n"

    def _playlist_lines(self, playlist: PlaylistOutput, include_ids: bool) -> list[str]:
        pad = INDENT
        lines = [
            f'{pad}<playlist type="{escape_xml(playlist.type)}" name="{escape_xml(playlist.name)}" '
            f'target="{escape_xml(self.settings.playlist_target)}">',
            f"{pad}{INDENT}<defaults>",
            f"{pad}{INDENT * 2}<template>{escape_xml(self.settings.default_template)}</template>",
            f"{pad}{INDENT * 2}<gui-color>{playlist_color(playlist.name)}</gui-color>",
            f"{pad}{INDENT}</defaults>",
        ]
        for group in playlist.groups:
            lines.extend(self._group_lines(group, include_ids))
        lines.append(f"{pad}</playlist>")
        return lines

    def _group_lines(self, group: GroupOutput, include_ids: bool) -> list[str]:
        pad = INDENT * 2
        lines = [
            f'{pad}<group use_existing="{escape_xml(group.content_id or "")}">',
            f"{pad}{INDENT}<description>{escape_xml(group.name)}</description>",
            f"{pad}{INDENT}<gui-color>{bucket_color(group.bucket_id, group.name)}</gui-color>",
            f"{pad}{INDENT}<elements>",
        ]
        for element in group.elements:
            lines.extend(self._element_lines(element, include_ids))
        lines.append(f"{pad}{INDENT}</elements>")
        lines.append(f"{pad}</group>")
        return lines

    def _element_lines(self, element: Element, include_ids: bool) -> list[str]:
        pad = INDENT * 4
        inner = pad + INDENT
        lines = [f"{pad}<element>"]
        if include_ids and element.id:
            lines.append(f"{inner}<id>{escape_xml(element.id)}</id>")
        for item_field in element.fields:
            value = format_field_value(item_field.value)
            lines.append(f'{inner}<field name="{escape_xml(item_field.name)}">{escape_xml(value)}</field>')
        if element.duration:
            lines.append(f"{inner}<duration>{escape_xml(element.duration)}</duration>")
        if element.template:
            lines.append(f"{inner}<template>{escape_xml(element.template)}</template>")
        if element.ttl:
            lines.append(
                f'{inner}<ttl action="{escape_xml(element.ttl.action)}">{escape_xml(element.ttl.value)}</ttl>'
            )
        lines.append(f"{pad}</element>")
        return lines

"""
Text helpers shared by the feed processors.

Field values on the wire are always strings; these helpers turn database
values into the string forms the playout templates expect.
"""

import math
from typing import Any


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def format_number(value: float | int) -> str:
    """Format a number without a trailing ``.0`` for whole values."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_percent(value: float | None) -> str:
    """One decimal place, ``0.0`` when unset."""
    if value is None:
        return "0.0"
    return f"{value:.1f}"


def to_text(value: Any) -> str:
    """
    Convert a stored value to its field text.

    Booleans become ``true``/``false`` so that the serializer's boolean
    rewrite applies to them; ``None`` becomes an empty string.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def fill_placeholders(template: str, variables: dict[str, Any]) -> str:
    """
    Replace ``{{name}}`` placeholders in a format string.

    Unknown placeholders are left in place.

    Args:
        template: Format string such as ``"{{name}} {{temperature}}°F"``
        variables: Placeholder values

    Returns:
        Formatted string
    """
    result = template
    for key, value in variables.items():
        result = result.replace("{{" + key + "}}", to_text(value))
    return result

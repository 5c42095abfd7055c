"""
Template form schema lookup.

Form schemas nest components under ``components``, ``columns[].components``
and tab panels; a field is bound to the first component whose ``key``
matches the field name.
"""

import json
import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


def load_schema(raw: Any) -> Optional[dict[str, Any]]:
    """Return a schema mapping from a stored value, or None."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            logger.warning(f"Invalid form schema JSON: {e}")
            return None
    return raw if isinstance(raw, dict) else None


def find_component_in_schema(schema: Any, key: str) -> Optional[dict[str, Any]]:
    """
    Find the component bound to a field name.

    Args:
        schema: Form schema with a top-level ``components`` list
        key: Field name

    Returns:
        Component definition, or None when the field has no component
    """
    schema = load_schema(schema)
    if not schema or not isinstance(schema.get("components"), list):
        return None
    return _search_components(schema["components"], key)


def _search_components(components: list[Any], key: str) -> Optional[dict[str, Any]]:
    for component in components:
        if not isinstance(component, dict):
            continue

        if component.get("key") == key:
            return component

        children = component.get("components")
        if isinstance(children, list):
            # Tab panels are themselves entries of ``components``
            found = _search_components(children, key)
            if found:
                return found

        for column in component.get("columns") or []:
            if isinstance(column, dict) and isinstance(column.get("components"), list):
                found = _search_components(column["components"], key)
                if found:
                    return found

    return None

"""
Strict-mode schema transform for function tools.

Strict backends require every property to be listed in "required". Properties
that were optional stay optional in practice by becoming nullable:

    {"type": "string"}          -> {"type": ["string", "null"]}
    {"anyOf": [{...}, {...}]}   -> {"anyOf": [{...}, {...}, {"type": "null"}]}

"required" is ordered by "x-order" when present, remaining names sorted.
"""

import copy
from typing import Any


def _add_null(prop: dict[str, Any]) -> dict[str, Any]:
    if "type" in prop:
        current = prop["type"]
        if isinstance(current, str):
            prop["type"] = ["null"] if current == "null" else [current, "null"]
        elif isinstance(current, list) and all(isinstance(t, str) for t in current):
            if "null" not in current:
                prop["type"] = [*current, "null"]
        # Unknown shape; leave unchanged
        return prop

    if "anyOf" in prop and isinstance(prop["anyOf"], list):
        if not any(option.get("type") == "null" for option in prop["anyOf"]):
            prop["anyOf"] = [*prop["anyOf"], {"type": "null"}]
    return prop


def strict_schema(schema: dict[str, Any]) -> dict[str, Any]:
    """
    Return a strict-compliant copy of an object schema.

    Schemas without "properties" are returned unchanged (copied).
    """
    result = copy.deepcopy(schema)
    properties = result.get("properties")
    if not isinstance(properties, dict):
        return result

    originally_required = set(result.get("required", []))

    x_order = [name for name in result.get("x-order", []) if name in properties]
    ordered = x_order + sorted(name for name in properties if name not in x_order)
    result["required"] = ordered

    for name, prop in properties.items():
        if name in originally_required or not isinstance(prop, dict):
            continue
        properties[name] = _add_null(prop)

    result.setdefault("additionalProperties", False)
    return result


__all__ = ["strict_schema"]

"""Conversion of genai ``Schema`` objects into JSON-schema dicts.

genai schemas carry upper-case OpenAPI type names (``OBJECT``, ``STRING``);
Anthropic tool ``input_schema`` expects lower-case JSON-schema types.
"""

from typing import Any

from google.genai import types


def schema_to_dict(schema: types.Schema | None) -> dict[str, Any]:
    """Recursively convert a genai Schema into a JSON-schema dict."""
    if schema is None:
        return {"type": "object"}

    result: dict[str, Any] = {}
    if schema.type is not None:
        result["type"] = _type_name(schema.type)
    if schema.description:
        result["description"] = schema.description
    if schema.properties:
        result["properties"] = {
            name: schema_to_dict(prop) for name, prop in schema.properties.items()
        }
    if schema.required:
        result["required"] = list(schema.required)
    if schema.enum:
        result["enum"] = list(schema.enum)
    if schema.items is not None:
        result["items"] = schema_to_dict(schema.items)
    return result


def _type_name(schema_type: Any) -> str:
    value = getattr(schema_type, "value", schema_type)
    return str(value).lower()

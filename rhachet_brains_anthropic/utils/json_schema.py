"""JSON schema helpers for structured outputs."""

from __future__ import annotations

from typing import Any, Dict, Type

from pydantic import BaseModel


def _close_objects(node: Any) -> None:
    if isinstance(node, dict):
        if node.get("type") == "object" or "properties" in node:
            node.setdefault("additionalProperties", False)
        for value in node.values():
            _close_objects(value)
    elif isinstance(node, list):
        for item in node:
            _close_objects(item)


def as_json_schema(model: Type[BaseModel]) -> Dict[str, Any]:
    """Convert an output model to the JSON schema accepted by structured outputs.

    Structured outputs reject a ``$schema`` key and require every object to
    declare ``additionalProperties: false``.
    """
    schema = model.model_json_schema()
    schema.pop("$schema", None)
    _close_objects(schema)
    return schema

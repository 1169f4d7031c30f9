"""Derive JSON schemas from Python types for route descriptors.

Any type pydantic can validate works: BaseModel subclasses, dataclasses,
TypedDicts, or plain annotations such as list[int].
"""

from __future__ import annotations

from typing import Any, Protocol

from pydantic import TypeAdapter


class SchemaDeriver(Protocol):
    def derive(self, tp: Any, *, query: bool = False) -> dict[str, Any]: ...


def _drop_null_alternative(schema: dict[str, Any]) -> None:
    """Turn anyOf[X, null] into X in place."""
    alternatives = schema.get("anyOf")
    if not isinstance(alternatives, list):
        return
    kept = [a for a in alternatives if a != {"type": "null"}]
    if len(kept) == len(alternatives):
        return
    del schema["anyOf"]
    if len(kept) == 1:
        schema.update(kept[0])
    else:
        schema["anyOf"] = kept
    if schema.get("default", ...) is None:
        del schema["default"]


def _strip_nullable_properties(schema: dict[str, Any]) -> None:
    for prop in schema.get("properties", {}).values():
        if isinstance(prop, dict):
            _drop_null_alternative(prop)
    for definition in schema.get("$defs", {}).values():
        if isinstance(definition, dict):
            _strip_nullable_properties(definition)


class PydanticSchemaDeriver:
    """Schema deriver backed by pydantic's TypeAdapter."""

    def derive(self, tp: Any, *, query: bool = False) -> dict[str, Any]:
        schema = TypeAdapter(tp).json_schema()
        schema.pop("title", None)
        # query params are not nullable
        if query:
            _strip_nullable_properties(schema)
        return schema


_default_deriver = PydanticSchemaDeriver()


def derive_schema(tp: Any, *, query: bool = False) -> dict[str, Any]:
    """Derive a JSON schema using the default pydantic deriver."""
    return _default_deriver.derive(tp, query=query)

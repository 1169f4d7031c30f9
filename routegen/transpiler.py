"""Transpile JSON schemas into zod validator expressions.

Handles:
- $ref resolution against the root schema (#/$defs/..., #/definitions/...)
- allOf / anyOf / oneOf composition
- enum and const literals
- string formats (date, date-time, email, uri, uuid)
- nullable fields, both OpenAPI style and anyOf[X, null]
- optional object properties
- descriptions (.describe)

Two modes exist. INPUT describes data the caller produces: date-like strings
stay strings. OUTPUT describes data the server returns: dates are coerced and
absent optional fields may arrive as null.
"""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any, Protocol

from .errors import TranspileError

INDENT = "    "

_IDENTIFIER = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

_STRING_FORMATS: dict[str, str] = {
    "email": ".email()",
    "uri": ".url()",
    "url": ".url()",
    "uuid": ".uuid()",
}

_DATE_FORMATS = {"date", "date-time"}


class Mode(str, Enum):
    INPUT = "input"
    OUTPUT = "output"


class SchemaTranspiler(Protocol):
    def transpile(self, schema: Any, mode: Mode) -> str: ...


def resolve_ref(root: dict[str, Any], ref: str) -> Any:
    """Resolve a local $ref pointer against the root schema."""
    if not ref.startswith("#"):
        raise TranspileError(f"Only local references are supported: {ref}")
    node: Any = root
    for part in ref.lstrip("#/").split("/"):
        if not part:
            continue
        part = part.replace("~1", "/").replace("~0", "~")
        if not isinstance(node, dict) or part not in node:
            raise TranspileError(f"Unresolvable reference: {ref}")
        node = node[part]
    return node


def _indent(text: str) -> str:
    return "\n".join(INDENT + line if line else line for line in text.split("\n"))


def _literal(value: Any) -> str:
    return f"z.literal({json.dumps(value)})"


def _property_key(name: str) -> str:
    return name if _IDENTIFIER.match(name) else json.dumps(name)


class _Transpilation:
    """State of one transpile call: the root for refs and the ref stack."""

    def __init__(self, root: dict[str, Any], mode: Mode):
        self.root = root
        self.mode = mode
        self._refs: list[str] = []

    def convert(self, schema: Any) -> str:
        if schema is True:
            return "z.unknown()"
        if schema is False:
            raise TranspileError("The 'false' schema accepts no value")
        if not isinstance(schema, dict):
            raise TranspileError(f"Expected a schema object, got {type(schema).__name__}")

        expr = self._convert_bare(schema)

        if schema.get("nullable") is True and not expr.endswith(".nullable()"):
            expr += ".nullable()"
        description = schema.get("description")
        if description:
            expr += f".describe({json.dumps(description)})"
        return expr

    def _convert_bare(self, schema: dict[str, Any]) -> str:
        if "$ref" in schema:
            return self._convert_ref(schema["$ref"])

        if "allOf" in schema:
            return self._convert_all_of(schema["allOf"])

        for key in ("anyOf", "oneOf"):
            if key in schema:
                return self._convert_union(schema[key])

        if "const" in schema:
            return _literal(schema["const"])

        if "enum" in schema:
            return self._convert_enum(schema["enum"])

        schema_type = schema.get("type")
        if isinstance(schema_type, list):
            variants = []
            for t in schema_type:
                if t == "null":
                    variants.append({"type": "null"})
                    continue
                variant = dict(schema, type=t)
                variant.pop("description", None)
                variant.pop("nullable", None)
                variants.append(variant)
            return self._convert_union(variants)

        if schema_type is None:
            if "properties" in schema or "additionalProperties" in schema:
                return self._convert_object(schema)
            if "items" in schema or "prefixItems" in schema:
                return self._convert_array(schema)
            return "z.unknown()"

        if schema_type == "string":
            return self._convert_string(schema)
        if schema_type == "integer":
            return "z.number().int()" + self._bounds(schema)
        if schema_type == "number":
            return "z.number()" + self._bounds(schema)
        if schema_type == "boolean":
            return "z.boolean()"
        if schema_type == "null":
            return "z.null()"
        if schema_type == "array":
            return self._convert_array(schema)
        if schema_type == "object":
            return self._convert_object(schema)

        raise TranspileError(f"Unknown schema type: {schema_type!r}")

    def _convert_ref(self, ref: str) -> str:
        if ref in self._refs:
            raise TranspileError(f"Recursive reference is not supported: {ref}")
        self._refs.append(ref)
        try:
            return self.convert(resolve_ref(self.root, ref))
        finally:
            self._refs.pop()

    def _convert_all_of(self, parts: Any) -> str:
        if not isinstance(parts, list) or not parts:
            raise TranspileError("allOf must be a non-empty list")
        exprs = [self.convert(p) for p in parts]
        result = exprs[0]
        for expr in exprs[1:]:
            result = f"z.intersection({result}, {expr})"
        return result

    def _convert_union(self, options: Any) -> str:
        if not isinstance(options, list) or not options:
            raise TranspileError("anyOf/oneOf must be a non-empty list")
        nullable = any(o == {"type": "null"} for o in options)
        rest = [o for o in options if o != {"type": "null"}]
        if not rest:
            return "z.null()"
        if len(rest) == 1:
            expr = self.convert(rest[0])
        else:
            members = ",\n".join(self.convert(o) for o in rest)
            expr = f"z.union([\n{_indent(members)},\n])"
        return expr + ".nullable()" if nullable else expr

    def _convert_enum(self, values: Any) -> str:
        if not isinstance(values, list) or not values:
            raise TranspileError("enum must be a non-empty list")
        if all(isinstance(v, str) for v in values):
            return f"z.enum([{', '.join(json.dumps(v) for v in values)}])"
        if len(values) == 1:
            return _literal(values[0])
        return f"z.union([{', '.join(_literal(v) for v in values)}])"

    def _convert_string(self, schema: dict[str, Any]) -> str:
        fmt = schema.get("format")
        if fmt in _DATE_FORMATS and self.mode is Mode.OUTPUT:
            return "z.coerce.date()"
        expr = "z.string()" + _STRING_FORMATS.get(fmt, "")
        if "minLength" in schema:
            expr += f".min({int(schema['minLength'])})"
        if "maxLength" in schema:
            expr += f".max({int(schema['maxLength'])})"
        if "pattern" in schema:
            expr += f".regex(new RegExp({json.dumps(schema['pattern'])}))"
        return expr

    def _bounds(self, schema: dict[str, Any]) -> str:
        out = ""
        if "minimum" in schema:
            out += f".gte({schema['minimum']})"
        if "exclusiveMinimum" in schema and not isinstance(schema["exclusiveMinimum"], bool):
            out += f".gt({schema['exclusiveMinimum']})"
        if "maximum" in schema:
            out += f".lte({schema['maximum']})"
        if "exclusiveMaximum" in schema and not isinstance(schema["exclusiveMaximum"], bool):
            out += f".lt({schema['exclusiveMaximum']})"
        return out

    def _convert_array(self, schema: dict[str, Any]) -> str:
        prefix = schema.get("prefixItems")
        items = schema.get("items")
        if prefix is None and isinstance(items, list):
            prefix = items
        if prefix is not None:
            members = ", ".join(self.convert(i) for i in prefix)
            return f"z.tuple([{members}])"
        item_expr = self.convert(items) if items is not None else "z.unknown()"
        expr = f"z.array({item_expr})"
        if "minItems" in schema:
            expr += f".min({int(schema['minItems'])})"
        if "maxItems" in schema:
            expr += f".max({int(schema['maxItems'])})"
        return expr

    def _convert_object(self, schema: dict[str, Any]) -> str:
        properties = schema.get("properties") or {}
        required = set(schema.get("required", []))
        extra = schema.get("additionalProperties")

        if not properties:
            if extra is False:
                return "z.object({}).strict()"
            if isinstance(extra, dict):
                return f"z.record(z.string(), {self.convert(extra)})"
            return "z.record(z.string(), z.unknown())"

        fields = []
        for name, prop in properties.items():
            expr = self.convert(prop)
            if name not in required:
                expr += ".nullish()" if self.mode is Mode.OUTPUT else ".optional()"
            fields.append(f"{_property_key(name)}: {expr},")

        expr = "z.object({\n" + _indent("\n".join(fields)) + "\n})"
        if isinstance(extra, dict):
            expr += f".catchall({self.convert(extra)})"
        return expr


class ZodTranspiler:
    """Default transpiler emitting zod 3 expressions."""

    def transpile(self, schema: Any, mode: Mode) -> str:
        root = schema if isinstance(schema, dict) else {}
        return _Transpilation(root, Mode(mode)).convert(schema)

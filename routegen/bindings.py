"""Turn a route's populated slots into validator declarations + type aliases.

Request-direction slots (params, body, client messages) are transpiled in
INPUT mode and typed with z.input; response-direction slots (response,
server messages, stream messages) use OUTPUT mode and z.output.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .errors import SchemaGenerationError, TranspileError
from .model import AnyKind, ChannelKind, Kind, RouteDescriptor, SchemaKind, StreamKind
from .naming import type_name
from .transpiler import Mode, SchemaTranspiler

logger = logging.getLogger(__name__)

# Type used for untyped (Any) slots
_ANY_TYPES: dict[str, str] = {
    "params": "Record<string, string>",
    "body": "Blob | FormData | string",
    "response": "unknown",
}


@dataclass(frozen=True)
class ValidatorBinding:
    """One slot's validator const (if typed) and its exported type alias."""

    slot: str
    type_name: str
    type_expr: str
    const_name: str | None = None
    expression: str | None = None
    mode: Mode | None = None

    @property
    def has_validator(self) -> bool:
        return self.const_name is not None

    def parse_call(self, value: str) -> str:
        """Validate ``value`` unless the caller turned validation off."""
        if not self.has_validator:
            return value
        return f"options.unsafe ? {value} as {self.type_name} : {self.const_name}.parse({value})"


@dataclass(frozen=True)
class RouteBindings:
    params: ValidatorBinding | None = None
    body: ValidatorBinding | None = None
    response: ValidatorBinding | None = None
    client_msg: ValidatorBinding | None = None
    server_msg: ValidatorBinding | None = None
    message: ValidatorBinding | None = None

    def declared(self) -> list[ValidatorBinding]:
        """All bindings in emission order."""
        order = (self.params, self.body, self.response,
                 self.client_msg, self.server_msg, self.message)
        return [b for b in order if b is not None]


def _transpile(
    transpiler: SchemaTranspiler,
    schema: dict,
    mode: Mode,
    identifier: str,
    slot: str,
) -> str:
    try:
        return transpiler.transpile(schema, mode)
    except TranspileError as exc:
        raise SchemaGenerationError(identifier, slot, exc.message) from exc


def _schema_binding(
    transpiler: SchemaTranspiler,
    identifier: str,
    suffix: str,
    slot: str,
    schema: dict,
    mode: Mode,
) -> ValidatorBinding:
    const_name = f"{identifier}{suffix}Schema"
    z_type = "z.input" if mode is Mode.INPUT else "z.output"
    return ValidatorBinding(
        slot=slot,
        type_name=f"{type_name(identifier)}{suffix}",
        type_expr=f"{z_type}<typeof {const_name}>",
        const_name=const_name,
        expression=_transpile(transpiler, schema, mode, identifier, slot),
        mode=mode,
    )


def _slot_binding(
    transpiler: SchemaTranspiler,
    identifier: str,
    slot: str,
    suffix: str,
    kind: Kind,
    mode: Mode,
) -> ValidatorBinding | None:
    if isinstance(kind, SchemaKind):
        return _schema_binding(transpiler, identifier, suffix, slot, kind.schema, mode)
    if isinstance(kind, AnyKind):
        return ValidatorBinding(
            slot=slot,
            type_name=f"{type_name(identifier)}{suffix}",
            type_expr=_ANY_TYPES[slot],
        )
    return None


def bind_route(
    route: RouteDescriptor,
    identifier: str,
    transpiler: SchemaTranspiler,
) -> RouteBindings:
    """Build the validator bindings for every populated slot of a route."""
    params = _slot_binding(transpiler, identifier, "params", "Params", route.params, Mode.INPUT)
    body = _slot_binding(transpiler, identifier, "body", "Req", route.body, Mode.INPUT)

    response = route.response
    if isinstance(response, ChannelKind):
        bindings = RouteBindings(
            params=params,
            body=body,
            client_msg=_schema_binding(
                transpiler, identifier, "ClientMsg", "client-message",
                response.client_schema, Mode.INPUT,
            ),
            server_msg=_schema_binding(
                transpiler, identifier, "ServerMsg", "server-message",
                response.server_schema, Mode.OUTPUT,
            ),
        )
    elif isinstance(response, StreamKind):
        bindings = RouteBindings(
            params=params,
            body=body,
            message=_schema_binding(
                transpiler, identifier, "Msg", "stream-message",
                response.schema, Mode.OUTPUT,
            ),
        )
    else:
        bindings = RouteBindings(
            params=params,
            body=body,
            response=_slot_binding(
                transpiler, identifier, "response", "Res", response, Mode.OUTPUT,
            ),
        )

    logger.debug("Bound %d validator(s) for %s", len(bindings.declared()), identifier)
    return bindings

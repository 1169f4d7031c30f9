"""Per-transport emission of route bindings.

Each emitter turns one route (plus its resolved name and validator bindings)
into syntax nodes: validator consts, type aliases and the exported function.

  HttpEmitter    -> function returning PromiseWrapper<Res>
  ChannelEmitter -> function returning WebsocketWrapper<ClientMsg, ServerMsg>
  StreamEmitter  -> function returning SSE<Msg>
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from .bindings import RouteBindings, ValidatorBinding
from .model import (
    AnyKind,
    ChannelKind,
    Flagged,
    RouteDescriptor,
    SchemaKind,
    StreamKind,
    Superseded,
)
from .naming import resolve_name, type_name
from .nodes import (
    Arrow,
    Call,
    Chain,
    ConstDecl,
    DocComment,
    Function,
    Group,
    New,
    Node,
    ObjectLit,
    Param,
    Return,
    Spread,
    Ternary,
    TypeAlias,
)
from .printer import ts_string


@dataclass(frozen=True)
class RouteFragment:
    """Everything emitted for one route, before namespace grouping."""

    namespace: str
    identifier: str
    nodes: tuple[Node, ...]


class Emitter(Protocol):
    def emit(self, route: RouteDescriptor, name: str, bindings: RouteBindings) -> RouteFragment: ...


# ---------------------------------------------------------------------------
# Shared pieces
# ---------------------------------------------------------------------------

def deprecation_marker(route: RouteDescriptor) -> str | None:
    """JSDoc deprecation tag; replacements are linked by their resolved name."""
    dep = route.deprecated
    if isinstance(dep, Superseded):
        new = resolve_name(dep.method, dep.path, dep.namespace)
        return f"@deprecated Please use {{@link {new}}} instead"
    if isinstance(dep, Flagged):
        return "@deprecated"
    return None


def _comment_safe(text: str) -> str:
    return " ".join(text.split()).replace("*/", "*\\/")


def build_doc(route: RouteDescriptor) -> DocComment | None:
    """Error-code table followed by the deprecation tag, if any."""
    lines: list[str] = []
    if route.errors:
        lines.extend(["Error responses:", ""])
        entries = [f"{code}: {_comment_safe(description)}" for code, description in route.errors]
        for i, entry in enumerate(entries):
            if i:
                lines.append("")
            lines.append(entry)

    marker = deprecation_marker(route)
    if marker:
        if lines:
            lines.append("")
        lines.append(marker)

    return DocComment(tuple(lines)) if lines else None


def declarations(bindings: RouteBindings) -> list[Node]:
    """Validator consts and type aliases for every bound slot."""
    nodes: list[Node] = []
    for binding in bindings.declared():
        members: list[Node] = []
        if binding.has_validator:
            members.append(ConstDecl(binding.const_name, binding.expression))
        members.append(TypeAlias(binding.type_name, binding.type_expr))
        nodes.append(Group(tuple(members)))
    return nodes


def query_suffix(params: ValidatorBinding | None) -> str:
    """`` + makeQuery(...)`` when the route takes query params."""
    if params is None:
        return ""
    return f" + makeQuery({params.parse_call('params')})"


def params_argument(params: ValidatorBinding | None) -> list[Param]:
    return [Param("params", params.type_name)] if params is not None else []


def request_url(route: RouteDescriptor, bindings: RouteBindings) -> str:
    return f"options.baseUrl + {ts_string(route.path)}{query_suffix(bindings.params)}"


def stream_url(secure: str, insecure: str, route: RouteDescriptor, bindings: RouteBindings) -> str:
    return (
        f"streamUrl({ts_string(secure)}, {ts_string(insecure)}) + "
        f"{ts_string(route.path)}{query_suffix(bindings.params)}"
    )


def parser(binding: ValidatorBinding) -> Arrow:
    return Arrow("data", binding.parse_call("data"))


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------

class HttpEmitter:
    """Request/response routes over fetch."""

    def _request_body(self, route: RouteDescriptor, bindings: RouteBindings) -> str:
        if isinstance(route.body, SchemaKind):
            return f"JSON.stringify({bindings.body.parse_call('req')})"
        if isinstance(route.body, AnyKind):
            return "req"
        return "null"

    def _response_handler(self, route: RouteDescriptor, bindings: RouteBindings) -> Arrow:
        if isinstance(route.response, SchemaKind):
            return Arrow("res", Ternary(
                "res.ok",
                f"res.json().then({self._parse_response(bindings.response)}).then(ok)",
                "err(res)",
                multiline=True,
            ))
        if isinstance(route.response, AnyKind):
            return Arrow("res", "res.ok ? res.text().then(ok) : err(res)")
        return Arrow("res", "res.ok ? ok(res) : err(res)")

    def _parse_response(self, binding: ValidatorBinding) -> str:
        return f"(data) => {binding.parse_call('data')}"

    def emit(self, route: RouteDescriptor, name: str, bindings: RouteBindings) -> RouteFragment:
        args: list[Param] = []
        if bindings.body is not None:
            args.append(Param("req", bindings.body.type_name))
        args.extend(params_argument(bindings.params))
        args.append(Param("init", "RequestInit", default="{}"))

        entries: list = [
            ("method", ts_string(str(route.method))),
            ("body", self._request_body(route, bindings)),
            ("credentials", "'include'"),
            Spread("options.globalInit"),
            Spread("init"),
        ]
        # only JSON bodies get a content type, raw bodies keep the browser default
        if isinstance(route.body, SchemaKind):
            entries.append((
                "headers",
                "jsonContentTypeHeader(options.globalInit.headers as RepresentsHeader, "
                "init.headers as RepresentsHeader)",
            ))

        request = New(
            "Request",
            (
                request_url(route, bindings),
                ObjectLit(tuple(entries)),
            ),
            multiline=True,
        )
        fetch = Chain(
            Call("options.fetch", (request,), multiline=True),
            (Call("then", (self._response_handler(route, bindings),)),),
        )

        res_type = bindings.response.type_name if bindings.response is not None else "Response"
        function = Function(
            name=name,
            params=tuple(args),
            return_type=f"PromiseWrapper<{res_type}>",
            body=(Return(New("PromiseWrapper", (fetch,), multiline=True)),),
            doc=build_doc(route),
        )
        return RouteFragment(route.namespace, name, tuple(declarations(bindings)) + (function,))


# ---------------------------------------------------------------------------
# Channel (websocket)
# ---------------------------------------------------------------------------

class ChannelEmitter:
    """Bidirectional websocket routes."""

    def emit(self, route: RouteDescriptor, name: str, bindings: RouteBindings) -> RouteFragment:
        if not isinstance(route.response, ChannelKind):
            raise TypeError(f"{name} does not have a channel response")
        struct = type_name(name)
        wrapper = TypeAlias(
            f"{struct}Websocket",
            f"WebsocketWrapper<{bindings.client_msg.type_name}, {bindings.server_msg.type_name}>",
        )
        connect = Arrow("", New("WebSocket", (stream_url("wss://", "ws://", route, bindings),)))
        function = Function(
            name=name,
            params=tuple(params_argument(bindings.params)),
            return_type=wrapper.name,
            body=(Return(New(
                "WebsocketWrapper",
                (connect, parser(bindings.client_msg), parser(bindings.server_msg)),
                multiline=True,
            )),),
            doc=build_doc(route),
        )
        nodes = tuple(declarations(bindings)) + (wrapper, function)
        return RouteFragment(route.namespace, name, nodes)


# ---------------------------------------------------------------------------
# Stream (server-sent events)
# ---------------------------------------------------------------------------

class StreamEmitter:
    """Server-push event stream routes."""

    def emit(self, route: RouteDescriptor, name: str, bindings: RouteBindings) -> RouteFragment:
        if not isinstance(route.response, StreamKind):
            raise TypeError(f"{name} does not have a stream response")
        wrapper = TypeAlias(f"{type_name(name)}SSE", f"SSE<{bindings.message.type_name}>")
        request = New("Request", (
            stream_url("https://", "http://", route, bindings),
            ObjectLit((("credentials", "'include'"), Spread("options.globalInit"))),
        ))
        connect = Arrow("", New("EventStream", (request,)))
        function = Function(
            name=name,
            params=tuple(params_argument(bindings.params)),
            return_type=wrapper.name,
            body=(Return(New("SSE", (connect, parser(bindings.message)), multiline=True)),),
            doc=build_doc(route),
        )
        nodes = tuple(declarations(bindings)) + (wrapper, function)
        return RouteFragment(route.namespace, name, nodes)


_HTTP = HttpEmitter()
_CHANNEL = ChannelEmitter()
_STREAM = StreamEmitter()


def select_emitter(route: RouteDescriptor) -> Emitter:
    """Pick the transport strategy from the route's response kind."""
    if isinstance(route.response, ChannelKind):
        return _CHANNEL
    if isinstance(route.response, StreamKind):
        return _STREAM
    return _HTTP

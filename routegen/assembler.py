"""Fold per-route fragments into namespaces and the final module text.

Namespaces are emitted in lexicographic order of their tags; within a
namespace routes keep the order they were declared in. The runtime support
blocks for websockets and server-sent events are only included when at least
one route needs them.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Iterable

import jinja2

from .errors import DuplicateRouteError
from .emitters import RouteFragment
from .model import ChannelKind, RouteDescriptor, StreamKind
from .naming import escape_namespace, resolve_name
from .nodes import Namespace
from .printer import TsPrinter

TEMPLATE_DIR = Path(__file__).parent / "templates"


class Capability(str, Enum):
    CHANNEL = "channel"
    STREAM = "stream"


def capabilities(routes: Iterable[RouteDescriptor]) -> frozenset[Capability]:
    """Transport features the module needs runtime support for."""
    caps: set[Capability] = set()
    for route in routes:
        if isinstance(route.response, ChannelKind):
            caps.add(Capability.CHANNEL)
        elif isinstance(route.response, StreamKind):
            caps.add(Capability.STREAM)
    return frozenset(caps)


def check_collisions(routes: Iterable[RouteDescriptor]) -> None:
    """Fail if two routes in one namespace resolve to the same identifier."""
    seen: dict[tuple[str, str], RouteDescriptor] = {}
    for route in routes:
        name = resolve_name(route.method, route.path, route.namespace)
        key = (escape_namespace(route.namespace), name)
        if key in seen:
            raise DuplicateRouteError(name, key[0], seen[key].route_key, route.route_key)
        seen[key] = route


def group_fragments(fragments: Iterable[RouteFragment]) -> dict[str, list[RouteFragment]]:
    """Group fragments by escaped namespace, insertion order kept inside.

    Groups are ordered by raw tag. Tags that escape to the same name (``class``
    and ``nClass``) share one block.
    """
    groups: dict[str, list[RouteFragment]] = {}
    for fragment in fragments:
        groups.setdefault(escape_namespace(fragment.namespace), []).append(fragment)
    order = sorted(groups, key=lambda name: min(f.namespace for f in groups[name]))
    return {name: groups[name] for name in order}


def build_namespaces(groups: dict[str, list[RouteFragment]]) -> list[Namespace]:
    namespaces = []
    for tag, fragments in groups.items():
        members = tuple(node for fragment in fragments for node in fragment.nodes)
        namespaces.append(Namespace(tag, members))
    return namespaces


def _environment() -> jinja2.Environment:
    return jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        autoescape=False,
    )


def render_module(
    namespaces: list[Namespace],
    caps: frozenset[Capability],
    printer: TsPrinter,
    root_namespace: str = "client",
) -> str:
    """Wrap the namespaces in the root namespace with the runtime preamble."""
    template = _environment().get_template("client.ts.j2")
    return template.render(
        root_namespace=root_namespace,
        indent_width=len(printer.unit),
        streaming=bool(caps),
        channel=Capability.CHANNEL in caps,
        stream=Capability.STREAM in caps,
        body=printer.render(namespaces, level=1),
    )

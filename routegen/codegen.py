"""Generate the client module and write it to disk.

Takes a RouteSet, emits one fragment per route and folds them into the
final TypeScript module.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .assembler import build_namespaces, capabilities, check_collisions, group_fragments, render_module
from .bindings import bind_route
from .config import GeneratorConfig
from .emitters import RouteFragment, select_emitter
from .formatter import BasicFormatter, CodeFormatter
from .model import RouteDescriptor, RouteSet
from .naming import resolve_name
from .printer import TsPrinter
from .transpiler import SchemaTranspiler, ZodTranspiler

logger = logging.getLogger(__name__)


def emit_route(route: RouteDescriptor, transpiler: SchemaTranspiler) -> RouteFragment:
    """Emit the bindings of a single route."""
    name = resolve_name(route.method, route.path, route.namespace)
    bindings = bind_route(route, name, transpiler)
    fragment = select_emitter(route).emit(route, name, bindings)
    logger.debug("Emitted %s (%s) into %s", name, route.route_key, route.namespace)
    return fragment


def generate(
    route_set: RouteSet,
    config: GeneratorConfig | None = None,
    transpiler: SchemaTranspiler | None = None,
    formatter: CodeFormatter | None = None,
) -> str:
    """Generate the client module source for a route set."""
    if config is None:
        config = GeneratorConfig.from_env()
    transpiler = transpiler or ZodTranspiler()
    formatter = formatter or BasicFormatter()

    routes = route_set.client_routes()
    check_collisions(routes)
    caps = capabilities(routes)

    fragments = [emit_route(route, transpiler) for route in routes]
    groups = group_fragments(fragments)

    printer = TsPrinter(config.style.indent_width, config.style.line_width)
    source = render_module(build_namespaces(groups), caps, printer, config.root_namespace)
    output = formatter.format(source, config.filename, config.style)

    logger.info(
        "Generated %s (%d routes, %d namespaces)", config.filename, len(routes), len(groups),
    )
    return output


def write_client(
    route_set: RouteSet,
    output_path: Path,
    config: GeneratorConfig | None = None,
    transpiler: SchemaTranspiler | None = None,
    formatter: CodeFormatter | None = None,
) -> Path:
    """Generate the client and write it to ``output_path``."""
    output = generate(route_set, config, transpiler, formatter)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(output)
    logger.info("Wrote %s", output_path)
    return output_path

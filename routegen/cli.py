from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .codegen import generate
from .config import GeneratorConfig
from .errors import RoutegenError
from .loader import fetch_routes, load_routes, parse_routes
from .model import RouteSet
from .naming import escape_namespace, resolve_name


app = typer.Typer(no_args_is_help=True, add_completion=False)

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _read_routes(file: Optional[Path], url: Optional[str], wrapper: bool) -> RouteSet:
    if file is not None and url is not None:
        raise typer.BadParameter("Use either --file or --url, not both")
    if url is not None:
        return fetch_routes(url, wrapper)
    if file is not None:
        return load_routes(file.expanduser(), wrapper)
    return parse_routes(sys.stdin.read(), wrapper, "<stdin>")


@app.command("generate")
def generate_cmd(
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Input JSON file. Read from stdin if omitted."
    ),
    url: Optional[str] = typer.Option(None, "--url", help="Fetch the route list from a URL"),
    output_file: Optional[Path] = typer.Option(
        None, "--output-file", "-o", help="Output file. Written to stdout if omitted."
    ),
    wrapper: Optional[bool] = typer.Option(
        None,
        "--wrapper/--no-wrapper",
        help="Input is wrapped in an object with one list field (default: ROUTEGEN_WRAPPER, else on)",
    ),
    root_namespace: Optional[str] = typer.Option(None, help="Name of the exported root namespace"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Create a TypeScript client module from a list of route descriptors."""
    _configure_logging(verbose)

    if output_file is not None and output_file.exists() and not output_file.is_file():
        raise typer.BadParameter(f"Provided output path is not a file: {output_file}")

    try:
        overrides = {"root_namespace": root_namespace} if root_namespace else {}
        config = GeneratorConfig.from_env(**overrides)
        routes = _read_routes(file, url, config.wrapper if wrapper is None else wrapper)
        out = generate(routes, config)
    except RoutegenError as exc:
        err_console.print(f"[bold red]error[/bold red]: {exc}")
        raise typer.Exit(code=1)

    if output_file is None:
        sys.stdout.write(out)
        return

    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(out)
    err_console.print(
        f"[bold green]routegen[/bold green] wrote {output_file} "
        f"({len(routes.client_routes())} routes)"
    )


@app.command("names")
def names_cmd(
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Input JSON file"),
    url: Optional[str] = typer.Option(None, "--url", help="Fetch the route list from a URL"),
    wrapper: Optional[bool] = typer.Option(None, "--wrapper/--no-wrapper"),
) -> None:
    """Show the identifier each route resolves to."""
    try:
        config = GeneratorConfig.from_env()
        routes = _read_routes(file, url, config.wrapper if wrapper is None else wrapper)
    except RoutegenError as exc:
        err_console.print(f"[bold red]error[/bold red]: {exc}")
        raise typer.Exit(code=1)

    table = Table(title="routes")
    table.add_column("namespace")
    table.add_column("method")
    table.add_column("path")
    table.add_column("identifier")
    table.add_column("client")
    for r in routes:
        table.add_row(
            escape_namespace(r.namespace),
            str(r.method),
            r.path,
            resolve_name(r.method, r.path, r.namespace),
            "yes" if r.add_to_client else "no",
        )
    console.print(table)

"""Load route descriptors from JSON.

Input is either a bare list of route records or, by default, a wrapper
object with a single list-valued field (e.g. {"requests": [...]}).

A record looks like:

    {
      "path": "/api/user/profile",
      "method": "GET",
      "tag": "user",
      "params": "None" | "Any" | {"Schema": {...}},
      "body": ...,
      "response": ... | {"Websocket": {"client_msg": {...}, "server_msg": {...}}}
                      | {"SSE": {...}},
      "deprecated": false | true | ["/api/user/me", "GET", "user"],
      "error_codes": [[404, "not found"]],
      "add_to_client": true
    }

The older ``req``/``res``/``is_params`` layout is accepted as well.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import httpx

from .errors import DescriptorLoadError
from .method import Method
from .model import (
    ANY,
    FLAGGED,
    NONE,
    NOT_DEPRECATED,
    ChannelKind,
    Deprecation,
    Kind,
    RouteDescriptor,
    RouteSet,
    SchemaKind,
    StreamKind,
    Superseded,
)


def _parse_kind(value: Any, where: str) -> Kind:
    if value is None or value == "None":
        return NONE
    if value == "Any":
        return ANY
    if isinstance(value, dict) and len(value) == 1:
        (tag, payload), = value.items()
        if tag == "Schema":
            return SchemaKind(payload)
        if tag in ("Websocket", "Channel") and isinstance(payload, dict):
            client = payload.get("client_msg", payload.get("client"))
            server = payload.get("server_msg", payload.get("server"))
            if client is None or server is None:
                raise DescriptorLoadError(f"{where}: channel needs client_msg and server_msg")
            return ChannelKind(client, server)
        if tag in ("SSE", "Stream"):
            return StreamKind(payload)
    raise DescriptorLoadError(f"{where}: unrecognized kind {value!r}")


def _parse_deprecated(value: Any, where: str) -> Deprecation:
    if value is None or value is False:
        return NOT_DEPRECATED
    if value is True:
        return FLAGGED
    if isinstance(value, (list, tuple)) and len(value) == 3:
        path, method, tag = value
        return Superseded(path, Method.parse(method), tag)
    if isinstance(value, dict):
        return Superseded(
            value["path"], Method.parse(value["method"]), value.get("tag", value.get("namespace")),
        )
    raise DescriptorLoadError(f"{where}: unrecognized deprecation {value!r}")


def _parse_errors(value: Any, where: str) -> tuple[tuple[int, str], ...]:
    errors = []
    for entry in value or []:
        if isinstance(entry, dict):
            errors.append((int(entry["code"]), str(entry["description"])))
        elif isinstance(entry, (list, tuple)) and len(entry) == 2:
            errors.append((int(entry[0]), str(entry[1])))
        else:
            raise DescriptorLoadError(f"{where}: unrecognized error code entry {entry!r}")
    return tuple(errors)


def parse_route(record: dict[str, Any], index: int = 0) -> RouteDescriptor:
    """Build one RouteDescriptor from a decoded JSON record."""
    where = f"route #{index}"
    if not isinstance(record, dict):
        raise DescriptorLoadError(f"{where}: expected an object")
    try:
        params = _parse_kind(record.get("params"), f"{where}.params")
        body = _parse_kind(record.get("body"), f"{where}.body")
        response = _parse_kind(record.get("response", record.get("res")), f"{where}.response")

        # legacy layout: one request slot, routed by is_params
        if "req" in record:
            req = _parse_kind(record["req"], f"{where}.req")
            if record.get("is_params", False):
                if params.is_populated:
                    raise DescriptorLoadError(f"{where}: req conflicts with params")
                params = req
            else:
                if body.is_populated:
                    raise DescriptorLoadError(f"{where}: req conflicts with body")
                body = req

        return RouteDescriptor(
            path=record["path"],
            method=Method.parse(record["method"]),
            namespace=record["tag"] if "tag" in record else record["namespace"],
            params=params,
            body=body,
            response=response,
            deprecated=_parse_deprecated(record.get("deprecated"), where),
            errors=_parse_errors(record.get("error_codes", record.get("errors")), where),
            add_to_client=bool(record.get("add_to_client", True)),
        )
    except KeyError as exc:
        raise DescriptorLoadError(f"{where}: missing field {exc.args[0]!r}") from exc
    except (TypeError, ValueError) as exc:
        raise DescriptorLoadError(f"{where}: {exc}") from exc


def _unwrap(data: Any, wrapper: bool, source: str) -> list[Any]:
    if not wrapper:
        if not isinstance(data, list):
            raise DescriptorLoadError("Expected a list of routes", source)
        return data
    if not isinstance(data, dict):
        raise DescriptorLoadError("Expected a wrapper object with one list field", source)
    lists = [v for v in data.values() if isinstance(v, list)]
    if len(lists) != 1:
        raise DescriptorLoadError("Wrapper object must have exactly one list field", source)
    return lists[0]


def parse_routes(text: str, wrapper: bool = True, source: str = "<string>") -> RouteSet:
    """Decode JSON text into a RouteSet."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DescriptorLoadError(f"Invalid JSON: {exc}", source) from exc
    records = _unwrap(data, wrapper, source)
    try:
        return RouteSet.of(parse_route(r, i) for i, r in enumerate(records))
    except DescriptorLoadError as exc:
        if exc.source is None:
            raise DescriptorLoadError(exc.message, source) from exc
        raise


def load_routes(path: Path, wrapper: bool = True) -> RouteSet:
    """Load routes from a JSON file."""
    if not path.exists():
        raise DescriptorLoadError("Provided input path does not exist", str(path))
    if not path.is_file():
        raise DescriptorLoadError("Provided input path is not a file", str(path))
    with open(path) as f:
        return parse_routes(f.read(), wrapper, str(path))


def fetch_routes(url: str, wrapper: bool = True, client: httpx.Client | None = None) -> RouteSet:
    """Fetch the route list from a running service."""
    owns_client = client is None
    client = client or httpx.Client(timeout=30.0, follow_redirects=True)
    try:
        resp = client.get(url)
        resp.raise_for_status()
    except httpx.HTTPError as exc:
        raise DescriptorLoadError(f"Could not fetch routes: {exc}", url) from exc
    finally:
        if owns_client:
            client.close()
    return parse_routes(resp.text, wrapper, url)

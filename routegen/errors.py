"""Exception types raised while building descriptors and generating clients.

Every error aborts generation; there is no partial output.
"""

from __future__ import annotations

from typing import Any


class RoutegenError(Exception):
    """Base exception for all routegen errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            extra = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({extra})"
        return self.message


class ConfigError(RoutegenError):
    """Invalid generator configuration."""


class DescriptorError(RoutegenError):
    """A route descriptor was constructed incorrectly."""


class DuplicateSlotError(DescriptorError):
    """A payload slot was populated twice."""

    def __init__(self, slot: str, path: str | None = None):
        details = {"slot": slot}
        if path:
            details["path"] = path
        super().__init__(f"Route already has a {slot} kind attached", details)
        self.slot = slot


class StreamingMethodError(DescriptorError):
    """A channel or stream response was attached to a non-GET route."""

    def __init__(self, method: str, kind: str, path: str | None = None):
        details = {"method": method}
        if path:
            details["path"] = path
        super().__init__(f"Routes with a {kind} response can only be GET requests", details)
        self.method = method
        self.kind = kind


class DuplicateDeprecationError(DescriptorError):
    def __init__(self, path: str | None = None):
        super().__init__(
            "Route already has a deprecation note",
            {"path": path} if path else None,
        )


class UnknownMethodError(DescriptorError):
    def __init__(self, token: str):
        super().__init__(f"Method unknown: {token!r}")
        self.token = token


class DescriptorLoadError(RoutegenError):
    """The route list could not be read or decoded."""

    def __init__(self, message: str, source: str | None = None):
        super().__init__(message, {"source": source} if source else None)
        self.source = source


class TranspileError(RoutegenError):
    """A JSON schema could not be turned into a validator."""


class SchemaGenerationError(RoutegenError):
    """Transpiling one slot of one route failed."""

    def __init__(self, identifier: str, slot: str, reason: str):
        super().__init__(
            f"Error in {slot} schema generation of {identifier}: {reason}",
            {"identifier": identifier, "slot": slot},
        )
        self.identifier = identifier
        self.slot = slot


class DuplicateRouteError(RoutegenError):
    """Two routes in one namespace resolve to the same identifier."""

    def __init__(self, identifier: str, namespace: str, first: str, second: str):
        super().__init__(
            f"{first} and {second} both resolve to {identifier!r} in namespace {namespace!r}",
            {"identifier": identifier, "namespace": namespace},
        )
        self.identifier = identifier
        self.namespace = namespace
        self.first = first
        self.second = second


class FormatError(RoutegenError):
    """The generated source could not be formatted."""

    def __init__(self, message: str, filename: str, line: int | None = None):
        details: dict[str, Any] = {"filename": filename}
        if line is not None:
            details["line"] = line
        super().__init__(message, details)
        self.filename = filename
        self.line = line

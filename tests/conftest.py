"""Shared fixtures for routegen tests.

RecordingTranspiler stands in for the zod transpiler so tests can inspect
which schemas were transpiled in which mode.
"""

from __future__ import annotations

import os
from typing import Any

import pytest
from pydantic import BaseModel

from routegen.errors import TranspileError
from routegen.method import Method
from routegen.model import RouteDescriptor, RouteSet
from routegen.transpiler import Mode


class RecordingTranspiler:
    """Transpiler double returning a marker expression per call."""

    def __init__(self, fail_on: dict | None = None):
        self.calls: list[tuple[dict[str, Any], Mode]] = []
        self.fail_on = fail_on

    def transpile(self, schema: Any, mode: Mode) -> str:
        if self.fail_on is not None and schema == self.fail_on:
            raise TranspileError("malformed schema")
        self.calls.append((schema, mode))
        return f"z.any() /* {mode.value} */"

    def mode_for(self, schema: dict[str, Any]) -> Mode:
        for called, mode in self.calls:
            if called == schema:
                return mode
        raise AssertionError(f"{schema!r} was never transpiled")


class Profile(BaseModel):
    name: str
    age: int | None = None


class Login(BaseModel):
    username: str
    password: str


USER_SCHEMA: dict = {
    "type": "object",
    "properties": {"name": {"type": "string"}},
    "required": ["name"],
}

LOGIN_SCHEMA: dict = {
    "type": "object",
    "properties": {"username": {"type": "string"}, "password": {"type": "string"}},
    "required": ["username", "password"],
}


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep ROUTEGEN_* settings from the host out of every test."""
    for key in list(os.environ):
        if key.startswith("ROUTEGEN_"):
            monkeypatch.delenv(key)


@pytest.fixture
def transpiler() -> RecordingTranspiler:
    return RecordingTranspiler()


@pytest.fixture
def sample_routes() -> RouteSet:
    """A small API touching all three transports."""
    profile = RouteDescriptor.new("/api/user/profile", Method.GET, "user").with_response(USER_SCHEMA)
    return RouteSet.of([
        profile,
        RouteDescriptor.new("/api/user/profile", Method.PUT, "user")
        .with_body(USER_SCHEMA)
        .with_error(409, "conflict"),
        RouteDescriptor.new("/api/admin/invite", Method.POST, "admin")
        .with_body(LOGIN_SCHEMA)
        .with_any_response(),
        RouteDescriptor.new("/api/user/me", Method.GET, "user")
        .with_response(USER_SCHEMA)
        .superseded_by(profile),
        RouteDescriptor.new("/api/board/events", Method.GET, "board")
        .with_params({"type": "object", "properties": {"id": {"type": "integer"}}})
        .with_channel(
            {"type": "object", "properties": {"ping": {"type": "boolean"}}},
            {"type": "object", "properties": {"pong": {"type": "boolean"}}},
        ),
        RouteDescriptor.new("/api/board/feed", Method.GET, "board")
        .with_stream({"type": "string"}),
    ])

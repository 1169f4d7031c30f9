"""Tests for route descriptors and their builder chain."""

import pytest

from routegen.errors import (
    DuplicateDeprecationError,
    DuplicateSlotError,
    StreamingMethodError,
    UnknownMethodError,
)
from routegen.method import Method
from routegen.model import (
    ANY,
    FLAGGED,
    NONE,
    ChannelKind,
    RouteDescriptor,
    RouteSet,
    SchemaKind,
    StreamKind,
    Superseded,
)

from conftest import LOGIN_SCHEMA, USER_SCHEMA, Profile


class TestBuilder:
    def test_new_defaults(self):
        route = RouteDescriptor.new("/api/user/profile", "get", "user")
        assert route.method is Method.GET
        assert route.params == NONE
        assert route.body == NONE
        assert route.response == NONE
        assert route.errors == ()
        assert route.add_to_client

    def test_with_calls_return_new_descriptor(self):
        base = RouteDescriptor.new("/api/user/profile", Method.PUT, "user")
        with_body = base.with_body(USER_SCHEMA)
        assert base.body == NONE
        assert with_body.body == SchemaKind(USER_SCHEMA)

    def test_schema_is_copied(self):
        schema = {"type": "object", "properties": {}}
        route = RouteDescriptor.new("/api/x", Method.POST, "x").with_body(schema)
        schema["properties"]["added"] = {"type": "string"}
        assert route.body.schema == {"type": "object", "properties": {}}

    def test_any_slots(self):
        route = (
            RouteDescriptor.new("/api/x", Method.POST, "x")
            .with_any_params()
            .with_any_body()
            .with_any_response()
        )
        assert route.params == ANY
        assert route.body == ANY
        assert route.response == ANY

    def test_model_is_derived(self):
        route = RouteDescriptor.new("/api/user/profile", Method.GET, "user").with_response(Profile)
        schema = route.response.schema
        assert schema["type"] == "object"
        assert schema["required"] == ["name"]
        assert "title" not in schema

    def test_errors_keep_order(self):
        route = (
            RouteDescriptor.new("/api/x", Method.GET, "x")
            .with_error(404, "not found")
            .with_error(409, "conflict")
        )
        assert route.errors == ((404, "not found"), (409, "conflict"))

    def test_unknown_method(self):
        with pytest.raises(UnknownMethodError):
            RouteDescriptor.new("/api/x", "FETCH", "x")


class TestSlotExclusivity:
    """Populating a slot twice fails and leaves the first attachment alone."""

    def test_body_twice(self):
        route = RouteDescriptor.new("/api/auth/login", Method.POST, "auth").with_body(LOGIN_SCHEMA)
        with pytest.raises(DuplicateSlotError) as exc_info:
            route.with_body(USER_SCHEMA)
        assert exc_info.value.slot == "body"
        assert route.body == SchemaKind(LOGIN_SCHEMA)

    def test_any_then_schema(self):
        route = RouteDescriptor.new("/api/x", Method.GET, "x").with_any_params()
        with pytest.raises(DuplicateSlotError):
            route.with_params(USER_SCHEMA)

    def test_response_then_stream(self):
        route = RouteDescriptor.new("/api/x", Method.GET, "x").with_response(USER_SCHEMA)
        with pytest.raises(DuplicateSlotError) as exc_info:
            route.with_stream(USER_SCHEMA)
        assert exc_info.value.slot == "response"

    def test_params_and_body_independent(self):
        route = (
            RouteDescriptor.new("/api/x", Method.POST, "x")
            .with_params(USER_SCHEMA)
            .with_body(LOGIN_SCHEMA)
        )
        assert route.params == SchemaKind(USER_SCHEMA)
        assert route.body == SchemaKind(LOGIN_SCHEMA)


class TestStreamingRestriction:
    def test_channel_on_post(self):
        with pytest.raises(StreamingMethodError):
            RouteDescriptor.new("/api/x", Method.POST, "x").with_channel(USER_SCHEMA, USER_SCHEMA)

    def test_stream_on_post(self):
        with pytest.raises(StreamingMethodError):
            RouteDescriptor.new("/api/x", Method.POST, "x").with_stream(USER_SCHEMA)

    def test_channel_on_get(self):
        route = RouteDescriptor.new("/api/x", Method.GET, "x").with_channel(USER_SCHEMA, LOGIN_SCHEMA)
        assert route.response == ChannelKind(USER_SCHEMA, LOGIN_SCHEMA)

    def test_stream_on_get(self):
        route = RouteDescriptor.new("/api/x", Method.GET, "x").with_stream(USER_SCHEMA)
        assert route.response == StreamKind(USER_SCHEMA)

    def test_direct_construction_checked(self):
        with pytest.raises(StreamingMethodError):
            RouteDescriptor("/api/x", Method.PUT, "x", response=StreamKind(USER_SCHEMA))

    def test_stream_kind_outside_response(self):
        with pytest.raises(StreamingMethodError):
            RouteDescriptor("/api/x", Method.GET, "x", body=StreamKind(USER_SCHEMA))


class TestDeprecation:
    def test_flagged(self):
        route = RouteDescriptor.new("/api/x", Method.GET, "x").with_deprecation()
        assert route.deprecated == FLAGGED

    def test_superseded_keeps_reference(self):
        new = RouteDescriptor.new("/api/user/profile", Method.GET, "user")
        old = RouteDescriptor.new("/api/user/me", Method.GET, "user").superseded_by(new)
        assert old.deprecated == Superseded("/api/user/profile", Method.GET, "user")

    def test_double_note(self):
        new = RouteDescriptor.new("/api/user/profile", Method.GET, "user")
        old = RouteDescriptor.new("/api/user/me", Method.GET, "user").with_deprecation()
        with pytest.raises(DuplicateDeprecationError):
            old.superseded_by(new)


class TestRouteSet:
    def test_keeps_order(self):
        a = RouteDescriptor.new("/api/a", Method.GET, "x")
        b = RouteDescriptor.new("/api/b", Method.GET, "x")
        routes = RouteSet().with_route(b).with_route(a)
        assert [r.path for r in routes] == ["/api/b", "/api/a"]
        assert len(routes) == 2

    def test_hidden_routes_filtered(self):
        a = RouteDescriptor.new("/api/a", Method.GET, "x")
        b = RouteDescriptor.new("/api/b", Method.GET, "x").hidden()
        assert RouteSet.of([a, b]).client_routes() == (a,)

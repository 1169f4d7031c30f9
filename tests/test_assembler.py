"""Tests for namespace grouping, capabilities and collision detection."""

import pytest

from routegen.assembler import (
    Capability,
    build_namespaces,
    capabilities,
    check_collisions,
    group_fragments,
    render_module,
)
from routegen.emitters import RouteFragment
from routegen.errors import DuplicateRouteError
from routegen.method import Method
from routegen.model import RouteDescriptor
from routegen.nodes import ConstDecl
from routegen.printer import TsPrinter

from conftest import USER_SCHEMA


def fragment(namespace, identifier):
    return RouteFragment(namespace, identifier, (ConstDecl(identifier, "1"),))


class TestGrouping:
    def test_sorted_keys_insertion_order_within(self):
        groups = group_fragments([
            fragment("user", "getProfile"),
            fragment("admin", "postInvite"),
            fragment("user", "putProfile"),
        ])
        assert list(groups) == ["admin", "user"]
        assert [f.identifier for f in groups["user"]] == ["getProfile", "putProfile"]

    def test_reserved_namespace_escaped(self):
        namespaces = build_namespaces(group_fragments([fragment("class", "getRoom")]))
        assert [ns.name for ns in namespaces] == ["nClass"]

    def test_escaped_tags_share_block(self):
        groups = group_fragments([fragment("class", "getRoom"), fragment("nClass", "getDesk")])
        assert list(groups) == ["nClass"]
        assert [f.identifier for f in groups["nClass"]] == ["getRoom", "getDesk"]

    def test_order_follows_raw_tag(self):
        groups = group_fragments([fragment("mail", "getInbox"), fragment("class", "getRoom")])
        assert list(groups) == ["nClass", "mail"]

    def test_namespace_members_flattened(self):
        namespaces = build_namespaces(group_fragments([
            fragment("user", "a"),
            fragment("user", "b"),
        ]))
        assert [m.name for m in namespaces[0].members] == ["a", "b"]


class TestCapabilities:
    def test_http_only(self):
        routes = [RouteDescriptor.new("/api/x", Method.GET, "x")]
        assert capabilities(routes) == frozenset()

    def test_channel_and_stream(self):
        routes = [
            RouteDescriptor.new("/api/a", Method.GET, "x").with_channel(USER_SCHEMA, USER_SCHEMA),
            RouteDescriptor.new("/api/b", Method.GET, "x").with_stream(USER_SCHEMA),
        ]
        assert capabilities(routes) == {Capability.CHANNEL, Capability.STREAM}


class TestCollisions:
    def test_same_namespace_collision(self):
        routes = [
            RouteDescriptor.new("/api/user/profile", Method.GET, "user"),
            RouteDescriptor.new("/api/profile", Method.GET, "user"),
        ]
        with pytest.raises(DuplicateRouteError) as exc_info:
            check_collisions(routes)
        assert exc_info.value.identifier == "getProfile"
        assert exc_info.value.first == "GET /api/user/profile"
        assert exc_info.value.second == "GET /api/profile"

    def test_escaped_namespace_collision(self):
        routes = [
            RouteDescriptor.new("/api/x", Method.GET, "class"),
            RouteDescriptor.new("/api/x", Method.GET, "nClass"),
        ]
        with pytest.raises(DuplicateRouteError) as exc_info:
            check_collisions(routes)
        assert exc_info.value.namespace == "nClass"
        assert exc_info.value.identifier == "getX"

    def test_different_namespaces_allowed(self):
        check_collisions([
            RouteDescriptor.new("/api/user/profile", Method.GET, "user"),
            RouteDescriptor.new("/api/admin/profile", Method.GET, "admin"),
        ])

    def test_different_methods_allowed(self):
        check_collisions([
            RouteDescriptor.new("/api/user/profile", Method.GET, "user"),
            RouteDescriptor.new("/api/user/profile", Method.PUT, "user"),
        ])


class TestRenderModule:
    def render(self, caps):
        return render_module([], frozenset(caps), TsPrinter())

    def test_preamble_always_present(self):
        out = self.render([])
        assert out.startswith("import { z } from 'zod';\n\nexport namespace client {\n")
        assert "    class PromiseWrapper<T> implements PromiseLike<T> {" in out
        assert "    const makeQuery = " in out
        assert out.endswith("}\n")

    def test_no_streaming_blocks_without_routes(self):
        out = self.render([])
        assert "streamUrl" not in out
        assert "class WebsocketWrapper" not in out
        assert "class SSE" not in out

    def test_channel_block(self):
        out = self.render([Capability.CHANNEL])
        assert "const streamUrl = " in out
        assert "class WebsocketWrapper<Client, Server> {" in out
        assert "class SSE" not in out

    def test_stream_block(self):
        out = self.render([Capability.STREAM])
        assert "const streamUrl = " in out
        assert "class SSE<Message> {" in out
        assert "class EventStream {" in out
        assert "options.fetch(request)" in out
        assert "class WebsocketWrapper" not in out

    def test_custom_root(self):
        out = render_module([], frozenset(), TsPrinter(), root_namespace="api")
        assert "export namespace api {" in out

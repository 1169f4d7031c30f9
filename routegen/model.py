"""Route descriptors: the immutable input of the generator.

A descriptor is built once through a builder chain and never changes
afterwards:

    route = (
        RouteDescriptor.new("/api/user/profile", Method.GET, "user")
        .with_response(Profile)
        .with_error(404, "no such user")
    )

Every ``with_*`` call returns a new descriptor. Misuse (populating a slot
twice, streaming responses on non-GET routes, two deprecation notes) fails
immediately.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Iterator, Union

from .deriver import derive_schema
from .errors import DuplicateDeprecationError, DuplicateSlotError, StreamingMethodError
from .method import Method

JsonSchema = dict[str, Any]


# ---------------------------------------------------------------------------
# Kinds
# ---------------------------------------------------------------------------

class Kind:
    """How a payload slot is typed."""

    label = "Kind"

    @property
    def is_populated(self) -> bool:
        return True

    @property
    def is_streaming(self) -> bool:
        return False

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True, eq=True)
class NoneKind(Kind):
    label = "None"

    @property
    def is_populated(self) -> bool:
        return False


@dataclass(frozen=True, eq=True)
class AnyKind(Kind):
    label = "Any"


@dataclass(frozen=True, eq=True)
class SchemaKind(Kind):
    schema: JsonSchema
    label = "Schema"


@dataclass(frozen=True, eq=True)
class ChannelKind(Kind):
    client_schema: JsonSchema
    server_schema: JsonSchema
    label = "Channel"

    @property
    def is_streaming(self) -> bool:
        return True


@dataclass(frozen=True, eq=True)
class StreamKind(Kind):
    schema: JsonSchema
    label = "Stream"

    @property
    def is_streaming(self) -> bool:
        return True


NONE = NoneKind()
ANY = AnyKind()


# ---------------------------------------------------------------------------
# Deprecation
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class NotDeprecated:
    @property
    def is_deprecated(self) -> bool:
        return False


@dataclass(frozen=True)
class Flagged:
    @property
    def is_deprecated(self) -> bool:
        return True


@dataclass(frozen=True)
class Superseded:
    """Points at the replacement route; its name is resolved at emission."""

    path: str
    method: Method
    namespace: str

    @property
    def is_deprecated(self) -> bool:
        return True


Deprecation = Union[NotDeprecated, Flagged, Superseded]

NOT_DEPRECATED = NotDeprecated()
FLAGGED = Flagged()


# ---------------------------------------------------------------------------
# Route descriptor
# ---------------------------------------------------------------------------

def _as_schema(value: Any, *, query: bool = False) -> JsonSchema:
    """Accept a JSON schema dict or any type pydantic can describe."""
    if isinstance(value, dict):
        return copy.deepcopy(value)
    return derive_schema(value, query=query)


@dataclass(frozen=True)
class RouteDescriptor:
    path: str
    method: Method
    namespace: str
    params: Kind = NONE
    body: Kind = NONE
    response: Kind = NONE
    deprecated: Deprecation = NOT_DEPRECATED
    errors: tuple[tuple[int, str], ...] = ()
    add_to_client: bool = True

    @classmethod
    def new(cls, path: str, method: Method | str, namespace: str) -> "RouteDescriptor":
        return cls(path=path, method=Method.parse(method), namespace=namespace)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", Method.parse(self.method))
        object.__setattr__(self, "errors", tuple((int(c), d) for c, d in self.errors))
        # channel and stream kinds only ever describe responses
        for slot in (self.params, self.body):
            if slot.is_streaming:
                raise StreamingMethodError(str(self.method), slot.label, self.path)
        if self.response.is_streaming and not self.method.is_read:
            raise StreamingMethodError(str(self.method), self.response.label, self.path)

    @property
    def route_key(self) -> str:
        return f"{self.method} {self.path}"

    def _attach(self, slot: str, kind: Kind) -> "RouteDescriptor":
        if getattr(self, slot).is_populated:
            raise DuplicateSlotError(slot, self.path)
        return replace(self, **{slot: kind})

    # -- params -----------------------------------------------------------

    def with_params(self, schema: Any) -> "RouteDescriptor":
        return self._attach("params", SchemaKind(_as_schema(schema, query=True)))

    def with_any_params(self) -> "RouteDescriptor":
        return self._attach("params", ANY)

    # -- body -------------------------------------------------------------

    def with_body(self, schema: Any) -> "RouteDescriptor":
        return self._attach("body", SchemaKind(_as_schema(schema)))

    def with_any_body(self) -> "RouteDescriptor":
        return self._attach("body", ANY)

    # -- response ---------------------------------------------------------

    def with_response(self, schema: Any) -> "RouteDescriptor":
        return self._attach("response", SchemaKind(_as_schema(schema)))

    def with_any_response(self) -> "RouteDescriptor":
        return self._attach("response", ANY)

    def with_channel(self, client: Any, server: Any) -> "RouteDescriptor":
        """Attach a websocket channel with distinct message shapes per direction."""
        self._require_read("Channel")
        return self._attach("response", ChannelKind(_as_schema(client), _as_schema(server)))

    def with_stream(self, message: Any) -> "RouteDescriptor":
        """Attach a server-sent event stream of one message shape."""
        self._require_read("Stream")
        return self._attach("response", StreamKind(_as_schema(message)))

    def _require_read(self, kind: str) -> None:
        if not self.method.is_read:
            raise StreamingMethodError(str(self.method), kind, self.path)

    # -- metadata ---------------------------------------------------------

    def with_error(self, code: int, description: str) -> "RouteDescriptor":
        return replace(self, errors=self.errors + ((int(code), description),))

    def with_deprecation(self) -> "RouteDescriptor":
        if self.deprecated.is_deprecated:
            raise DuplicateDeprecationError(self.path)
        return replace(self, deprecated=FLAGGED)

    def superseded_by(self, new_route: "RouteDescriptor") -> "RouteDescriptor":
        if self.deprecated.is_deprecated:
            raise DuplicateDeprecationError(self.path)
        return replace(
            self,
            deprecated=Superseded(new_route.path, new_route.method, new_route.namespace),
        )

    def hidden(self) -> "RouteDescriptor":
        """Keep the route out of the generated client."""
        return replace(self, add_to_client=False)


@dataclass(frozen=True)
class RouteSet:
    """Ordered routes handed to the generator as a whole."""

    routes: tuple[RouteDescriptor, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, routes: Iterable[RouteDescriptor]) -> "RouteSet":
        return cls(tuple(routes))

    def with_route(self, route: RouteDescriptor) -> "RouteSet":
        return RouteSet(self.routes + (route,))

    def client_routes(self) -> tuple[RouteDescriptor, ...]:
        return tuple(r for r in self.routes if r.add_to_client)

    def __iter__(self) -> Iterator[RouteDescriptor]:
        return iter(self.routes)

    def __len__(self) -> int:
        return len(self.routes)

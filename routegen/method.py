"""HTTP methods a route can be declared with."""

from __future__ import annotations

from enum import Enum

from .errors import UnknownMethodError


class Method(str, Enum):
    OPTIONS = "OPTIONS"
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    TRACE = "TRACE"
    CONNECT = "CONNECT"
    PATCH = "PATCH"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, token: "str | Method") -> "Method":
        """Parse a method token, ignoring case."""
        if isinstance(token, Method):
            return token
        try:
            return cls(str(token).upper())
        except ValueError:
            raise UnknownMethodError(str(token)) from None

    @property
    def is_read(self) -> bool:
        return self is Method.GET

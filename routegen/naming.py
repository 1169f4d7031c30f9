"""Convert HTTP method + path + namespace to client identifiers.

Pattern: {method}{Segment}{Segment}...
  - method token lower-cased
  - leading "/", then "api/", then "{namespace}/" stripped
  - remaining path split on "-", "/" and "_", each segment capitalized

Examples:
  GET    /api/user/profile        (user)  -> getProfile
  POST   /api/auth/log-in         (auth)  -> postLogIn
  DELETE /api/board/board_access  (admin) -> deleteBoardBoardAccess
  GET    /api/user/working-hours  (user)  -> getWorkingHours

Type aliases use the same identifier with an upper-case first letter
(getProfile -> GetProfileRes).
"""

from __future__ import annotations

import re

from .keywords import KEYWORDS
from .method import Method

_DELIMITERS = re.compile(r"[-/_]")


def first_upper(value: str) -> str:
    """Upper-case the first character, leave the rest untouched."""
    return value[:1].upper() + value[1:]


def _strip_prefix(value: str, prefix: str) -> str:
    if value.startswith(prefix):
        return value[len(prefix):]
    return value


def _relative_path(path: str, namespace: str) -> str:
    """Strip the leading separator, the api/ prefix and the namespace segment."""
    path = _strip_prefix(path, "/")
    path = _strip_prefix(path, "api/")
    return _strip_prefix(path, f"{namespace}/")


def resolve_name(method: Method | str, path: str, namespace: str) -> str:
    """Build the function identifier for a route.

    Identical (method, path, namespace) triples always give the same name.
    """
    start = str(Method.parse(method)).lower()
    segments = _DELIMITERS.split(_relative_path(path, namespace))
    return start + "".join(first_upper(s.lower()) for s in segments)


def type_name(identifier: str) -> str:
    """Return the prefix used for the route's type aliases."""
    return first_upper(identifier)


def escape_namespace(tag: str) -> str:
    """Rename namespace tags that are TypeScript reserved words.

    class -> nClass, default -> nDefault. Other tags are returned as-is.
    """
    if tag in KEYWORDS:
        return "n" + first_upper(tag)
    return tag

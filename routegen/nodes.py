"""Syntax nodes for the generated TypeScript module.

Emitters build these; printer.TsPrinter is the only place that turns them
into text. Expressions may be plain strings (emitted verbatim) or nodes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Call:
    callee: str
    args: tuple["Expr", ...] = ()
    multiline: bool = False


@dataclass(frozen=True)
class New:
    cls: str
    args: tuple["Expr", ...] = ()
    multiline: bool = False


@dataclass(frozen=True)
class Arrow:
    params: str
    body: "Expr"


@dataclass(frozen=True)
class Spread:
    value: str


@dataclass(frozen=True)
class ObjectLit:
    """Object literal; entries are (key, value) pairs or spreads."""

    entries: tuple[Union[tuple[str, "Expr"], Spread], ...]


@dataclass(frozen=True)
class Chain:
    """``base.method(args).method(args)``."""

    base: "Expr"
    calls: tuple[Call, ...]


@dataclass(frozen=True)
class Ternary:
    """``test ? then : otherwise``; multiline puts each branch on its own line."""

    test: "Expr"
    then: "Expr"
    otherwise: "Expr"
    multiline: bool = False


Expr = Union[str, Call, New, Arrow, ObjectLit, Chain, Ternary]


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DocComment:
    """A JSDoc block; an empty string renders as a bare ``*`` line."""

    lines: tuple[str, ...]


@dataclass(frozen=True)
class ConstDecl:
    name: str
    value: Expr
    exported: bool = False


@dataclass(frozen=True)
class TypeAlias:
    name: str
    value: str
    exported: bool = True


@dataclass(frozen=True)
class Param:
    name: str
    type: str
    default: str | None = None


@dataclass(frozen=True)
class Return:
    value: Expr


@dataclass(frozen=True)
class Function:
    name: str
    params: tuple[Param, ...]
    return_type: str
    body: tuple[Return, ...]
    doc: DocComment | None = None
    exported: bool = True


@dataclass(frozen=True)
class Group:
    """Declarations printed back to back without blank lines."""

    members: tuple["Node", ...]


@dataclass(frozen=True)
class Namespace:
    name: str
    members: tuple["Node", ...] = field(default_factory=tuple)
    exported: bool = True


Node = Union[ConstDecl, TypeAlias, Function, Group, Namespace, DocComment]

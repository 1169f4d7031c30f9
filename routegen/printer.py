"""Render syntax nodes as TypeScript source."""

from __future__ import annotations

from .nodes import (
    Arrow,
    Call,
    Chain,
    ConstDecl,
    DocComment,
    Expr,
    Function,
    Group,
    Namespace,
    New,
    Node,
    ObjectLit,
    Param,
    Return,
    Spread,
    Ternary,
    TypeAlias,
)


def ts_string(value: str) -> str:
    """Quote a value as a single-quoted TypeScript string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


class TsPrinter:
    def __init__(self, indent_width: int = 4, line_width: int = 90):
        self.unit = " " * indent_width
        self.line_width = line_width

    # -- helpers ----------------------------------------------------------

    def _indent(self, text: str, level: int = 1) -> str:
        pad = self.unit * level
        return "\n".join(pad + line if line else line for line in text.split("\n"))

    def _prefix(self, exported: bool) -> str:
        return "export " if exported else ""

    # -- expressions ------------------------------------------------------

    def expr(self, node: Expr) -> str:
        if isinstance(node, str):
            return node
        if isinstance(node, Call):
            return self._call(node.callee, node.args, node.multiline)
        if isinstance(node, New):
            return "new " + self._call(node.cls, node.args, node.multiline)
        if isinstance(node, Arrow):
            return f"({node.params}) => {self.expr(node.body)}"
        if isinstance(node, ObjectLit):
            return self._object(node)
        if isinstance(node, Chain):
            out = self.expr(node.base)
            for call in node.calls:
                out += "." + self._call(call.callee, call.args, call.multiline)
            return out
        if isinstance(node, Ternary):
            return self._ternary(node)
        raise TypeError(f"Cannot print expression {node!r}")

    def _call(self, callee: str, args: tuple[Expr, ...], multiline: bool) -> str:
        rendered = [self.expr(a) for a in args]
        if not multiline:
            return f"{callee}({', '.join(rendered)})"
        inner = "\n".join(self._indent(r) + "," for r in rendered)
        return f"{callee}(\n{inner}\n)"

    def _ternary(self, node: Ternary) -> str:
        test, then, otherwise = (self.expr(n) for n in (node.test, node.then, node.otherwise))
        if not node.multiline:
            return f"{test} ? {then} : {otherwise}"
        return f"{test}\n" + self._indent(f"? {then}\n: {otherwise}")

    def _object(self, node: ObjectLit) -> str:
        if not node.entries:
            return "{}"
        lines = []
        for entry in node.entries:
            if isinstance(entry, Spread):
                lines.append(f"...{entry.value},")
            else:
                key, value = entry
                lines.append(f"{key}: {self.expr(value)},")
        return "{\n" + self._indent("\n".join(lines)) + "\n}"

    # -- declarations -----------------------------------------------------

    def doc(self, node: DocComment) -> str:
        if len(node.lines) == 1:
            return f"/** {node.lines[0]} */"
        body = "\n".join(f" * {line}" if line else " *" for line in node.lines)
        return f"/**\n{body}\n */"

    def _param(self, param: Param) -> str:
        out = f"{param.name}: {param.type}"
        if param.default is not None:
            out += f" = {param.default}"
        return out

    def _signature(self, node: Function, level: int) -> str:
        head = f"{self._prefix(node.exported)}function {node.name}"
        tail = f"): {node.return_type} {{"
        params = [self._param(p) for p in node.params]
        single = f"{head}({', '.join(params)}{tail}"
        if not params or len(self.unit * level + single) <= self.line_width:
            return single
        inner = "\n".join(self._indent(p) + "," for p in params)
        return f"{head}(\n{inner}\n{tail}"

    def _statement(self, node: Return) -> str:
        return f"return {self.expr(node.value)};"

    def node(self, node: Node, level: int = 0) -> str:
        """Render one node; ``level`` only steers line wrapping."""
        if isinstance(node, ConstDecl):
            return f"{self._prefix(node.exported)}const {node.name} = {self.expr(node.value)};"
        if isinstance(node, TypeAlias):
            return f"{self._prefix(node.exported)}type {node.name} = {node.value};"
        if isinstance(node, DocComment):
            return self.doc(node)
        if isinstance(node, Group):
            return "\n".join(self.node(m, level) for m in node.members)
        if isinstance(node, Function):
            parts = []
            if node.doc is not None:
                parts.append(self.doc(node.doc))
            parts.append(self._signature(node, level))
            body = "\n".join(self._statement(s) for s in node.body)
            parts.append(self._indent(body))
            parts.append("}")
            return "\n".join(parts)
        if isinstance(node, Namespace):
            members = "\n\n".join(self.node(m, level + 1) for m in node.members)
            head = f"{self._prefix(node.exported)}namespace {node.name} {{"
            if not members:
                return head + "}"
            return f"{head}\n{self._indent(members)}\n}}"
        raise TypeError(f"Cannot print node {node!r}")

    def render(self, nodes: list[Node] | tuple[Node, ...], level: int = 0) -> str:
        """Render top-level nodes separated by blank lines, indented ``level`` deep."""
        text = "\n\n".join(self.node(n, level) for n in nodes)
        return self._indent(text, level) if level else text

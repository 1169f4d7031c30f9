"""Final formatting pass over the generated module text."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Protocol

from .errors import FormatError

logger = logging.getLogger(__name__)

_PAIRS = {")": "(", "]": "[", "}": "{"}


@dataclass(frozen=True)
class FormatStyle:
    indent_width: int = 4
    line_width: int = 90


class CodeFormatter(Protocol):
    def format(self, source: str, filename: str, style: FormatStyle) -> str: ...


def check_balanced(source: str, filename: str) -> None:
    """Raise FormatError if brackets outside strings and comments don't pair up."""
    stack: list[tuple[str, int]] = []
    line = 1
    i = 0
    quote: str | None = None
    n = len(source)

    while i < n:
        ch = source[i]
        if ch == "\n":
            line += 1
        if ch == "\\":
            i += 2
            continue
        if quote:
            if ch == quote:
                quote = None
        elif ch in "'\"`":
            quote = ch
        elif source.startswith("//", i):
            end = source.find("\n", i)
            i = n if end == -1 else end
            continue
        elif source.startswith("/*", i):
            end = source.find("*/", i + 2)
            if end == -1:
                raise FormatError("Unterminated comment", filename, line)
            line += source.count("\n", i, end)
            i = end + 2
            continue
        elif ch in "([{":
            stack.append((ch, line))
        elif ch in _PAIRS:
            if not stack or stack[-1][0] != _PAIRS[ch]:
                raise FormatError(f"Unexpected {ch!r}", filename, line)
            stack.pop()
        i += 1

    if quote:
        raise FormatError("Unterminated string literal", filename, line)
    if stack:
        opener, opened_at = stack[-1]
        raise FormatError(f"Unclosed {opener!r}", filename, opened_at)


class BasicFormatter:
    """Whitespace normalizer with a structural sanity check.

    Indentation is produced by the printer; this pass only expands tabs,
    strips trailing whitespace, collapses blank-line runs and ensures a
    final newline.
    """

    def format(self, source: str, filename: str, style: FormatStyle) -> str:
        check_balanced(source, filename)

        lines = [line.expandtabs(style.indent_width).rstrip() for line in source.split("\n")]
        text = re.sub(r"\n{3,}", "\n\n", "\n".join(lines)).strip("\n") + "\n"

        too_long = sum(1 for line in text.split("\n") if len(line) > style.line_width)
        if too_long:
            logger.warning(
                "%s: %d line(s) exceed %d characters", filename, too_long, style.line_width,
            )
        return text

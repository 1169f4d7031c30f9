"""Tests for the final formatting pass."""

import logging

import pytest

from routegen.errors import FormatError
from routegen.formatter import BasicFormatter, FormatStyle, check_balanced


def fmt(source, style=FormatStyle()):
    return BasicFormatter().format(source, "client.ts", style)


class TestCheckBalanced:
    def test_balanced(self):
        check_balanced("const a = f({ b: [1, 2] });", "client.ts")

    def test_brackets_in_strings_ignored(self):
        check_balanced("const a = '(' + \"]\" + `{`;", "client.ts")

    def test_brackets_in_comments_ignored(self):
        check_balanced("// (\n/* ] */\nconst a = 1;", "client.ts")

    def test_escaped_quote(self):
        check_balanced("const a = 'it\\'s (';", "client.ts")

    def test_unclosed(self):
        with pytest.raises(FormatError) as exc_info:
            check_balanced("function f() {\n  return 1;\n", "client.ts")
        assert exc_info.value.filename == "client.ts"
        assert exc_info.value.line == 1

    def test_unexpected(self):
        with pytest.raises(FormatError) as exc_info:
            check_balanced("const a = 1;\n}", "client.ts")
        assert exc_info.value.line == 2

    def test_mismatched(self):
        with pytest.raises(FormatError):
            check_balanced("f(]", "client.ts")

    def test_unterminated_string(self):
        with pytest.raises(FormatError):
            check_balanced("const a = 'oops;", "client.ts")

    def test_unterminated_comment(self):
        with pytest.raises(FormatError):
            check_balanced("/* never closed", "client.ts")


class TestBasicFormatter:
    def test_unbalanced_input_fails(self):
        with pytest.raises(FormatError, match="client.ts"):
            fmt("export namespace client {\n")

    def test_trailing_whitespace(self):
        assert fmt("const a = 1;   \n") == "const a = 1;\n"

    def test_blank_line_runs_collapse(self):
        assert fmt("a;\n\n\n\nb;") == "a;\n\nb;\n"

    def test_tabs_expanded(self):
        assert fmt("{\n\tx;\n}") == "{\n    x;\n}\n"

    def test_outer_blank_lines_stripped(self):
        assert fmt("\n\na;\n\n\n") == "a;\n"

    def test_idempotent(self):
        once = fmt("{\n\tx;   \n\n\n}\n")
        assert fmt(once) == once

    def test_long_lines_warn(self, caplog):
        with caplog.at_level(logging.WARNING, logger="routegen.formatter"):
            out = fmt("const a = 'xxxxxxxxxxxxxxxxxxxxxx';", FormatStyle(line_width=10))
        assert out == "const a = 'xxxxxxxxxxxxxxxxxxxxxx';\n"
        assert "1 line(s) exceed 10 characters" in caplog.text

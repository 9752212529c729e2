"""
Test suite for Qbit error reporting.

Tests cover:
- Span to line/column resolution
- Caret rendering of fatal errors
- Error kinds raised by the parser and their diagnostics

Author: xwest
"""

import unittest
import sys
import os
from unittest import mock

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from qbit import Parser, parse_program, parse_expression, ParserConfig
from qbit.lexer import Span, ParseContext, DiagnosticLevel, Diagnostic, BuildError
from qbit.parser import (
    ParseError, UnexpectedToken, UnexpectedEof, InvalidSyntax, MissingToken,
    TooMuchRecursion,
)


class TestParseContext(unittest.TestCase):
    """Test cases for source position resolution."""

    def test_second_line(self):
        source = "let x = 1;\nlet y = @;"
        context = ParseContext.from_span(source, Span(19, 20))

        self.assertEqual(context.line_number, 2)
        self.assertEqual(context.column_start, 9)
        self.assertEqual(context.column_end, 10)
        self.assertEqual(context.line_content, "let y = @;")
        self.assertEqual(context.span_in_line, (8, 9))

    def test_caret_rendering(self):
        """Test that carets sit under the offending text."""
        context = ParseContext.from_span("let y = abc;", Span(8, 11))
        self.assertEqual(str(context), "1:9-12: let y = abc;\n" + " " * 16 + "^^^")

    def test_empty_span_has_no_caret_line(self):
        context = ParseContext.from_span("abc", Span.at(3))
        self.assertTrue(context.is_empty)
        self.assertEqual(str(context), "1:4: abc")

    def test_empty_source(self):
        context = ParseContext.from_span("", Span.at(0))
        self.assertEqual(context.line_number, 1)
        self.assertEqual(context.column_start, 1)
        self.assertEqual(context.line_content, "")

    def test_crlf_line_endings(self):
        context = ParseContext.from_span("a\r\nbc", Span(3, 5))
        self.assertEqual(context.line_number, 2)
        self.assertEqual(context.column_start, 1)
        self.assertEqual(context.line_content, "bc")

    def test_only_newline_ends_a_line(self):
        """Form feeds and Unicode separators stay inside their line."""
        source = "let s = \"a\x0cb c\";\n/* \x85 \x0b */ x"
        context = ParseContext.from_span(source, Span(len(source) - 1, len(source)))

        self.assertEqual(context.line_number, 2)
        self.assertEqual(context.column_start, 11)
        self.assertEqual(context.line_content, "/* \x85 \x0b */ x")

    def test_line_numbers_after_form_feed_in_string(self):
        result = parse_program('let s = "a\x0cb";\nlet X = 1;')
        context = result.warnings[0].context
        self.assertEqual(context.line_number, 2)
        self.assertEqual(context.line_content, "let X = 1;")

    def test_span_clamped_to_line(self):
        context = ParseContext.from_span("ab\ncd", Span(1, 5))
        self.assertEqual(context.line_content, "ab")
        self.assertEqual(context.span_in_line, (1, 2))


class TestErrorKinds(unittest.TestCase):
    """Test cases for the errors raised by parsing."""

    def _fail(self, source: str, config=None) -> ParseError:
        with self.assertRaises(ParseError) as cm:
            parse_program(source, config)
        return cm.exception

    def test_build_error_surfaces_from_parse(self):
        error = self._fail("5 @ 3")
        self.assertIsInstance(error, BuildError)
        self.assertEqual(error.invalid_text, "@")

    def test_unclosed_group(self):
        """Test that an unclosed parenthesis reports the missing ')'."""
        with self.assertRaises(UnexpectedEof) as cm:
            parse_expression("(5 + 3")

        error = cm.exception
        self.assertEqual(error.expected, "')'")
        self.assertEqual(error.position, 6)
        self.assertEqual(str(error), "Unexpected end of file, expected ')'\n1:7: (5 + 3")

    def test_unexpected_token_rendering(self):
        error = self._fail("let x = ;")
        self.assertIsInstance(error, UnexpectedToken)
        self.assertEqual(error.expected, "expression")
        self.assertEqual(error.found, "';'")
        self.assertEqual(
            str(error),
            "Expected expression, found ';'\n1:9-10: let x = ;\n" + " " * 16 + "^",
        )

    def test_missing_separator(self):
        with self.assertRaises(MissingToken) as cm:
            parse_expression("f(1 2)")
        self.assertEqual(cm.exception.expected, "',' or ')'")
        self.assertEqual(cm.exception.span, Span(4, 5))
        self.assertTrue(str(cm.exception).startswith("Missing ',' or ')'"))

    def test_missing_array_separator(self):
        with self.assertRaises(MissingToken) as cm:
            parse_expression("[1 2]")
        self.assertEqual(cm.exception.expected, "',' or ']'")

    def test_separator_at_end_of_input(self):
        with self.assertRaises(UnexpectedEof) as cm:
            parse_expression("f(1")
        self.assertEqual(cm.exception.expected, "',' or ')'")

    def test_missing_property_name(self):
        with self.assertRaises(MissingToken) as cm:
            parse_expression("a.1")
        self.assertEqual(cm.exception.expected, "property name")

    def test_invalid_trailing_comma(self):
        error = self._fail("f(1, 2,);", ParserConfig(allow_trailing_commas=False))
        self.assertIsInstance(error, InvalidSyntax)
        self.assertEqual(error.span, Span(6, 7))
        self.assertEqual(error.describe(), "Syntax error: trailing comma before ')' is not allowed")

    def test_recursion_error_is_single_line(self):
        """Test that depth errors name the limit and position only."""
        with self.assertRaises(TooMuchRecursion) as cm:
            parse_expression("((((1))))", ParserConfig(max_recursion_depth=3))

        error = cm.exception
        self.assertEqual(error.max_depth, 3)
        self.assertEqual(error.position, 3)
        self.assertEqual(str(error), "Maximum recursion depth (3) exceeded at position 3")
        self.assertNotIn("\n", str(error))

    def test_default_limit_is_reachable(self):
        """Nesting up to the default limit parses on the interpreter stack."""
        config = ParserConfig()
        depth = config.max_recursion_depth
        expr = parse_expression("(" * depth + "1" + ")" * depth, config)

        for _ in range(depth):
            expr = expr.inner
        self.assertEqual(str(expr), "1")

    def test_moderate_nesting_under_default_limit(self):
        parse_expression("(" * 300 + "1" + ")" * 300)
        parse_expression("[" * 300 + "]" * 300)
        parse_program("{" * 500 + "}" * 500)
        chain = "a || b && c | d & e == f < g << h + i * "
        parse_expression((chain + "(") * 300 + "1" + ")" * 300)

    def test_one_past_default_limit(self):
        depth = 1001
        with self.assertRaises(TooMuchRecursion) as cm:
            parse_expression("(" * depth + "1" + ")" * depth)

        self.assertEqual(cm.exception.max_depth, 1000)
        self.assertEqual(cm.exception.position, 1000)

    def test_far_past_default_limit(self):
        depth = 5000
        source = "(" * depth + "1" + ")" * depth
        with self.assertRaises(TooMuchRecursion) as cm:
            parse_expression(source)
        self.assertEqual(cm.exception.max_depth, 1000)
        self.assertEqual(cm.exception.position, 1000)

    def test_recursion_limit_restored(self):
        limit = sys.getrecursionlimit()
        parse_expression("(" * 50 + "1" + ")" * 50)
        with self.assertRaises(TooMuchRecursion):
            parse_expression("(" * 1001 + "1" + ")" * 1001)
        self.assertEqual(sys.getrecursionlimit(), limit)

    def test_stack_exhaustion_points_at_deepest_nesting(self):
        """An exhausted interpreter stack is reported where nesting peaked."""
        with mock.patch.object(Parser, "_parse_primary", side_effect=RecursionError):
            with self.assertRaises(TooMuchRecursion) as cm:
                parse_expression("- - x")

        self.assertEqual(cm.exception.position, 2)
        self.assertEqual(cm.exception.max_depth, 1000)

    def test_first_error_aborts(self):
        error = self._fail("let a = 1;\nlet b = ;\nlet c = ;")
        self.assertEqual(error.context.line_number, 2)


class TestDiagnostics(unittest.TestCase):
    """Test cases for conversion to boundary diagnostics."""

    def test_error_to_diagnostic(self):
        with self.assertRaises(ParseError) as cm:
            parse_program("let x = 1;\nx = = 2;")

        diagnostic = cm.exception.to_diagnostic()
        self.assertEqual(diagnostic.level, DiagnosticLevel.ERROR)
        self.assertEqual(diagnostic.line, 2)
        self.assertEqual(diagnostic.column, 5)
        self.assertEqual(diagnostic.length, 1)
        self.assertEqual(diagnostic.code, "Q002")
        self.assertTrue(diagnostic.message.startswith("Expected expression, found '='"))

    def test_eof_diagnostic_has_length_one(self):
        with self.assertRaises(UnexpectedEof) as cm:
            parse_program("x = 1")
        self.assertEqual(cm.exception.to_diagnostic().length, 1)

    def test_recursion_diagnostic(self):
        with self.assertRaises(TooMuchRecursion) as cm:
            parse_program("((1));", ParserConfig(max_recursion_depth=2))
        diagnostic = cm.exception.to_diagnostic()
        self.assertEqual(diagnostic.length, 1)
        self.assertEqual(diagnostic.code, "Q006")

    def test_diagnostic_str(self):
        diagnostic = Diagnostic(DiagnosticLevel.WARN, 3, 7, 2, "expected 'x'\n3:7-9: let Xy = 1;", "W001")
        text = str(diagnostic)
        self.assertTrue(text.startswith("WARN[W001]: expected 'x'\n"))
        self.assertIn("  --> 3:7\n", text)

    def test_levels_are_ordered(self):
        self.assertLess(DiagnosticLevel.ERROR, DiagnosticLevel.WARN)
        self.assertEqual(int(DiagnosticLevel.HINT), 3)


if __name__ == '__main__':
    unittest.main()

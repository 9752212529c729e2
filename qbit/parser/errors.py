"""
Error handling for the Qbit parser.

Every syntax error is fatal: the first one raised aborts the whole parse and
no partial tree is returned. Warnings are ordinary objects collected next to
a successful result; they never interrupt parsing.

Author: xwest
"""

from typing import Optional

from ..lexer.tokens import Token, Span
from ..lexer.errors import (
    Diagnostic, DiagnosticLevel, ParseContext, ParseError, BuildError,
)


class UnexpectedToken(ParseError):
    """A token other than the one the grammar requires."""

    code = "Q002"

    def __init__(self, expected: Optional[str], found: str, span: Span, context: ParseContext):
        self.expected = expected
        self.found = found
        super().__init__(span, context)

    def describe(self) -> str:
        if self.expected is None:
            return f"Unexpected token {self.found}"
        return f"Expected {self.expected}, found {self.found}"


class UnexpectedEof(ParseError):
    """Input ended while a construct was still open."""

    code = "Q003"

    def __init__(self, expected: str, position: int, context: ParseContext):
        self.expected = expected
        self.position = position
        super().__init__(Span.at(position), context)

    def describe(self) -> str:
        return f"Unexpected end of file, expected {self.expected}"

    @property
    def length(self) -> int:
        # Editors need something to underline at end of input
        return 1


class InvalidSyntax(ParseError):
    code = "Q004"

    def __init__(self, message: str, span: Span, context: ParseContext):
        self.message = message
        super().__init__(span, context)

    def describe(self) -> str:
        return f"Syntax error: {self.message}"


class MissingToken(ParseError):
    """A separator or delimiter is absent, e.g. ``',' or ')'`` in a list."""

    code = "Q005"

    def __init__(self, expected: str, span: Span, context: ParseContext):
        self.expected = expected
        super().__init__(span, context)

    def describe(self) -> str:
        return f"Missing {self.expected}"


class TooMuchRecursion(ParseError):
    """
    Nesting exceeded the configured recursion limit.

    Rendered as one line without source context; input this deep is
    presumed pathological.
    """

    code = "Q006"

    def __init__(self, max_depth: int, position: int, context: ParseContext):
        self.max_depth = max_depth
        self.position = position
        super().__init__(Span.at(position), context)

    def describe(self) -> str:
        return f"Maximum recursion depth ({self.max_depth}) exceeded at position {self.position}"

    @property
    def length(self) -> int:
        return 1

    def __str__(self) -> str:
        return self.describe()


# ============================================================================
# Warnings
# ============================================================================

class ParseWarning:
    """
    Advisory diagnostic attached to a successful parse.

    Shares the rendering and conversion behaviour of ParseError but is
    never raised.
    """

    code = "W000"

    def __init__(self, span: Span, context: ParseContext):
        self.span = span
        self.context = context

    def describe(self) -> str:
        raise NotImplementedError

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(
            level=DiagnosticLevel.WARN,
            line=self.context.line_number,
            column=self.context.column_start,
            length=len(self.span),
            message=str(self),
            code=self.code,
        )

    def __str__(self) -> str:
        return f"{self.describe()}\n{self.context}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.describe()!r}, span={self.span})"


class NamingConvention(ParseWarning):
    code = "W001"

    def __init__(self, message: str, suggestion: str, span: Span, context: ParseContext):
        self.message = message
        self.suggestion = suggestion
        super().__init__(span, context)

    def describe(self) -> str:
        return self.message


class UnusedVariable(ParseWarning):
    code = "W002"

    def __init__(self, name: str, span: Span, context: ParseContext):
        self.name = name
        super().__init__(span, context)

    def describe(self) -> str:
        return f"Variable '{self.name}' is declared but never used"


class UnusedFunction(ParseWarning):
    code = "W003"

    def __init__(self, name: str, span: Span, context: ParseContext):
        self.name = name
        super().__init__(span, context)

    def describe(self) -> str:
        return f"Function '{self.name}' is declared but never used"


class UnreachableCode(ParseWarning):
    code = "W004"

    def describe(self) -> str:
        return "Unreachable code"


# ============================================================================
# Factory helpers (resolve the source context once, here)
# ============================================================================

def create_unexpected_token_error(expected: Optional[str], found: Token, source: str) -> UnexpectedToken:
    """Create an error for a token that does not fit the grammar."""
    return UnexpectedToken(
        expected=expected,
        found=found.describe(),
        span=found.span,
        context=ParseContext.from_span(source, found.span),
    )


def create_unexpected_eof_error(expected: str, position: int, source: str) -> UnexpectedEof:
    """Create an error for input that ends too early."""
    return UnexpectedEof(
        expected=expected,
        position=position,
        context=ParseContext.from_span(source, Span.at(position)),
    )


def create_invalid_syntax_error(message: str, span: Span, source: str) -> InvalidSyntax:
    return InvalidSyntax(message, span, ParseContext.from_span(source, span))


def create_missing_token_error(expected: str, span: Span, source: str) -> MissingToken:
    return MissingToken(expected, span, ParseContext.from_span(source, span))


def create_recursion_error(max_depth: int, position: int, source: str) -> TooMuchRecursion:
    return TooMuchRecursion(
        max_depth=max_depth,
        position=position,
        context=ParseContext.from_span(source, Span.at(position)),
    )


def create_naming_warning(suggestion: str, span: Span, source: str) -> NamingConvention:
    """Create a naming-convention warning pointing at a declared name."""
    return NamingConvention(
        message=f"expected '{suggestion}'",
        suggestion=suggestion,
        span=span,
        context=ParseContext.from_span(source, span),
    )


__all__ = [
    "ParseError", "BuildError", "UnexpectedToken", "UnexpectedEof",
    "InvalidSyntax", "MissingToken", "TooMuchRecursion",
    "ParseWarning", "NamingConvention", "UnusedVariable", "UnusedFunction",
    "UnreachableCode",
    "create_unexpected_token_error", "create_unexpected_eof_error",
    "create_invalid_syntax_error", "create_missing_token_error",
    "create_recursion_error", "create_naming_warning",
]

"""
Error handling shared by the Qbit lexer and parser.

Provides position resolution (span -> line, column, line text), caret
rendering, the boundary-facing Diagnostic record, and the root of the fatal
error hierarchy together with the lexer's own BuildError.

Author: xwest
"""

from enum import IntEnum
from dataclasses import dataclass
from typing import Optional, Tuple

from .tokens import Span


class DiagnosticLevel(IntEnum):
    """Severity of a diagnostic, ordered from most to least severe."""
    ERROR = 0
    WARN = 1
    INFO = 2
    HINT = 3


@dataclass(frozen=True)
class ParseContext:
    """
    Resolved source position of a span.

    ``column_start`` / ``column_end`` are 1-based; ``span_in_line`` is the
    0-based half-open sub-range of ``line_content`` covered by the span.
    """
    line_number: int
    column_start: int
    column_end: int
    line_content: str
    span_in_line: Tuple[int, int]

    @classmethod
    def from_span(cls, source: str, span: Span) -> "ParseContext":
        """Resolve ``span`` against ``source``. Every error and warning goes through here."""
        line_start = 0
        # Only '\n' ends a line; form feeds, U+2028 and friends are line content
        lines = source.split("\n")

        for index, raw_line in enumerate(lines):
            line = raw_line[:-1] if raw_line.endswith("\r") else raw_line
            line_end = line_start + len(line)

            if line_start <= span.start <= line_end:
                col_start = span.start - line_start
                col_end = min(max(span.end - line_start, col_start), len(line))
                return cls(
                    line_number=index + 1,
                    column_start=col_start + 1,
                    column_end=col_end + 1,
                    line_content=line,
                    span_in_line=(col_start, col_end),
                )

            line_start += len(raw_line) + 1

        # Position beyond the end of the source
        last_line = lines[-1].rstrip("\r")
        return cls(
            line_number=len(lines),
            column_start=1,
            column_end=1,
            line_content=last_line,
            span_in_line=(0, 0),
        )

    @property
    def is_empty(self) -> bool:
        return self.span_in_line[1] <= self.span_in_line[0]

    def __str__(self) -> str:
        if self.is_empty:
            return f"{self.line_number}:{self.column_start}: {self.line_content}"

        prefix = f"{self.line_number}:{self.column_start}-{self.column_end}: "
        start, end = self.span_in_line
        carets = " " * (len(prefix) + start) + "^" * max(end - start, 1)
        return f"{prefix}{self.line_content}\n{carets}"


@dataclass(frozen=True)
class Diagnostic:
    """
    Leveled, position-annotated message handed to tools (CLI, editors).

    ``line`` and ``column`` are 1-based; ``length`` is the width of the
    underlined range.
    """
    level: DiagnosticLevel
    line: int
    column: int
    length: int
    message: str
    code: Optional[str] = None

    def __str__(self) -> str:
        severity_prefix = self.level.name
        code = f"[{self.code}]" if self.code else ""
        first, _, rest = self.message.partition("\n")
        result = f"{severity_prefix}{code}: {first}\n"
        result += f"  --> {self.line}:{self.column}\n"
        if rest:
            result += rest + "\n"
        return result


class ParseError(Exception):
    """
    Root of every fatal error raised while turning source into an AST.

    Subclasses describe themselves through ``describe()``; the rendered
    message is the description followed by the caret-annotated context.
    """

    code = "Q000"

    def __init__(self, span: Span, context: ParseContext):
        self.span = span
        self.context = context
        super().__init__(self.describe())

    def describe(self) -> str:
        raise NotImplementedError

    @property
    def length(self) -> int:
        return len(self.span)

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(
            level=DiagnosticLevel.ERROR,
            line=self.context.line_number,
            column=self.context.column_start,
            length=self.length,
            message=str(self),
            code=self.code,
        )

    def __str__(self) -> str:
        return f"{self.describe()}\n{self.context}"


class BuildError(ParseError):
    """Raised by the lexer on the first byte range that matches no token."""

    code = "Q001"

    def __init__(self, message: str, invalid_text: str, span: Span, context: ParseContext):
        self.message = message
        self.invalid_text = invalid_text
        super().__init__(span, context)

    def describe(self) -> str:
        return f"Lexer error: {self.message} ('{self.invalid_text}')"


def create_build_error(message: str, source: str, span: Span) -> BuildError:
    """Create a lexer error for the text covered by ``span``."""
    return BuildError(
        message=message,
        invalid_text=source[span.start:span.end],
        span=span,
        context=ParseContext.from_span(source, span),
    )

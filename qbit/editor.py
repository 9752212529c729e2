"""
Editor integration for Qbit.

Turns a parse outcome into flat ``{message, line, column, length}`` records
that an editor extension can underline directly, and serialises them as
JSON.

Author: xwest
"""

import json
from dataclasses import dataclass, asdict
from typing import List, Optional, Tuple

from .lexer.errors import Diagnostic, ParseError
from .parser.config import ParserConfig
from .parser.parser import parse_program


@dataclass(frozen=True)
class EditorRecord:
    """One underline: 1-based line and column plus the width to mark."""
    message: str
    line: int
    column: int
    length: int

    @classmethod
    def from_diagnostic(cls, diagnostic: Diagnostic) -> "EditorRecord":
        return cls(
            message=diagnostic.message,
            line=diagnostic.line,
            column=diagnostic.column,
            length=diagnostic.length,
        )


@dataclass(frozen=True)
class EditorResult:
    success: bool
    errors: Tuple[EditorRecord, ...] = ()
    warnings: Tuple[EditorRecord, ...] = ()

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "errors": [asdict(record) for record in self.errors],
            "warnings": [asdict(record) for record in self.warnings],
        }

    def to_json(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)


def check_source(source: str, config: Optional[ParserConfig] = None) -> EditorResult:
    """
    Parse ``source`` and report what an editor should show.

    A failed parse yields exactly one error record and no warnings;
    a successful one yields the lint warnings.
    """
    try:
        result = parse_program(source, config)
    except ParseError as error:
        return EditorResult(
            success=False,
            errors=(EditorRecord.from_diagnostic(error.to_diagnostic()),),
        )

    return EditorResult(
        success=True,
        warnings=tuple(EditorRecord.from_diagnostic(d) for d in result.diagnostics),
    )


def check_syntax(source: str, config: Optional[ParserConfig] = None) -> List[EditorRecord]:
    """Syntax errors only, as a plain list (empty when the source parses)."""
    return list(check_source(source, config).errors)

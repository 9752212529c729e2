"""
Qbit Lexer Package

Implements the eager, fail-fast tokenizer for the Qbit scripting language.

Key Features:
- Longest-match operators including three-character compound forms
- Comments kept as trivia tokens so spans stay exact
- Signed 64-bit integer and decimal float literals
- Span to line/column resolution with caret rendering

Author: xwest
"""

from .tokens import Token, TokenType, Span, KEYWORDS, OPERATORS, spelling
from .lexer import Lexer, tokenize_string
from .errors import (
    DiagnosticLevel, Diagnostic, ParseContext, ParseError, BuildError,
    create_build_error,
)

__all__ = [
    "Lexer",
    "tokenize_string",
    "Token",
    "TokenType",
    "Span",
    "KEYWORDS",
    "OPERATORS",
    "spelling",
    "DiagnosticLevel",
    "Diagnostic",
    "ParseContext",
    "ParseError",
    "BuildError",
    "create_build_error",
]

"""
Qbit Language Front End

Lexer, parser and lint pass for Qbit, a small C-like scripting language.
Source text becomes an immutable syntax tree, or the first fatal error with
a caret-annotated source excerpt.

Architecture:
    qbit/
    ├── lexer/           # Tokenization, spans, source context
    ├── parser/          # AST, values, operators, recursive descent parser
    ├── analyzer/        # Naming-convention lint pass
    ├── editor.py        # Flat diagnostics for editor integrations
    └── cli.py           # `qbit` command

Author: xwest
License: MIT
"""

__version__ = "0.1.0"
__author__ = "xwest"
__license__ = "MIT"

from .lexer import Lexer, tokenize_string
from .parser import (
    Parser, ParserBuilder, ParserConfig, ParseResult,
    parse_program, parse_expression, parse_statement,
)
from .analyzer import Analyzer

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "ParserBuilder",
    "ParserConfig",
    "ParseResult",
    "Analyzer",

    # Entry points
    "tokenize_string",
    "parse_program",
    "parse_expression",
    "parse_statement",

    # Version info
    "__version__",
    "__author__",
    "__license__",
]

"""
Qbit Parser Package

Implements a recursive descent parser with precedence climbing for Qbit
expressions. Produces immutable ASTs and fails on the first syntax error.

Key Features:
- Precedence climbing with right-associative exponentiation
- Left-to-right postfix chains (calls, indexing, member access, ++/--)
- Configurable trailing commas and recursion depth
- Caret-annotated errors and naming-convention warnings

Author: xwest
"""

from .ast_nodes import *
from .values import Value, Int, Float, Bool, Str, Null
from .operators import Precedence, BinaryOp, UnaryOp
from .config import ParserConfig
from .parser import Parser, ParseResult, parse_program, parse_expression, parse_statement
from .builder import ParserBuilder
from .errors import (
    ParseError, BuildError, UnexpectedToken, UnexpectedEof, InvalidSyntax,
    MissingToken, TooMuchRecursion, ParseWarning, NamingConvention,
    UnusedVariable, UnusedFunction, UnreachableCode,
)

__all__ = [
    # Core parser
    "Parser", "ParserBuilder", "ParserConfig", "ParseResult",
    "parse_program", "parse_expression", "parse_statement",

    # AST nodes
    "ASTNode", "Expression", "Statement",
    "Literal", "Variable", "Binary", "Unary", "Group", "Call", "Member",
    "Index", "Array", "Assignment", "CompoundAssignment",
    "PreIncrement", "PostIncrement", "PreDecrement", "PostDecrement",
    "Let", "Const", "Function", "If", "Return", "Block",
    "ExpressionStatement", "Import", "Export", "While", "For", "Break",
    "Continue",

    # Values and operators
    "Value", "Int", "Float", "Bool", "Str", "Null",
    "Precedence", "BinaryOp", "UnaryOp",

    # Error handling
    "ParseError", "BuildError", "UnexpectedToken", "UnexpectedEof",
    "InvalidSyntax", "MissingToken", "TooMuchRecursion",
    "ParseWarning", "NamingConvention", "UnusedVariable", "UnusedFunction",
    "UnreachableCode",
]

"""
Token definitions for the Qbit lexer.

This module defines all token types supported by Qbit, including:
- Keywords (declarations, control flow, modules)
- Operators (arithmetic, comparison, logical, bitwise, compound assignment)
- Literals (integers, floats, booleans, strings, null)
- Comments, kept as trivia so spans stay contiguous
- Punctuation and delimiters

Author: xwest
"""

from enum import Enum, auto
from dataclasses import dataclass
from typing import Any, Optional


class TokenType(Enum):
    """
    Enumeration of all token types in Qbit.

    Organized by category for clarity and maintainability.
    """

    # ========================================================================
    # Special Tokens
    # ========================================================================
    EOF = auto()                    # End of input
    LINE_COMMENT = auto()           # // comment
    BLOCK_COMMENT = auto()          # /* comment */

    # ========================================================================
    # Literals
    # ========================================================================
    INTEGER = auto()                # 42
    FLOAT = auto()                  # 3.14
    STRING = auto()                 # "hello"
    TRUE = auto()                   # true
    FALSE = auto()                  # false
    NULL = auto()                   # null

    # ========================================================================
    # Identifiers and Keywords
    # ========================================================================
    IDENTIFIER = auto()             # variable_name

    LET = auto()                    # let
    CONST = auto()                  # const
    FN = auto()                     # fn
    RETURN = auto()                 # return
    IF = auto()                     # if
    ELSE = auto()                   # else
    IMPORT = auto()                 # import
    EXPORT = auto()                 # export
    WHILE = auto()                  # while
    FOR = auto()                    # for
    CONTINUE = auto()               # continue
    BREAK = auto()                  # break

    # ========================================================================
    # Operators
    # ========================================================================

    # Arithmetic operators
    PLUS = auto()                   # +
    MINUS = auto()                  # -
    MULTIPLY = auto()               # *
    DIVIDE = auto()                 # /
    MODULO = auto()                 # %
    CARET = auto()                  # ^ (exponentiation)
    POWER = auto()                  # ** (exponentiation)

    # Assignment operators
    ASSIGN = auto()                 # =
    PLUS_ASSIGN = auto()            # +=
    MINUS_ASSIGN = auto()           # -=
    MULTIPLY_ASSIGN = auto()        # *=
    DIVIDE_ASSIGN = auto()          # /=
    MODULO_ASSIGN = auto()          # %=
    CARET_ASSIGN = auto()           # ^=
    POWER_ASSIGN = auto()           # **=
    BIT_AND_ASSIGN = auto()         # &=
    BIT_OR_ASSIGN = auto()          # |=
    LEFT_SHIFT_ASSIGN = auto()      # <<=
    RIGHT_SHIFT_ASSIGN = auto()     # >>=

    # Increment / decrement
    INCREMENT = auto()              # ++
    DECREMENT = auto()              # --

    # Comparison operators
    EQUAL = auto()                  # ==
    NOT_EQUAL = auto()              # !=
    LESS_THAN = auto()              # <
    GREATER_THAN = auto()           # >
    LESS_EQUAL = auto()             # <=
    GREATER_EQUAL = auto()          # >=

    # Logical operators
    LOGICAL_AND = auto()            # &&
    LOGICAL_OR = auto()             # ||
    LOGICAL_NOT = auto()            # !

    # Bitwise operators
    BIT_AND = auto()                # &
    BIT_OR = auto()                 # |
    LEFT_SHIFT = auto()             # <<
    RIGHT_SHIFT = auto()            # >>

    # ========================================================================
    # Punctuation and Delimiters
    # ========================================================================
    LEFT_PAREN = auto()             # (
    RIGHT_PAREN = auto()            # )
    LEFT_BRACKET = auto()           # [
    RIGHT_BRACKET = auto()          # ]
    LEFT_BRACE = auto()             # {
    RIGHT_BRACE = auto()            # }

    SEMICOLON = auto()              # ;
    COMMA = auto()                  # ,
    DOT = auto()                    # .
    COLON = auto()                  # :


@dataclass(frozen=True)
class Span:
    """
    Half-open range ``[start, end)`` of offsets into the original source.

    Spans are the only way diagnostics address source text; the source is
    never copied into tokens or AST nodes beyond the lexeme itself.
    """
    start: int
    end: int

    def __len__(self) -> int:
        return max(self.end - self.start, 0)

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"

    @property
    def is_empty(self) -> bool:
        return self.end <= self.start

    @classmethod
    def at(cls, position: int) -> "Span":
        """Empty span at a single position (used for end-of-input)."""
        return cls(position, position)


@dataclass(frozen=True)
class Token:
    """
    Represents a lexical token in the Qbit language.

    Contains the token type, lexeme (raw text), semantic value
    and the span it occupies in the source.
    """
    type: TokenType
    lexeme: str                     # Raw text from source
    value: Any                      # Parsed/semantic value (e.g., int for INTEGER)
    span: Span

    def __str__(self) -> str:
        if self.value is not None and self.value != self.lexeme:
            return f"{self.type.name}({self.lexeme!r} -> {self.value!r})"
        return f"{self.type.name}({self.lexeme!r})"

    @property
    def is_trivia(self) -> bool:
        """Comments carry positions but are skipped by the grammar."""
        return self.type in TRIVIA

    @property
    def is_literal(self) -> bool:
        """Check if this token is a literal value."""
        return self.type in LITERALS

    def describe(self) -> str:
        """Human readable form used in error messages."""
        if self.type == TokenType.EOF:
            return "end of input"
        if self.type == TokenType.IDENTIFIER:
            return f"identifier '{self.lexeme}'"
        if self.type in (TokenType.INTEGER, TokenType.FLOAT):
            return f"number '{self.lexeme}'"
        if self.type == TokenType.STRING:
            return f"string {self.lexeme}"
        return f"'{self.lexeme}'"


TRIVIA = frozenset({TokenType.LINE_COMMENT, TokenType.BLOCK_COMMENT})

LITERALS = frozenset({
    TokenType.INTEGER, TokenType.FLOAT, TokenType.STRING,
    TokenType.TRUE, TokenType.FALSE, TokenType.NULL,
})


# Lookup tables for token recognition

KEYWORDS = {
    # Declarations
    "let": TokenType.LET,
    "const": TokenType.CONST,
    "fn": TokenType.FN,

    # Control flow
    "return": TokenType.RETURN,
    "if": TokenType.IF,
    "else": TokenType.ELSE,
    "while": TokenType.WHILE,
    "for": TokenType.FOR,
    "continue": TokenType.CONTINUE,
    "break": TokenType.BREAK,

    # Module system
    "import": TokenType.IMPORT,
    "export": TokenType.EXPORT,

    # Literal keywords
    "true": TokenType.TRUE,
    "false": TokenType.FALSE,
    "null": TokenType.NULL,
}

OPERATORS = {
    # Arithmetic
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTIPLY,
    "/": TokenType.DIVIDE,
    "%": TokenType.MODULO,
    "^": TokenType.CARET,
    "**": TokenType.POWER,

    # Assignment
    "=": TokenType.ASSIGN,
    "+=": TokenType.PLUS_ASSIGN,
    "-=": TokenType.MINUS_ASSIGN,
    "*=": TokenType.MULTIPLY_ASSIGN,
    "/=": TokenType.DIVIDE_ASSIGN,
    "%=": TokenType.MODULO_ASSIGN,
    "^=": TokenType.CARET_ASSIGN,
    "**=": TokenType.POWER_ASSIGN,
    "&=": TokenType.BIT_AND_ASSIGN,
    "|=": TokenType.BIT_OR_ASSIGN,
    "<<=": TokenType.LEFT_SHIFT_ASSIGN,
    ">>=": TokenType.RIGHT_SHIFT_ASSIGN,

    # Increment / decrement
    "++": TokenType.INCREMENT,
    "--": TokenType.DECREMENT,

    # Comparison
    "==": TokenType.EQUAL,
    "!=": TokenType.NOT_EQUAL,
    "<": TokenType.LESS_THAN,
    ">": TokenType.GREATER_THAN,
    "<=": TokenType.LESS_EQUAL,
    ">=": TokenType.GREATER_EQUAL,

    # Logical
    "&&": TokenType.LOGICAL_AND,
    "||": TokenType.LOGICAL_OR,
    "!": TokenType.LOGICAL_NOT,

    # Bitwise
    "&": TokenType.BIT_AND,
    "|": TokenType.BIT_OR,
    "<<": TokenType.LEFT_SHIFT,
    ">>": TokenType.RIGHT_SHIFT,

    # Punctuation
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
    ".": TokenType.DOT,
    ":": TokenType.COLON,
}

# Reverse table for "expected X" messages
SPELLINGS = {token_type: text for text, token_type in {**KEYWORDS, **OPERATORS}.items()}
SPELLINGS.update({
    TokenType.IDENTIFIER: "identifier",
    TokenType.INTEGER: "integer",
    TokenType.FLOAT: "float",
    TokenType.STRING: "string",
    TokenType.EOF: "end of input",
})


def spelling(token_type: TokenType) -> str:
    """Return the source spelling of a token type, or a readable name."""
    return SPELLINGS.get(token_type, token_type.name.lower())


def max_operator_length() -> int:
    return max(len(op) for op in OPERATORS)

"""
Operator metadata for the Qbit expression grammar.

Binary operators carry their binding power and associativity; the parser
drives precedence climbing entirely from these tables.

Author: xwest
"""

from enum import Enum, IntEnum
from typing import Optional

from ..lexer.tokens import Token, TokenType


class Precedence(IntEnum):
    """Binding power of binary operators (higher binds tighter)."""
    OR = 1              # ||
    AND = 2             # &&
    BIT_OR = 3          # |
    BIT_AND = 4         # &
    EQUALITY = 5        # ==, !=
    COMPARISON = 6      # <, <=, >, >=
    SHIFT = 7           # <<, >>
    TERM = 8            # +, -
    FACTOR = 9          # *, /, %
    POWER = 10          # **, ^


class BinaryOp(Enum):
    """Binary operators; the value is the canonical source spelling."""

    # Arithmetic
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    POW = "**"

    # Comparison
    EQ = "=="
    NEQ = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    # Logic
    AND = "&&"
    OR = "||"

    # Bitwise
    BIT_AND = "&"
    BIT_OR = "|"
    SHL = "<<"
    SHR = ">>"

    @property
    def precedence(self) -> Precedence:
        return _PRECEDENCES[self]

    @property
    def is_right_associative(self) -> bool:
        return self is BinaryOp.POW

    @classmethod
    def from_token(cls, token: Token) -> Optional["BinaryOp"]:
        return _BINARY_TOKENS.get(token.type)

    @classmethod
    def from_compound_assignment(cls, token: Token) -> Optional["BinaryOp"]:
        """Operator applied by a compound assignment token such as ``+=``."""
        return _COMPOUND_TOKENS.get(token.type)


class UnaryOp(Enum):
    NOT = "!"
    NEG = "-"

    @classmethod
    def from_token(cls, token: Token) -> Optional["UnaryOp"]:
        return _UNARY_TOKENS.get(token.type)


_PRECEDENCES = {
    BinaryOp.OR: Precedence.OR,
    BinaryOp.AND: Precedence.AND,
    BinaryOp.BIT_OR: Precedence.BIT_OR,
    BinaryOp.BIT_AND: Precedence.BIT_AND,
    BinaryOp.EQ: Precedence.EQUALITY,
    BinaryOp.NEQ: Precedence.EQUALITY,
    BinaryOp.LT: Precedence.COMPARISON,
    BinaryOp.LE: Precedence.COMPARISON,
    BinaryOp.GT: Precedence.COMPARISON,
    BinaryOp.GE: Precedence.COMPARISON,
    BinaryOp.SHL: Precedence.SHIFT,
    BinaryOp.SHR: Precedence.SHIFT,
    BinaryOp.ADD: Precedence.TERM,
    BinaryOp.SUB: Precedence.TERM,
    BinaryOp.MUL: Precedence.FACTOR,
    BinaryOp.DIV: Precedence.FACTOR,
    BinaryOp.MOD: Precedence.FACTOR,
    BinaryOp.POW: Precedence.POWER,
}

_BINARY_TOKENS = {
    TokenType.PLUS: BinaryOp.ADD,
    TokenType.MINUS: BinaryOp.SUB,
    TokenType.MULTIPLY: BinaryOp.MUL,
    TokenType.DIVIDE: BinaryOp.DIV,
    TokenType.MODULO: BinaryOp.MOD,
    TokenType.CARET: BinaryOp.POW,
    TokenType.POWER: BinaryOp.POW,
    TokenType.EQUAL: BinaryOp.EQ,
    TokenType.NOT_EQUAL: BinaryOp.NEQ,
    TokenType.LESS_THAN: BinaryOp.LT,
    TokenType.LESS_EQUAL: BinaryOp.LE,
    TokenType.GREATER_THAN: BinaryOp.GT,
    TokenType.GREATER_EQUAL: BinaryOp.GE,
    TokenType.LOGICAL_AND: BinaryOp.AND,
    TokenType.LOGICAL_OR: BinaryOp.OR,
    TokenType.BIT_AND: BinaryOp.BIT_AND,
    TokenType.BIT_OR: BinaryOp.BIT_OR,
    TokenType.LEFT_SHIFT: BinaryOp.SHL,
    TokenType.RIGHT_SHIFT: BinaryOp.SHR,
}

_COMPOUND_TOKENS = {
    TokenType.PLUS_ASSIGN: BinaryOp.ADD,
    TokenType.MINUS_ASSIGN: BinaryOp.SUB,
    TokenType.MULTIPLY_ASSIGN: BinaryOp.MUL,
    TokenType.DIVIDE_ASSIGN: BinaryOp.DIV,
    TokenType.MODULO_ASSIGN: BinaryOp.MOD,
    TokenType.CARET_ASSIGN: BinaryOp.POW,
    TokenType.POWER_ASSIGN: BinaryOp.POW,
    TokenType.BIT_AND_ASSIGN: BinaryOp.BIT_AND,
    TokenType.BIT_OR_ASSIGN: BinaryOp.BIT_OR,
    TokenType.LEFT_SHIFT_ASSIGN: BinaryOp.SHL,
    TokenType.RIGHT_SHIFT_ASSIGN: BinaryOp.SHR,
}

_UNARY_TOKENS = {
    TokenType.LOGICAL_NOT: UnaryOp.NOT,
    TokenType.MINUS: UnaryOp.NEG,
}

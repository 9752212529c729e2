"""
Qbit Recursive Descent Parser

Statements are parsed by recursive descent, dispatching on the first token.
Expressions use precedence climbing driven by the operator tables in
``operators.py``: one unary/postfix term, then a loop folding binary
operators whose precedence clears the current threshold. Assignment is
handled last, right-associatively, at the lowest level.

Nesting is bounded by ``ParserConfig.max_recursion_depth``; input that nests
deeper fails with TooMuchRecursion instead of exhausting the stack.

Author: xwest
"""

import logging
import sys
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from ..lexer.tokens import Token, TokenType, Span, spelling
from ..lexer.errors import Diagnostic
from .ast_nodes import (
    Expression, Statement, Literal, Variable, Binary, Unary, Group, Call,
    Member, Index, Array, Assignment, CompoundAssignment, PreIncrement,
    PostIncrement, PreDecrement, PostDecrement, Let, Const, Function, If,
    Return, Block, ExpressionStatement, Import, Export, While, For, Break,
    Continue,
)
from .config import ParserConfig, DEFAULT_CONFIG
from .errors import (
    ParseError, ParseWarning, create_unexpected_token_error,
    create_unexpected_eof_error, create_invalid_syntax_error,
    create_missing_token_error, create_recursion_error,
)
from .operators import Precedence, BinaryOp, UnaryOp
from .values import from_python

logger = logging.getLogger(__name__)

# Token types named in words rather than quoted in "expected ..." messages
_NAMED_TYPES = {
    TokenType.IDENTIFIER, TokenType.INTEGER, TokenType.FLOAT,
    TokenType.STRING, TokenType.EOF,
}

# Interpreter frames a single nesting level may hold. The deepest case is a
# group closing a chain through every binary precedence level:
# primary, expression, ten precedence frames, unary, postfix.
_FRAMES_PER_LEVEL = 16

# The interpreter recursion limit is process-wide; concurrent parses share
# one raised limit and the last one out restores the original.
_limit_lock = threading.Lock()
_active_parses = 0
_base_limit = 0


def _expected(token_type: TokenType) -> str:
    text = spelling(token_type)
    return text if token_type in _NAMED_TYPES else f"'{text}'"


@contextmanager
def _interpreter_stack(levels: int):
    """Raise the interpreter recursion limit so ``levels`` of nesting fit."""
    global _active_parses, _base_limit

    with _limit_lock:
        if _active_parses == 0:
            _base_limit = sys.getrecursionlimit()
        _active_parses += 1
        needed = _base_limit + levels * _FRAMES_PER_LEVEL
        if sys.getrecursionlimit() < needed:
            sys.setrecursionlimit(needed)

    try:
        yield
    finally:
        with _limit_lock:
            _active_parses -= 1
            if _active_parses == 0:
                sys.setrecursionlimit(_base_limit)


@dataclass(frozen=True)
class ParseResult:
    """Statements of a successfully parsed program plus its lint warnings."""
    statements: Tuple[Statement, ...]
    warnings: Tuple[ParseWarning, ...] = ()

    @property
    def diagnostics(self) -> Tuple[Diagnostic, ...]:
        return tuple(warning.to_diagnostic() for warning in self.warnings)


class Parser:
    """
    Qbit parser.

    Owns a cursor and a depth counter for a single parse. Comment tokens
    are dropped up front, so the cursor only ever sees grammar tokens while
    every span still refers to the original source.
    """

    def __init__(self, tokens: List[Token], source: str = "", config: Optional[ParserConfig] = None):
        """
        Initialize parser with a list of tokens.

        Args:
            tokens: Tokens from the lexer (comments allowed)
            source: The text the tokens were produced from, for error context
            config: Parser options, defaults to ParserConfig()
        """
        from ..analyzer import Analyzer

        self.source = source
        self.config = config or DEFAULT_CONFIG
        self.tokens = [token for token in tokens if not token.is_trivia]
        if not self.tokens or self.tokens[-1].type != TokenType.EOF:
            end = tokens[-1].span.end if tokens else 0
            self.tokens.append(Token(TokenType.EOF, "", None, Span.at(end)))

        self.current = 0
        self.depth = 0
        self.deepest = 0
        self.deepest_position = 0
        self.analyzer = Analyzer(source)

        self._init_parsing_tables()

    def _init_parsing_tables(self):
        """Initialize the statement dispatch table."""
        self.statement_parsers: Dict[TokenType, Callable[[], Statement]] = {
            TokenType.LET: self._parse_let,
            TokenType.CONST: self._parse_const,
            TokenType.FN: self._parse_function,
            TokenType.IF: self._parse_if,
            TokenType.WHILE: self._parse_while,
            TokenType.FOR: self._parse_for,
            TokenType.BREAK: self._parse_break,
            TokenType.CONTINUE: self._parse_continue,
            TokenType.RETURN: self._parse_return,
            TokenType.LEFT_BRACE: self._parse_block,
            TokenType.IMPORT: self._parse_import,
            TokenType.EXPORT: self._parse_export,
        }

    # Entry points

    def parse(self) -> ParseResult:
        """
        Parse the whole token stream as a program.

        Returns:
            ParseResult with every top-level statement and the lint warnings

        Raises:
            ParseError: On the first syntax error; nothing partial is returned
        """
        statements = []
        with self._stack_guard():
            while not self._is_at_end():
                statements.append(self._parse_statement())

        warnings = self.analyzer.finalize()
        logger.debug("parsed %d statements with %d warnings", len(statements), len(warnings))
        return ParseResult(tuple(statements), warnings)

    def parse_expression(self) -> Expression:
        """Parse exactly one expression; leftover tokens are an error."""
        with self._stack_guard():
            expr = self._parse_expression()
        self._expect_end()
        return expr

    def parse_statement(self) -> Statement:
        """Parse exactly one statement; leftover tokens are an error."""
        with self._stack_guard():
            statement = self._parse_statement()
        self._expect_end()
        return statement

    def _expect_end(self):
        if not self._is_at_end():
            raise create_unexpected_token_error("end of input", self._peek(), self.source)

    # Recursion control

    @contextmanager
    def _nested(self):
        """
        Count one level of nesting for the duration of the block.

        Entered before the construct's opening token is consumed, so the
        reported position is the token that opens the offending level.
        """
        self.depth += 1
        try:
            position = self._peek().span.start
            if self.depth > self.deepest:
                self.deepest = self.depth
                self.deepest_position = position
            if self.depth > self.config.max_recursion_depth:
                logger.debug("recursion limit %d hit at %d",
                             self.config.max_recursion_depth, position)
                raise create_recursion_error(
                    self.config.max_recursion_depth, position, self.source
                )
            yield
        finally:
            self.depth -= 1

    @contextmanager
    def _stack_guard(self):
        """
        Make room on the interpreter stack for the configured depth.

        Should the stack still run out, the failure is reported as
        TooMuchRecursion at the deepest nesting reached.
        """
        with _interpreter_stack(self.config.max_recursion_depth):
            try:
                yield
            except RecursionError:
                logger.debug("interpreter stack exhausted at depth %d", self.deepest)
                raise create_recursion_error(
                    self.config.max_recursion_depth, self.deepest_position, self.source
                ) from None

    # Statements

    def _parse_statement(self) -> Statement:
        """Parse a statement."""
        with self._nested():
            parser = self.statement_parsers.get(self._peek().type)
            if parser is not None:
                return parser()
            return self._parse_expression_statement()

    def _declare(self, statement: Statement, name: Token) -> Statement:
        """Hand a freshly built declaration to the lint pass."""
        self.analyzer.analyze(statement, name.span)
        return statement

    def _parse_let(self) -> Let:
        """Parse ``let name = value;``."""
        self._consume(TokenType.LET)
        name = self._consume_identifier("identifier")
        self._consume(TokenType.ASSIGN)
        value = self._parse_expression()
        self._consume(TokenType.SEMICOLON)
        return self._declare(Let(name.lexeme, value), name)

    def _parse_const(self) -> Const:
        """Parse ``const NAME = value;``."""
        self._consume(TokenType.CONST)
        name = self._consume_identifier("identifier")
        self._consume(TokenType.ASSIGN)
        value = self._parse_expression()
        self._consume(TokenType.SEMICOLON)
        return self._declare(Const(name.lexeme, value), name)

    def _parse_function(self) -> Function:
        """Parse ``fn name(params) { body }``."""
        self._consume(TokenType.FN)
        name = self._consume_identifier("function name")
        self._consume(TokenType.LEFT_PAREN)
        params = self._parse_delimited(
            TokenType.RIGHT_PAREN, lambda: self._consume_identifier("parameter name").lexeme
        )
        body = self._parse_block()
        return self._declare(Function(name.lexeme, params, body), name)

    def _parse_if(self) -> If:
        """Parse an if statement; ``else if`` recurses into a nested If."""
        self._consume(TokenType.IF)
        condition = self._parse_expression()
        then_branch = self._parse_block()

        else_branch = None
        if self._match(TokenType.ELSE):
            if self._check(TokenType.IF):
                with self._nested():
                    else_branch = self._parse_if()
            else:
                else_branch = self._parse_block()

        return If(condition, then_branch, else_branch)

    def _parse_while(self) -> While:
        self._consume(TokenType.WHILE)
        condition = self._parse_expression()
        body = self._parse_block()
        return While(condition, body)

    def _parse_for(self) -> For:
        """Parse ``for (init; condition; update) { body }``, every clause optional."""
        self._consume(TokenType.FOR)
        self._consume(TokenType.LEFT_PAREN)

        # The init statement consumes its own ';'
        init = None
        if not self._match(TokenType.SEMICOLON):
            init = self._parse_statement()

        condition = None
        if not self._match(TokenType.SEMICOLON):
            condition = self._parse_expression()
            self._consume(TokenType.SEMICOLON)

        update = None
        if not self._check(TokenType.RIGHT_PAREN):
            update = self._parse_expression()
        self._consume(TokenType.RIGHT_PAREN)

        body = self._parse_block()
        return For(init, condition, update, body)

    def _parse_break(self) -> Break:
        self._consume(TokenType.BREAK)
        self._consume(TokenType.SEMICOLON)
        return Break()

    def _parse_continue(self) -> Continue:
        self._consume(TokenType.CONTINUE)
        self._consume(TokenType.SEMICOLON)
        return Continue()

    def _parse_return(self) -> Return:
        """Parse a return statement."""
        self._consume(TokenType.RETURN)

        value = None
        if not self._check(TokenType.SEMICOLON) and not self._is_at_end():
            value = self._parse_expression()

        self._consume(TokenType.SEMICOLON)
        return Return(value)

    def _parse_block(self) -> Block:
        """Parse a brace-delimited block."""
        self._consume(TokenType.LEFT_BRACE)
        statements = []

        while not self._check(TokenType.RIGHT_BRACE) and not self._is_at_end():
            statements.append(self._parse_statement())

        self._consume(TokenType.RIGHT_BRACE)
        return Block(tuple(statements))

    def _parse_import(self) -> Import:
        """Parse ``import "module";`` or ``import module;``."""
        self._consume(TokenType.IMPORT)

        token = self._peek()
        if token.type not in (TokenType.STRING, TokenType.IDENTIFIER):
            raise self._error("module name")
        self._advance()

        self._consume(TokenType.SEMICOLON)
        return Import(token.value)

    def _parse_export(self) -> Export:
        self._consume(TokenType.EXPORT)
        return Export(self._parse_statement())

    def _parse_expression_statement(self) -> ExpressionStatement:
        expr = self._parse_expression()
        self._consume(TokenType.SEMICOLON)
        return ExpressionStatement(expr)

    # Expressions

    def _parse_expression(self) -> Expression:
        """Parse an expression, including (compound) assignment."""
        expr = self._parse_precedence(Precedence.OR)

        token = self._peek()
        if token.type == TokenType.ASSIGN:
            with self._nested():
                self._advance()
                value = self._parse_expression()
            return Assignment(expr, value)

        op = BinaryOp.from_compound_assignment(token)
        if op is not None:
            with self._nested():
                self._advance()
                value = self._parse_expression()
            return CompoundAssignment(expr, op, value)

        return expr

    def _parse_precedence(self, min_precedence: int) -> Expression:
        """Precedence climbing over binary operators of at least ``min_precedence``."""
        left = self._parse_unary()

        while True:
            op = BinaryOp.from_token(self._peek())
            if op is None or op.precedence < min_precedence:
                break

            if op.is_right_associative:
                # Unbounded on chains like 2 ** 2 ** 2 ..., so it counts as nesting
                with self._nested():
                    self._advance()
                    right = self._parse_precedence(op.precedence)
            else:
                self._advance()
                right = self._parse_precedence(op.precedence + 1)

            left = Binary(op, left, right)

        return left

    def _parse_unary(self) -> Expression:
        """Parse prefix ``!``, ``-``, ``++`` and ``--``."""
        token = self._peek()

        op = UnaryOp.from_token(token)
        if op is not None:
            with self._nested():
                self._advance()
                operand = self._parse_unary()
            return Unary(op, operand)

        if token.type in (TokenType.INCREMENT, TokenType.DECREMENT):
            # Operand is a postfix expression only: no ++!x
            with self._nested():
                self._advance()
                operand = self._parse_postfix()
            if token.type == TokenType.INCREMENT:
                return PreIncrement(operand)
            return PreDecrement(operand)

        return self._parse_postfix()

    def _parse_postfix(self) -> Expression:
        """Parse a primary followed by any chain of ``++ -- [i] .name (args)``."""
        expr = self._parse_primary()

        while True:
            if self._match(TokenType.INCREMENT):
                expr = PostIncrement(expr)
            elif self._match(TokenType.DECREMENT):
                expr = PostDecrement(expr)
            elif self._check(TokenType.LEFT_BRACKET):
                with self._nested():
                    self._advance()
                    index = self._parse_expression()
                    self._consume(TokenType.RIGHT_BRACKET)
                expr = Index(expr, index)
            elif self._match(TokenType.DOT):
                expr = Member(expr, self._consume_property_name())
            elif self._check(TokenType.LEFT_PAREN):
                with self._nested():
                    self._advance()
                    args = self._parse_delimited(TokenType.RIGHT_PAREN, self._parse_expression)
                expr = Call(expr, args)
            else:
                break

        return expr

    def _parse_primary(self) -> Expression:
        """Parse literals, variables, groups and array literals."""
        token = self._peek()
        if token.type == TokenType.EOF:
            raise self._error("expression")

        if token.type == TokenType.LEFT_PAREN:
            with self._nested():
                self._advance()
                inner = self._parse_expression()
                self._consume(TokenType.RIGHT_PAREN)
            return Group(inner)

        if token.type == TokenType.LEFT_BRACKET:
            # The array literal consumes its own bracket
            return self._parse_array_literal()

        self._advance()

        if token.is_literal:
            return Literal(from_python(token.value))

        if token.type == TokenType.IDENTIFIER:
            return Variable(token.lexeme)

        raise create_unexpected_token_error("expression", token, self.source)

    def _parse_array_literal(self) -> Array:
        with self._nested():
            self._consume(TokenType.LEFT_BRACKET)
            elements = self._parse_delimited(TokenType.RIGHT_BRACKET, self._parse_expression)
        return Array(elements)

    def _parse_delimited(self, close: TokenType, parse_item: Callable) -> tuple:
        """
        Parse ``item (',' item)* ','?`` up to and including ``close``.

        Shared by argument lists, parameter lists and array literals. A
        trailing comma is accepted only when the configuration allows it.
        """
        items = []

        while not self._check(close):
            items.append(parse_item())

            if self._check(TokenType.COMMA):
                comma = self._advance()
                if self._check(close) and not self.config.allow_trailing_commas:
                    raise create_invalid_syntax_error(
                        f"trailing comma before '{spelling(close)}' is not allowed",
                        comma.span, self.source,
                    )
            elif not self._check(close):
                separators = f"',' or '{spelling(close)}'"
                if self._is_at_end():
                    raise self._error(separators)
                raise create_missing_token_error(separators, self._peek().span, self.source)

        self._consume(close)
        return tuple(items)

    def _consume_property_name(self) -> str:
        token = self._peek()
        if token.type != TokenType.IDENTIFIER:
            if self._is_at_end():
                raise self._error("property name")
            raise create_missing_token_error("property name", token.span, self.source)
        self._advance()
        return token.lexeme

    # Utility methods

    def _match(self, token_type: TokenType) -> bool:
        """Check if current token matches type and consume if so."""
        if self._check(token_type):
            self._advance()
            return True
        return False

    def _check(self, token_type: TokenType) -> bool:
        """Check if current token matches type without consuming."""
        if self._is_at_end():
            return False
        return self._peek().type == token_type

    def _advance(self) -> Token:
        """Consume and return current token."""
        if not self._is_at_end():
            self.current += 1
        return self._previous()

    def _is_at_end(self) -> bool:
        return self._peek().type == TokenType.EOF

    def _peek(self) -> Token:
        return self.tokens[self.current]

    def _previous(self) -> Token:
        return self.tokens[self.current - 1] if self.current > 0 else self.tokens[0]

    def _error(self, expected: str) -> ParseError:
        """Error for the current token not being ``expected``."""
        token = self._peek()
        if token.type == TokenType.EOF:
            return create_unexpected_eof_error(expected, token.span.start, self.source)
        return create_unexpected_token_error(expected, token, self.source)

    def _consume(self, token_type: TokenType) -> Token:
        """Consume token of expected type or raise error."""
        if self._check(token_type):
            return self._advance()
        raise self._error(_expected(token_type))

    def _consume_identifier(self, expected: str) -> Token:
        if self._check(TokenType.IDENTIFIER):
            return self._advance()
        raise self._error(expected)


def _parser_for(source: str, config: Optional[ParserConfig]) -> Parser:
    from ..lexer import tokenize_string

    return Parser(tokenize_string(source), source, config)


def parse_program(source: str, config: Optional[ParserConfig] = None) -> ParseResult:
    """
    Convenience function to parse a source string as a program.

    Args:
        source: Source code string
        config: Parser options

    Returns:
        ParseResult with statements and lint warnings

    Raises:
        ParseError: If lexing or parsing fails
    """
    return _parser_for(source, config).parse()


def parse_expression(source: str, config: Optional[ParserConfig] = None) -> Expression:
    """Parse a source string holding exactly one expression."""
    return _parser_for(source, config).parse_expression()


def parse_statement(source: str, config: Optional[ParserConfig] = None) -> Statement:
    """Parse a source string holding exactly one statement."""
    return _parser_for(source, config).parse_statement()

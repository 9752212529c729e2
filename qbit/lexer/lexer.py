"""
Qbit Lexer - turns source text into a list of tokens in one eager pass.

Whitespace is dropped as soon as it is recognized. Comments are kept as
trivia tokens so every span still points at the right place in the source;
the parser skips them. The first character sequence that matches nothing
stops the whole pass with a BuildError, there is no partial result.

Author: xwest
"""

import logging
import re
from typing import List, Optional

from .tokens import Token, TokenType, Span, KEYWORDS, OPERATORS, max_operator_length
from .errors import create_build_error

logger = logging.getLogger(__name__)

# Integer literals are signed 64-bit
INT_MAX = 2 ** 63 - 1


class Lexer:
    """
    Qbit lexical analyzer.

    Converts source code text into a list of tokens terminated by an EOF
    token. Lexing is all-or-nothing: any invalid input raises BuildError.
    """

    def __init__(self, source: str):
        """
        Initialize the lexer with source code.

        Args:
            source: Source code string
        """
        self.source = source
        self.pos = 0
        self.tokens: List[Token] = []

        self._compile_patterns()
        self._operator_lengths = range(max_operator_length(), 0, -1)

    def _compile_patterns(self):
        """Compile regex patterns used by the lexer."""

        # Numbers - float must be tried before integer
        self.float_pattern = re.compile(r'[0-9]+\.[0-9]+')
        self.integer_pattern = re.compile(r'[0-9]+')

        self.identifier_pattern = re.compile(r'[a-zA-Z_][a-zA-Z0-9_]*')

        # Only \" is unescaped in the literal value; other escapes stay as written
        self.string_pattern = re.compile(r'"(?:[^"\\]|\\.)*"')

        self.line_comment_pattern = re.compile(r'//[^\r\n]*')
        self.whitespace_pattern = re.compile(r'[ \t\r\n]+')

    def tokenize(self) -> List[Token]:
        """
        Tokenize the entire source code.

        Returns:
            List of tokens (comments included) ending with an EOF token

        Raises:
            BuildError: On the first unrecognized character sequence
        """
        self.pos = 0
        self.tokens.clear()

        while self.pos < len(self.source):
            if self._skip_whitespace():
                continue

            token = self._next_token()
            self.tokens.append(token)

        # EOF sits right after the last real token, trailing whitespace excluded
        eof_position = self.tokens[-1].span.end if self.tokens else 0
        self.tokens.append(Token(TokenType.EOF, "", None, Span.at(eof_position)))

        logger.debug("tokenized %d characters into %d tokens", len(self.source), len(self.tokens))
        return self.tokens

    def _skip_whitespace(self) -> bool:
        match = self.whitespace_pattern.match(self.source, self.pos)
        if match:
            self.pos = match.end()
            return True
        return False

    def _next_token(self) -> Token:
        """Get the next token from the source."""
        current_char = self.source[self.pos]

        # Comments before the '/' operator
        if self.source.startswith('//', self.pos):
            return self._tokenize_line_comment()
        if self.source.startswith('/*', self.pos):
            return self._tokenize_block_comment()

        if "0" <= current_char <= "9":
            return self._tokenize_number()

        if current_char.isalpha() or current_char == '_':
            token = self._tokenize_identifier_or_keyword()
            if token:
                return token

        if current_char == '"':
            return self._tokenize_string()

        # Operators and punctuation (longest first)
        for op_len in self._operator_lengths:
            potential_op = self.source[self.pos:self.pos + op_len]
            if len(potential_op) == op_len and potential_op in OPERATORS:
                return self._emit(OPERATORS[potential_op], self.pos + op_len)

        raise create_build_error("Invalid token", self.source, Span(self.pos, self.pos + 1))

    def _emit(self, token_type: TokenType, end: int, value=None) -> Token:
        """Create a token from the current position to ``end`` and advance."""
        span = Span(self.pos, end)
        token = Token(token_type, self.source[span.start:span.end], value, span)
        self.pos = end
        return token

    def _tokenize_line_comment(self) -> Token:
        match = self.line_comment_pattern.match(self.source, self.pos)
        return self._emit(TokenType.LINE_COMMENT, match.end(), match.group(0)[2:])

    def _tokenize_block_comment(self) -> Token:
        close = self.source.find('*/', self.pos + 2)
        if close == -1:
            raise create_build_error(
                "Unterminated block comment", self.source, Span(self.pos, len(self.source))
            )
        return self._emit(TokenType.BLOCK_COMMENT, close + 2, self.source[self.pos + 2:close])

    def _tokenize_number(self) -> Token:
        """Tokenize integer or float literals."""
        match = self.float_pattern.match(self.source, self.pos)
        if match:
            return self._emit(TokenType.FLOAT, match.end(), float(match.group(0)))

        match = self.integer_pattern.match(self.source, self.pos)
        value = int(match.group(0))
        if value > INT_MAX:
            raise create_build_error(
                "Integer literal out of range", self.source, Span(self.pos, match.end())
            )
        return self._emit(TokenType.INTEGER, match.end(), value)

    def _tokenize_identifier_or_keyword(self) -> Optional[Token]:
        """Tokenize an identifier or keyword; None for non-ASCII letters."""
        match = self.identifier_pattern.match(self.source, self.pos)
        if not match:
            return None

        lexeme = match.group(0)
        token_type = KEYWORDS.get(lexeme, TokenType.IDENTIFIER)

        if token_type == TokenType.IDENTIFIER:
            value = lexeme
        elif token_type in (TokenType.TRUE, TokenType.FALSE):
            value = token_type == TokenType.TRUE
        else:
            value = None

        return self._emit(token_type, match.end(), value)

    def _tokenize_string(self) -> Token:
        """Tokenize a string literal."""
        match = self.string_pattern.match(self.source, self.pos)
        if not match:
            line_end = self.source.find('\n', self.pos)
            if line_end == -1:
                line_end = len(self.source)
            raise create_build_error(
                "Unterminated string literal", self.source, Span(self.pos, line_end)
            )

        lexeme = match.group(0)
        value = lexeme[1:-1].replace('\\"', '"')
        return self._emit(TokenType.STRING, match.end(), value)


def tokenize_string(source: str) -> List[Token]:
    """
    Convenience function to tokenize a source string.

    Args:
        source: Source code string

    Returns:
        List of tokens

    Raises:
        BuildError: If lexing fails
    """
    return Lexer(source).tokenize()

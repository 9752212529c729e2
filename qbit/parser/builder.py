"""
Fluent construction of a configured parser.

Author: xwest
"""

from dataclasses import replace
from typing import Optional

from ..lexer import tokenize_string
from .config import ParserConfig
from .parser import Parser


class ParserBuilder:
    """
    Builds a Parser for one source string.

    Example:
        parser = ParserBuilder(source).allow_trailing_commas(False).build()
        result = parser.parse()
    """

    def __init__(self, source: str, config: Optional[ParserConfig] = None):
        self.source = source
        self._config = config or ParserConfig()

    def allow_trailing_commas(self, allow: bool = True) -> "ParserBuilder":
        self._config = replace(self._config, allow_trailing_commas=allow)
        return self

    def max_recursion_depth(self, depth: int) -> "ParserBuilder":
        self._config = replace(self._config, max_recursion_depth=depth)
        return self

    def config(self, config: ParserConfig) -> "ParserBuilder":
        """Replace every option at once."""
        self._config = config
        return self

    def build(self) -> Parser:
        """
        Lex the source and return a parser ready to run.

        Raises:
            BuildError: If the source contains an invalid token
        """
        tokens = tokenize_string(self.source)
        return Parser(tokens, self.source, self._config)

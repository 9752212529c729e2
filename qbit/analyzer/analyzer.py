"""
Naming-convention lint pass for Qbit.

The parser hands every declaration it builds (top level or nested) to
``Analyzer.analyze`` together with the span of the declared name. Bindings
and functions must be snake_case, constants CONSTANT_CASE. Findings are
advisory only and never change the tree.

Author: xwest
"""

from typing import List, Tuple

from ..lexer.tokens import Span
from ..parser.ast_nodes import Statement, Let, Const, Function
from ..parser.errors import ParseWarning, create_naming_warning
from .naming import is_snake_case, is_constant_case, to_snake_case, to_constant_case


class Analyzer:
    """
    Collects style warnings for one source text.

    One analyzer lives for one parse call; ``finalize`` hands the warnings
    over once the parse has succeeded.
    """

    def __init__(self, source: str):
        self.source = source
        self.warnings: List[ParseWarning] = []

    def analyze(self, statement: Statement, span: Span):
        """
        Check a single declaration.

        Args:
            statement: The statement just produced by the parser
            span: Span the warning should point at (the declared name)
        """
        if isinstance(statement, (Let, Function)):
            if not is_snake_case(statement.name):
                self._warn(to_snake_case(statement.name), span)
        elif isinstance(statement, Const):
            if not is_constant_case(statement.name):
                self._warn(to_constant_case(statement.name), span)

    def _warn(self, suggestion: str, span: Span):
        self.warnings.append(create_naming_warning(suggestion, span, self.source))

    def finalize(self) -> Tuple[ParseWarning, ...]:
        """Warnings in source order (nested declarations finish before their parents)."""
        return tuple(sorted(self.warnings, key=lambda warning: warning.span.start))

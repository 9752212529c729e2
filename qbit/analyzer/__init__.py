"""
Qbit Analyzer Package

Advisory lint passes that run alongside parsing. Currently checks
declaration naming: snake_case for ``let`` and ``fn``, CONSTANT_CASE for
``const``.

Author: xwest
"""

from .analyzer import Analyzer
from .naming import (
    is_snake_case, is_constant_case, to_snake_case, to_constant_case, split_words,
)

__all__ = [
    "Analyzer",
    "is_snake_case", "is_constant_case",
    "to_snake_case", "to_constant_case", "split_words",
]

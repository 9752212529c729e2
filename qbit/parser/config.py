"""
Parser configuration.

Author: xwest
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ParserConfig:
    """
    Options threaded through every parsing routine.

    Attributes:
        allow_trailing_commas: Accept ``f(a, b,)`` / ``[1, 2,]`` / ``fn f(a,)``
        max_recursion_depth: Nesting limit before TooMuchRecursion is raised
    """
    allow_trailing_commas: bool = True
    max_recursion_depth: int = 1000

    def __post_init__(self):
        if self.max_recursion_depth < 1:
            raise ValueError(
                f"max_recursion_depth must be positive, got {self.max_recursion_depth}"
            )


DEFAULT_CONFIG = ParserConfig()

"""
Identifier case detection and conversion.

Names are split into words at underscores, lower-to-upper transitions,
acronym boundaries (``HTTPServer`` -> ``HTTP``, ``Server``) and digit runs
that follow an underscore (``vec_2d`` keeps ``2d`` as one word). Leading underscores are kept as written, so
``_unused`` is valid snake_case.

Author: xwest
"""

import re
from typing import List, Tuple

_WORD = re.compile(
    r'[A-Z]+(?=[A-Z][a-z])'             # acronym before a capitalized word
    r'|[A-Z]?[a-z][a-z0-9]*'            # lower or capitalized word
    r'|[A-Z]+[0-9]*'                    # upper run
    r'|[0-9]+[A-Z][A-Z0-9]*(?![a-z])'   # 2D
    r'|[0-9]+[a-z0-9]*'                 # 2d
)
_LEADING = re.compile(r'_*')


def split_words(name: str) -> Tuple[str, List[str]]:
    """Return the leading underscore prefix and the words of ``name``."""
    prefix = _LEADING.match(name).group(0)
    return prefix, _WORD.findall(name[len(prefix):])


def to_snake_case(name: str) -> str:
    prefix, words = split_words(name)
    if not words:
        return name
    return prefix + "_".join(word.lower() for word in words)


def to_constant_case(name: str) -> str:
    prefix, words = split_words(name)
    if not words:
        return name
    return prefix + "_".join(word.upper() for word in words)


def is_snake_case(name: str) -> bool:
    return name == to_snake_case(name)


def is_constant_case(name: str) -> bool:
    return name == to_constant_case(name)

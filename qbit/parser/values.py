"""
Literal values for the Qbit AST.

Values are the payload of literal expressions. The parser never evaluates
them, but they carry the language's value rules (truthiness, numeric
coercion, arithmetic and ordering) for whatever consumes the tree next.

Author: xwest
"""

import math
import re
from decimal import Decimal
from dataclasses import dataclass
from typing import Any, Optional

INT_MIN = -2 ** 63
INT_MAX = 2 ** 63 - 1

_INT_TEXT = re.compile(r'[+-]?[0-9]+')
_FLOAT_TEXT = re.compile(
    r'[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)',
    re.IGNORECASE,
)


def _checked(result: int) -> "Int":
    if not INT_MIN <= result <= INT_MAX:
        raise OverflowError("integer overflow")
    return Int(result)


def _format_float(number: float) -> str:
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    if number.is_integer():
        text = str(int(number))
        return "-0" if text == "0" and math.copysign(1.0, number) < 0 else text
    # Shortest round-trip digits, always positional
    return format(Decimal(repr(number)), "f")


class Value:
    """Base class of all literal values."""

    type_name = "value"

    def is_truthy(self) -> bool:
        raise NotImplementedError

    def to_bool(self) -> "Bool":
        return Bool(self.is_truthy())

    def to_int(self) -> Optional[int]:
        """Integer conversion, or None when the value has no integer form."""
        return None

    def to_float(self) -> Optional[float]:
        """Float conversion, or None when the value has no float form."""
        return None

    # Arithmetic

    def __add__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        if isinstance(self, Str) and isinstance(other, Str):
            return Str(self.value + other.value)
        return self._arithmetic(other, int.__add__, float.__add__,
                                f"Cannot add {self.type_name} and {other.type_name}")

    def __sub__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return self._arithmetic(other, int.__sub__, float.__sub__,
                                f"Cannot subtract {other.type_name} from {self.type_name}")

    def __mul__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return self._arithmetic(other, int.__mul__, float.__mul__,
                                f"Cannot multiply {self.type_name} and {other.type_name}")

    def __truediv__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        if not isinstance(self, (Int, Float)) or not isinstance(other, (Int, Float)):
            raise TypeError(f"Cannot divide {self.type_name} by {other.type_name}")
        if other.value == 0:
            raise ZeroDivisionError("Division by zero")
        if isinstance(self, Int) and isinstance(other, Int):
            if self.value % other.value == 0:
                # Exact quotient; truncation and flooring agree here
                return _checked(self.value // other.value)
            return Float(self.value / other.value)
        return Float(float(self.value) / float(other.value))

    def _arithmetic(self, other, int_op, float_op, message):
        if isinstance(self, Int) and isinstance(other, Int):
            return _checked(int_op(self.value, other.value))
        if isinstance(self, (Int, Float)) and isinstance(other, (Int, Float)):
            return Float(float_op(float(self.value), float(other.value)))
        raise TypeError(message)

    # Ordering (numbers with numbers, strings with strings, bools with bools)

    def _ordering_key(self, other) -> Optional[tuple]:
        if isinstance(self, (Int, Float)) and isinstance(other, (Int, Float)):
            return (self.value, other.value)
        if type(self) is type(other) and isinstance(self, (Str, Bool)):
            return (self.value, other.value)
        return None

    def __lt__(self, other):
        key = self._ordering_key(other) if isinstance(other, Value) else None
        return NotImplemented if key is None else key[0] < key[1]

    def __le__(self, other):
        key = self._ordering_key(other) if isinstance(other, Value) else None
        return NotImplemented if key is None else key[0] <= key[1]

    def __gt__(self, other):
        key = self._ordering_key(other) if isinstance(other, Value) else None
        return NotImplemented if key is None else key[0] > key[1]

    def __ge__(self, other):
        key = self._ordering_key(other) if isinstance(other, Value) else None
        return NotImplemented if key is None else key[0] >= key[1]


@dataclass(frozen=True)
class Int(Value):
    """Signed 64-bit integer."""
    value: int

    type_name = "int"

    def is_truthy(self) -> bool:
        return self.value != 0

    def to_int(self) -> Optional[int]:
        return self.value

    def to_float(self) -> Optional[float]:
        return float(self.value)

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Float(Value):
    """64-bit floating point number."""
    value: float

    type_name = "float"

    def is_truthy(self) -> bool:
        return self.value != 0.0

    def to_int(self) -> Optional[int]:
        # Saturating conversion, NaN becomes 0
        if math.isnan(self.value):
            return 0
        if math.isinf(self.value):
            return INT_MAX if self.value > 0 else INT_MIN
        return max(INT_MIN, min(INT_MAX, int(self.value)))

    def to_float(self) -> Optional[float]:
        return self.value

    def __str__(self) -> str:
        return _format_float(self.value)


@dataclass(frozen=True)
class Bool(Value):
    value: bool

    type_name = "bool"

    def is_truthy(self) -> bool:
        return self.value

    def to_int(self) -> Optional[int]:
        return 1 if self.value else 0

    def to_float(self) -> Optional[float]:
        return 1.0 if self.value else 0.0

    def __str__(self) -> str:
        return "true" if self.value else "false"


@dataclass(frozen=True)
class Str(Value):
    value: str

    type_name = "string"

    def is_truthy(self) -> bool:
        return self.value != ""

    def to_int(self) -> Optional[int]:
        if not _INT_TEXT.fullmatch(self.value):
            return None
        number = int(self.value)
        return number if INT_MIN <= number <= INT_MAX else None

    def to_float(self) -> Optional[float]:
        if not _FLOAT_TEXT.fullmatch(self.value):
            return None
        return float(self.value)

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Null(Value):

    type_name = "null"

    def is_truthy(self) -> bool:
        return False

    def __str__(self) -> str:
        return "null"


def from_python(obj: Any) -> Value:
    """Wrap a lexer token value (int, float, bool, str or None) as a Value."""
    if obj is None:
        return Null()
    if isinstance(obj, bool):
        return Bool(obj)
    if isinstance(obj, int):
        return Int(obj)
    if isinstance(obj, float):
        return Float(obj)
    if isinstance(obj, str):
        return Str(obj)
    raise TypeError(f"no literal value for {type(obj).__name__}")

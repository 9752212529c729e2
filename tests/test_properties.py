"""
Property-based tests for the Qbit parser.

Tests cover:
- Precedence and associativity for every pair of binary operators
- Layout independence (whitespace and comments between tokens)
- The configured nesting ceiling
- Printing an expression and parsing it back

Author: xwest
"""

import unittest
import sys
import os
from concurrent.futures import ThreadPoolExecutor

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from hypothesis import given, settings, strategies as st

from qbit import parse_program, parse_expression, tokenize_string, ParserConfig
from qbit.lexer import TokenType
from qbit.parser import Binary, BinaryOp, Variable, TooMuchRecursion

BINARY_SPELLINGS = [op.value for op in BinaryOp] + ["^"]

SEPARATORS = [" ", "  ", "\n", "\t", " /* note */ ", "/**/", " // note\n", "\r\n"]

PROGRAMS = [
    "let x = 1 + 2 * 3;",
    "const LIMIT = [1, 2, 3,];",
    "fn add(a, b) { return a + b; }",
    "for (let i = 0; i < n; i++) { if i % 2 == 0 { continue; } else { total += i; } }",
    "while !done { x = x ** 2 ^ 3; done = x >= 100 || x < -1; }",
    'import "io"; export fn main() { io.print(obj.arr[0].prop, - -y, --z); }',
]


def _op(spelling: str) -> BinaryOp:
    return BinaryOp.from_token(tokenize_string(spelling)[0])


def _extend(children):
    return st.one_of(
        st.tuples(children, st.sampled_from(BINARY_SPELLINGS), children).map(
            lambda t: f"{t[0]} {t[1]} {t[2]}"
        ),
        children.map(lambda s: f"({s})"),
        st.tuples(st.sampled_from(["-", "!"]), children).map(lambda t: f"{t[0]} {t[1]}"),
        children.map(lambda s: f"f({s}, 1)"),
        children.map(lambda s: f"[{s}][0]"),
        children.map(lambda s: f"({s}).field"),
    )


expressions = st.recursive(
    st.sampled_from(["a", "b", "c", "x1"]) | st.integers(0, 1000).map(str),
    _extend,
    max_leaves=12,
)


class TestPrecedenceLaw(unittest.TestCase):
    """Binding of ``a OP1 b OP2 c`` follows the operator table."""

    @given(st.sampled_from(BINARY_SPELLINGS), st.sampled_from(BINARY_SPELLINGS))
    def test_operator_pairs(self, first, second):
        op1, op2 = _op(first), _op(second)
        a, b, c = Variable("a"), Variable("b"), Variable("c")

        expr = parse_expression(f"a {first} b {second} c")

        if op1.precedence > op2.precedence or (
            op1.precedence == op2.precedence and not op1.is_right_associative
        ):
            expected = Binary(op2, Binary(op1, a, b), c)
        else:
            expected = Binary(op1, a, Binary(op2, b, c))
        self.assertEqual(expr, expected)

    @given(st.integers(min_value=2, max_value=30))
    def test_subtraction_chain_leans_left(self, length):
        expr = parse_expression(" - ".join(f"v{i}" for i in range(length)))
        for i in reversed(range(1, length)):
            self.assertEqual(expr.op, BinaryOp.SUB)
            self.assertEqual(expr.right, Variable(f"v{i}"))
            expr = expr.left
        self.assertEqual(expr, Variable("v0"))

    @given(st.integers(min_value=2, max_value=30))
    def test_power_chain_leans_right(self, length):
        expr = parse_expression(" ** ".join(f"v{i}" for i in range(length)))
        for i in range(length - 1):
            self.assertEqual(expr.left, Variable(f"v{i}"))
            expr = expr.right
        self.assertEqual(expr, Variable(f"v{length - 1}"))


class TestLayoutIndependence(unittest.TestCase):
    """Whitespace and comments between tokens never change the tree."""

    @given(st.sampled_from(PROGRAMS), st.data())
    def test_reflowed_program(self, program, data):
        tokens = [t for t in tokenize_string(program) if t.type != TokenType.EOF]
        separators = data.draw(st.lists(
            st.sampled_from(SEPARATORS), min_size=len(tokens) + 1, max_size=len(tokens) + 1,
        ))

        reflowed = separators[0] + "".join(
            token.lexeme + separator for token, separator in zip(tokens, separators[1:])
        )

        self.assertEqual(
            parse_program(reflowed).statements,
            parse_program(program).statements,
        )


class TestRecursionCeiling(unittest.TestCase):
    """Nesting up to the limit parses; one level more fails."""

    @settings(max_examples=40)
    @given(st.integers(min_value=1, max_value=40))
    def test_parentheses(self, depth):
        config = ParserConfig(max_recursion_depth=depth)

        parse_expression("(" * depth + "1" + ")" * depth, config)
        with self.assertRaises(TooMuchRecursion) as cm:
            parse_expression("(" * (depth + 1) + "1" + ")" * (depth + 1), config)
        self.assertEqual(cm.exception.max_depth, depth)
        self.assertEqual(cm.exception.position, depth)

    @settings(max_examples=20)
    @given(st.integers(min_value=1, max_value=20))
    def test_array_literals(self, depth):
        config = ParserConfig(max_recursion_depth=depth)

        parse_expression("[" * depth + "]" * depth, config)
        with self.assertRaises(TooMuchRecursion):
            parse_expression("[" * (depth + 1) + "]" * (depth + 1), config)


class TestPrintBack(unittest.TestCase):
    """Printing a parsed expression yields source for the same tree."""

    @given(expressions)
    def test_round_trip(self, source):
        expr = parse_expression(source)
        self.assertEqual(parse_expression(str(expr)), expr)


class TestIndependentParses(unittest.TestCase):

    def test_parallel_parses(self):
        """Parsers share no state, so threads can parse side by side."""
        sources = [f"let v{i} = {i} * (x + {i});" for i in range(50)]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(parse_program, sources))

        for i, result in enumerate(results):
            self.assertEqual(result.statements[0].name, f"v{i}")


if __name__ == '__main__':
    unittest.main()

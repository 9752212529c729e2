"""
Abstract Syntax Tree node definitions for Qbit.

Nodes are immutable dataclasses that own their children outright (tuples,
never shared lists), so two trees parsed from equivalent sources compare
equal structurally. Expression nodes print back as source text; grouping
parentheses survive as explicit ``Group`` nodes.

Author: xwest
"""

from dataclasses import dataclass, fields
from typing import Iterator, Optional, Tuple

from .values import Value
from .operators import BinaryOp, UnaryOp


class ASTNode:
    """Base class for all AST nodes."""

    def children(self) -> Tuple["ASTNode", ...]:
        """Direct child nodes in source order."""
        found = []
        for field in fields(self):
            item = getattr(self, field.name)
            if isinstance(item, ASTNode):
                found.append(item)
            elif isinstance(item, tuple):
                found.extend(child for child in item if isinstance(child, ASTNode))
        return tuple(found)

    def walk(self) -> Iterator["ASTNode"]:
        """Pre-order traversal of this node and all of its descendants."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children()))


class Expression(ASTNode):
    """Base class for expressions."""
    pass


class Statement(ASTNode):
    """Base class for statements."""
    pass


# ============================================================================
# Expressions
# ============================================================================

@dataclass(frozen=True)
class Literal(Expression):
    value: Value

    def __str__(self) -> str:
        if self.value.type_name == "string":
            return '"' + str(self.value).replace('"', '\\"') + '"'
        return str(self.value)


@dataclass(frozen=True)
class Variable(Expression):
    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Binary(Expression):
    op: BinaryOp
    left: Expression
    right: Expression

    def __str__(self) -> str:
        return f"{self.left} {self.op.value} {self.right}"


@dataclass(frozen=True)
class Unary(Expression):
    op: UnaryOp
    operand: Expression

    def __str__(self) -> str:
        operand = str(self.operand)
        # "- -x" must not print as the decrement operator
        if self.op is UnaryOp.NEG and operand.startswith("-"):
            return f"- {operand}"
        return f"{self.op.value}{operand}"


@dataclass(frozen=True)
class Group(Expression):
    """Parenthesized expression, kept so ``(a + b) * c`` differs from ``a + b * c``."""
    inner: Expression

    def __str__(self) -> str:
        return f"({self.inner})"


@dataclass(frozen=True)
class Call(Expression):
    callee: Expression
    args: Tuple[Expression, ...] = ()

    def __str__(self) -> str:
        return f"{self.callee}({', '.join(str(arg) for arg in self.args)})"


@dataclass(frozen=True)
class Member(Expression):
    obj: Expression
    property: str

    def __str__(self) -> str:
        return f"{self.obj}.{self.property}"


@dataclass(frozen=True)
class Index(Expression):
    obj: Expression
    index: Expression

    def __str__(self) -> str:
        return f"{self.obj}[{self.index}]"


@dataclass(frozen=True)
class Array(Expression):
    elements: Tuple[Expression, ...] = ()

    def __str__(self) -> str:
        return f"[{', '.join(str(element) for element in self.elements)}]"


@dataclass(frozen=True)
class Assignment(Expression):
    """``target = value``. Any expression is accepted as a target at parse time."""
    target: Expression
    value: Expression

    def __str__(self) -> str:
        return f"{self.target} = {self.value}"


@dataclass(frozen=True)
class CompoundAssignment(Expression):
    """``target op= value``."""
    target: Expression
    op: BinaryOp
    value: Expression

    def __str__(self) -> str:
        return f"{self.target} {self.op.value}= {self.value}"


@dataclass(frozen=True)
class PreIncrement(Expression):
    operand: Expression

    def __str__(self) -> str:
        return f"++{self.operand}"


@dataclass(frozen=True)
class PostIncrement(Expression):
    operand: Expression

    def __str__(self) -> str:
        return f"{self.operand}++"


@dataclass(frozen=True)
class PreDecrement(Expression):
    operand: Expression

    def __str__(self) -> str:
        return f"--{self.operand}"


@dataclass(frozen=True)
class PostDecrement(Expression):
    operand: Expression

    def __str__(self) -> str:
        return f"{self.operand}--"


# ============================================================================
# Statements
# ============================================================================

@dataclass(frozen=True)
class Let(Statement):
    name: str
    value: Expression


@dataclass(frozen=True)
class Const(Statement):
    name: str
    value: Expression


@dataclass(frozen=True)
class Block(Statement):
    statements: Tuple[Statement, ...] = ()


@dataclass(frozen=True)
class Function(Statement):
    name: str
    params: Tuple[str, ...]
    body: Block


@dataclass(frozen=True)
class If(Statement):
    """``else if`` chains nest: ``else_branch`` is another ``If`` or a ``Block``."""
    condition: Expression
    then_branch: Block
    else_branch: Optional[Statement] = None


@dataclass(frozen=True)
class Return(Statement):
    value: Optional[Expression] = None


@dataclass(frozen=True)
class ExpressionStatement(Statement):
    expr: Expression


@dataclass(frozen=True)
class Import(Statement):
    module: str


@dataclass(frozen=True)
class Export(Statement):
    statement: Statement


@dataclass(frozen=True)
class While(Statement):
    condition: Expression
    body: Block


@dataclass(frozen=True)
class For(Statement):
    init: Optional[Statement]
    condition: Optional[Expression]
    update: Optional[Expression]
    body: Block


@dataclass(frozen=True)
class Break(Statement):
    pass


@dataclass(frozen=True)
class Continue(Statement):
    pass


"""
Abstract Syntax Tree (AST) node definitions for mathematical expressions.

Nodes are built bottom-up by the operator processor from already-reduced
children, so the result is always a tree. Operator nodes check their
child count against the operator's arity on construction.

Equality between nodes is structural: spans are diagnostics and do not
take part in comparisons.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Protocol, Sequence

from .errors import IncorrectArityError
from .operator import (
    BinaryOperator,
    FunctionOperator,
    Operator,
    UnaryOperator,
    get_arity,
)


class NodeType(str, Enum):
    """Discriminant of an AST node."""

    LITERAL = "Literal"
    VARIABLE = "Variable"
    UNARY_OPERATOR = "UnaryOperator"
    BINARY_OPERATOR = "BinaryOperator"
    FUNCTION_OPERATOR = "FunctionOperator"


@dataclass(frozen=True)
class Span:
    """Source offsets covered by a node, end exclusive."""

    start: int
    end: int

    @classmethod
    def cover(cls, first: Optional["Span"], last: Optional["Span"]) -> Optional["Span"]:
        """Smallest span containing both spans (None if either is unknown)."""
        if first is None or last is None:
            return None
        return cls(min(first.start, last.start), max(first.end, last.end))

    def to_dict(self) -> dict[str, int]:
        return {"start": self.start, "end": self.end}


class ASTVisitor(Protocol):
    """
    Visitor protocol for traversing AST nodes.

    Implementations can provide string rendering, TeX rendering, etc.
    """

    def visit_literal(self, node: "Literal") -> Any:
        ...

    def visit_variable(self, node: "Variable") -> Any:
        ...

    def visit_unary_op(self, node: "UnaryOp") -> Any:
        ...

    def visit_binary_op(self, node: "BinaryOp") -> Any:
        ...

    def visit_function_op(self, node: "FunctionOp") -> Any:
        ...


class ASTNode(ABC):
    """
    Base class for all AST nodes.

    Attributes:
        type: Node kind
        span: Source offsets covered by the node (None for nodes built by hand)
    """

    type: NodeType

    def __init__(self, span: Optional[Span] = None):
        self.span = span

    @property
    @abstractmethod
    def name(self) -> str:
        """Display name of the node."""

    @abstractmethod
    def accept(self, visitor: ASTVisitor) -> Any:
        """Accept a visitor for traversal."""

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Plain, JSON-compatible representation of the node."""

    def _span_dict(self) -> Optional[dict[str, int]]:
        return self.span.to_dict() if self.span is not None else None


# Leaf Nodes (terminals)


class Literal(ASTNode):
    """
    Represents a numeric literal.

    Examples: 42, 3.14, .5, 1e-10
    """

    type = NodeType.LITERAL

    def __init__(self, value: float | int, span: Optional[Span] = None):
        super().__init__(span)
        self.value = float(value)

    @property
    def name(self) -> str:
        return "Literal"

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_literal(self)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "value": self.value, "span": self._span_dict()}

    def __repr__(self) -> str:
        return f"Literal({self.value})"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Literal) and self.value == other.value


class Variable(ASTNode):
    """
    Represents a single-letter variable.

    Examples: x, y
    """

    type = NodeType.VARIABLE

    def __init__(self, name: str, span: Optional[Span] = None):
        super().__init__(span)
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_variable(self)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "name": self.name, "span": self._span_dict()}

    def __repr__(self) -> str:
        return f"Variable('{self.name}')"

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Variable) and self.name == other.name


# Composite Nodes (operators and functions)


class OperatorNode(ASTNode):
    """
    Base class for nodes applying an operator to child nodes.

    Attributes:
        operator: The applied operator
        children: Operands, leftmost first
        symbol_span: Offsets of the operator symbol itself. Zero width for
            multiplications inserted implicitly between adjacent operands
    """

    operator_class: type = object

    def __init__(
        self,
        operator: Operator,
        children: Sequence[ASTNode],
        span: Optional[Span] = None,
        symbol_span: Optional[Span] = None,
    ):
        if not isinstance(operator, self.operator_class):
            raise TypeError(
                f"{self.__class__.__name__} requires a "
                f"{self.operator_class.__name__}, got {operator!r}"
            )

        arity = get_arity(operator)
        if len(children) != arity:
            raise IncorrectArityError(operator.name, arity, len(children))

        super().__init__(span)
        self.operator = operator
        self.children = list(children)
        self.symbol_span = symbol_span

    @property
    def name(self) -> str:
        return self.operator.name

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "name": self.name,
            "children": [child.to_dict() for child in self.children],
            "span": self._span_dict(),
        }

    def __repr__(self) -> str:
        children_repr = ", ".join(repr(child) for child in self.children)
        return f"{self.__class__.__name__}('{self.name}', [{children_repr}])"

    def __eq__(self, other: object) -> bool:
        return (
            isinstance(other, self.__class__)
            and self.operator == other.operator
            and self.children == other.children
        )


class UnaryOp(OperatorNode):
    """
    Represents a unary operation.

    Examples: -x, $1
    """

    type = NodeType.UNARY_OPERATOR
    operator_class = UnaryOperator

    @property
    def operand(self) -> ASTNode:
        return self.children[0]

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_unary_op(self)


class BinaryOp(OperatorNode):
    """
    Represents a binary operation.

    Examples: 2 + 3, x * y, a ^ b
    """

    type = NodeType.BINARY_OPERATOR
    operator_class = BinaryOperator

    @property
    def left(self) -> ASTNode:
        return self.children[0]

    @property
    def right(self) -> ASTNode:
        return self.children[1]

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_binary_op(self)


class FunctionOp(OperatorNode):
    """
    Represents a function call.

    Examples: sin(x), pow(2, 3)
    """

    type = NodeType.FUNCTION_OPERATOR
    operator_class = FunctionOperator

    @property
    def args(self) -> list[ASTNode]:
        return self.children

    def accept(self, visitor: ASTVisitor) -> Any:
        return visitor.visit_function_op(self)


# Constructors


def make_literal_node(value: float, span: Optional[Span] = None) -> Literal:
    return Literal(value, span)


def make_variable_node(name: str, span: Optional[Span] = None) -> Variable:
    return Variable(name, span)


def make_operator_node(
    operator: Operator,
    children: Sequence[ASTNode],
    span: Optional[Span] = None,
    symbol_span: Optional[Span] = None,
) -> OperatorNode:
    """
    Build the node kind matching the operator.

    Raises:
        IncorrectArityError: If the child count differs from the operator's arity
        TypeError: If operator is not one of the three operator kinds
    """
    if isinstance(operator, UnaryOperator):
        return UnaryOp(operator, children, span, symbol_span)
    if isinstance(operator, BinaryOperator):
        return BinaryOp(operator, children, span, symbol_span)
    if isinstance(operator, FunctionOperator):
        return FunctionOp(operator, children, span, symbol_span)
    raise TypeError(f"make_operator_node not implemented for {operator!r}")

"""
Operator-precedence processor.

The parser hands the processor one token per pass. The processor keeps
two stacks, completed subtrees and pending operators, and reduces
operators into nodes as soon as precedence allows. It also remembers what
kind of token the previous pass added, which is all it needs to tell a
unary minus from a binary one and to insert implicit multiplications.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Union

from .ast import ASTNode, Span, make_literal_node, make_operator_node, make_variable_node
from .config import ParserConfig
from .core_operators import PRODUCT
from .errors import BadParensError, IncorrectArityError, MathSyntaxError
from .operator import (
    BinaryOperator,
    FunctionOperator,
    Operator,
    UnaryOperator,
    get_arity,
)


class TokenKind(Enum):
    """Kind of token added to the processor during a pass."""

    LITERAL = auto()
    VARIABLE = auto()
    UNARY_OPERATOR = auto()
    BINARY_OPERATOR = auto()
    FUNCTION_OPERATOR = auto()
    OPEN_PAREN = auto()
    CLOSE_PAREN = auto()
    COMMA = auto()


# Tokens that can end an operand, and tokens that can start one.
IMPLICIT_MULTIPLY_LEFT = frozenset(
    {TokenKind.CLOSE_PAREN, TokenKind.VARIABLE, TokenKind.LITERAL}
)
IMPLICIT_MULTIPLY_RIGHT = frozenset(
    {
        TokenKind.OPEN_PAREN,
        TokenKind.UNARY_OPERATOR,
        TokenKind.FUNCTION_OPERATOR,
        TokenKind.LITERAL,
        TokenKind.VARIABLE,
    }
)

CLOSE_SYMBOLS = {")": TokenKind.CLOSE_PAREN, ",": TokenKind.COMMA}


# Operator stack entries


@dataclass
class OperatorEntry:
    """A pending operator and the span of its symbol."""

    operator: Operator
    span: Optional[Span]


@dataclass
class OpenParenMarker:
    """
    An open parenthesis.

    Attributes:
        depth: Node stack size when the parenthesis was opened
    """

    span: Optional[Span]
    depth: int


@dataclass
class FunctionStartMarker:
    """
    Start of a function's argument list; sits right above the function's
    OperatorEntry.

    Attributes:
        depth: Node stack size when the argument list was opened
        remaining: Arguments still expected, including the current one
    """

    operator: FunctionOperator
    span: Optional[Span]
    depth: int
    remaining: int


StackEntry = Union[OperatorEntry, OpenParenMarker, FunctionStartMarker]


class OperatorProcessor:
    """
    Processes tokens one pass at a time and builds the syntax tree.

    Usage::

        processor = OperatorProcessor(config)
        for each token:
            processor.start_pass()
            processor.add_...(...)
        root = processor.done()

    A processor handles a single equation; create a new one per parse.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        multiply_operator: BinaryOperator = PRODUCT,
    ):
        self.config = config or ParserConfig()
        self.multiply_operator = multiply_operator

        self.nodes: list[ASTNode] = []
        self.operator_stack: list[StackEntry] = []

        self.kind_added_current_pass: Optional[TokenKind] = None
        self.kind_added_last_pass: Optional[TokenKind] = None
        self.is_done = False

    # Lifecycle

    def start_pass(self) -> None:
        """Called by the parser before each token."""
        if self.is_done:
            raise RuntimeError("Cannot add tokens after processing is done")
        self.kind_added_last_pass = self.kind_added_current_pass
        self.kind_added_current_pass = None

    def done(self) -> ASTNode:
        """
        Finish the equation and return the root node.

        Raises:
            BadParensError: If a parenthesis or function call is left open
            MathSyntaxError: If the operators and operands do not form
                exactly one tree
        """
        if self.is_done:
            raise RuntimeError("Processing is already done")
        self.is_done = True

        while self.operator_stack:
            entry = self.operator_stack.pop()

            if not isinstance(entry, OperatorEntry):
                position = entry.span.start if entry.span is not None else None
                raise BadParensError("Missing closing parenthesis", position)

            self._reduce(entry)

        if len(self.nodes) != 1:
            raise MathSyntaxError(
                "Invalid equation", details={"node_count": len(self.nodes)}
            )

        return self.nodes[0]

    # Queries

    def should_process_minus_as_unary(self) -> bool:
        """
        Decide whether a minus sign at the cursor negates or subtracts.

        Only a preceding literal or closing parenthesis makes it a
        subtraction.
        """
        return self.kind_added_last_pass not in (
            TokenKind.LITERAL,
            TokenKind.CLOSE_PAREN,
        )

    # Token processors

    def add_literal(self, value: float, span: Optional[Span] = None) -> None:
        self._record(TokenKind.LITERAL, span)
        self.nodes.append(make_literal_node(value, span))

    def add_variable(self, name: str, span: Optional[Span] = None) -> None:
        self._record(TokenKind.VARIABLE, span)
        self.nodes.append(make_variable_node(name, span))

    def add_operator(self, operator: Operator, span: Optional[Span] = None) -> None:
        if isinstance(operator, UnaryOperator):
            self._add_unary_operator(operator, span)
        elif isinstance(operator, BinaryOperator):
            self._record(TokenKind.BINARY_OPERATOR, span)
            self._add_binary_operator(operator, span)
        elif isinstance(operator, FunctionOperator):
            self._add_function_operator(operator, span)
        else:
            raise TypeError(f"add_operator not implemented for {operator!r}")

    def add_open_parens(self, span: Optional[Span] = None) -> None:
        self._record(TokenKind.OPEN_PAREN, span)
        self.operator_stack.append(OpenParenMarker(span, len(self.nodes)))

    def add_close_symbol(self, symbol: str, span: Optional[Span] = None) -> None:
        """
        Close an expression with ")" or separate function arguments with ",".

        Everything pushed since the nearest parenthesis or function start is
        reduced. A ")" also closes that parenthesis or finishes the function
        call; a "," leaves the function's argument list open.
        """
        if symbol not in CLOSE_SYMBOLS:
            raise ValueError(f"Not a close symbol: {symbol!r}")

        is_comma = symbol == ","
        position = span.start if span is not None else None

        self._record(CLOSE_SYMBOLS[symbol], span)

        while self.operator_stack and isinstance(self.operator_stack[-1], OperatorEntry):
            self._reduce(self.operator_stack.pop())

        if not self.operator_stack:
            raise BadParensError(f"Unmatched '{symbol}'", position)

        marker = self.operator_stack[-1]
        argument_count = len(self.nodes) - marker.depth

        if isinstance(marker, OpenParenMarker):
            if is_comma:
                raise MathSyntaxError(
                    "Unexpected ',' outside of a function call", position
                )
            if argument_count != 1:
                raise MathSyntaxError("Invalid expression in parentheses", position)
            self.operator_stack.pop()
            return

        # Each argument must have reduced to exactly one node.
        marker.remaining -= 1
        arity = get_arity(marker.operator)
        if argument_count != arity - marker.remaining:
            raise MathSyntaxError(
                f"Invalid argument to '{marker.operator.name}'", position
            )

        if is_comma:
            if marker.remaining <= 0:
                raise IncorrectArityError(
                    marker.operator.name, arity, arity + 1, position
                )
            return

        if marker.remaining != 0:
            raise IncorrectArityError(
                marker.operator.name, arity, argument_count, position
            )

        self.operator_stack.pop()
        function_entry = self.operator_stack.pop()

        if not (
            isinstance(function_entry, OperatorEntry)
            and function_entry.operator is marker.operator
        ):
            raise MathSyntaxError("Function start without its function", position)

        self._reduce(function_entry, end=span)

    # Private helpers

    def _record(self, kind: TokenKind, span: Optional[Span]) -> None:
        """
        Record the kind added this pass.

        Two adjacent operands are joined by an implicit product, or rejected
        when implicit multiplication is disabled.
        """
        self.kind_added_current_pass = kind
        if not (
            self.kind_added_last_pass in IMPLICIT_MULTIPLY_LEFT
            and kind in IMPLICIT_MULTIPLY_RIGHT
        ):
            return

        position = span.start if span is not None else None
        if not self.config.implicit_multiply:
            raise MathSyntaxError("Missing operator", position)

        junction = Span(position, position) if span is not None else None
        self._add_binary_operator(self.multiply_operator, junction)

    def _add_unary_operator(self, operator: UnaryOperator, span: Optional[Span]) -> None:
        self._record(TokenKind.UNARY_OPERATOR, span)
        self.operator_stack.append(OperatorEntry(operator, span))

    def _add_binary_operator(self, operator: BinaryOperator, span: Optional[Span]) -> None:
        """
        Reduce whatever binds at least as tightly, then push the operator.

        Does not record a token kind, so implicit multiplication can reuse it.
        """
        precedence = _precedence_value(operator)

        while self.operator_stack:
            top = self.operator_stack[-1]
            if not isinstance(top, OperatorEntry):
                break

            top_precedence = _precedence_value(top.operator)
            if self.config.left_associative:
                should_reduce = top_precedence >= precedence
            else:
                should_reduce = top_precedence > precedence

            if not should_reduce:
                break

            self._reduce(self.operator_stack.pop())

        self.operator_stack.append(OperatorEntry(operator, span))

    def _add_function_operator(self, operator: FunctionOperator, span: Optional[Span]) -> None:
        self._record(TokenKind.FUNCTION_OPERATOR, span)
        self.operator_stack.append(OperatorEntry(operator, span))
        self.operator_stack.append(
            FunctionStartMarker(
                operator=operator,
                span=span,
                depth=len(self.nodes),
                remaining=get_arity(operator),
            )
        )

    def _reduce(self, entry: OperatorEntry, end: Optional[Span] = None) -> None:
        """
        Replace an operator and its operands with a single node.

        Args:
            entry: Operator popped off the operator stack
            end: Closing symbol, for function calls
        """
        operator = entry.operator
        arity = get_arity(operator)

        if len(self.nodes) < arity:
            position = entry.span.start if entry.span is not None else None
            raise MathSyntaxError(
                f"Missing operand for '{operator.name}'",
                position,
                details={"operator": operator.name},
            )

        children = self.nodes[len(self.nodes) - arity:]
        del self.nodes[len(self.nodes) - arity:]

        if isinstance(operator, FunctionOperator):
            span = Span.cover(entry.span, end)
        elif isinstance(operator, UnaryOperator):
            span = Span.cover(entry.span, children[-1].span)
        else:
            span = Span.cover(children[0].span, children[-1].span)

        self.nodes.append(make_operator_node(operator, children, span, entry.span))


def _precedence_value(operator: Operator) -> float:
    """
    Precedence used when comparing stacked operators.

    Function operators never take part: they are reduced at their closing
    parenthesis and sit below a FunctionStartMarker until then.
    """
    if isinstance(operator, BinaryOperator):
        return int(operator.precedence)
    if isinstance(operator, UnaryOperator):
        # Always process unary operators first
        return float("inf")
    raise TypeError(f"No precedence for operator {operator!r}")

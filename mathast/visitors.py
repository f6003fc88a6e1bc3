"""
AST visitor implementations.

- StringVisitor: fully parenthesized infix rendering, used for debug
  logging and for comparing trees in tests
"""

from .ast import ASTNode, BinaryOp, FunctionOp, Literal, UnaryOp, Variable


class StringVisitor:
    """
    Convert AST to a fully parenthesized string.

    Examples:
    - BinaryOp(Sum, [Literal(2), Literal(3)]) → "(2 + 3)"
    - FunctionOp(Sine, [Variable('x')]) → "sin(x)"

    Every binary operation is wrapped in parentheses so the grouping the
    parser chose is visible. Implicit products render as "*".
    """

    def visit_literal(self, node: Literal) -> str:
        # Format number nicely (remove .0 for integers)
        if node.value.is_integer():
            return str(int(node.value))
        return repr(node.value)

    def visit_variable(self, node: Variable) -> str:
        return node.name

    def visit_unary_op(self, node: UnaryOp) -> str:
        return f"{node.operator.symbol}{node.operand.accept(self)}"

    def visit_binary_op(self, node: BinaryOp) -> str:
        left_str = node.left.accept(self)
        right_str = node.right.accept(self)
        return f"({left_str} {node.operator.symbol} {right_str})"

    def visit_function_op(self, node: FunctionOp) -> str:
        args_str = ", ".join(arg.accept(self) for arg in node.args)
        return f"{node.operator.symbol}({args_str})"


def to_string(node: ASTNode) -> str:
    return node.accept(StringVisitor())

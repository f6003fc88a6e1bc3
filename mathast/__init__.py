"""
mathast

Parses textual math expressions into abstract syntax trees. Supports
user-defined unary, binary and function operators, configurable
associativity, implicit multiplication and a variable whitelist.
"""

from .ast import (
    ASTNode,
    BinaryOp,
    FunctionOp,
    Literal,
    NodeType,
    OperatorNode,
    Span,
    UnaryOp,
    Variable,
    make_literal_node,
    make_operator_node,
    make_variable_node,
)
from .config import ParserConfig, Settings, get_settings
from .core_operators import (
    CORE_OPERATORS,
    PRODUCT,
    UNARY_MINUS,
    load_operators,
    operators_from_data,
)
from .errors import (
    BadParensError,
    IncorrectArityError,
    MathParseError,
    MathSyntaxError,
    UnknownVariableError,
)
from .logging import get_logger, setup_logging
from .operator import (
    BinaryOperator,
    FunctionOperator,
    Operator,
    OperatorPrecedence,
    OperatorType,
    UnaryOperator,
    get_arity,
)
from .parser import Parser, parse
from .processor import OperatorProcessor
from .tokenizer import ClaimToken
from .visitors import StringVisitor, to_string

__version__ = "1.0.0"

__all__ = [
    "ASTNode",
    "BinaryOp",
    "FunctionOp",
    "Literal",
    "NodeType",
    "OperatorNode",
    "Span",
    "UnaryOp",
    "Variable",
    "make_literal_node",
    "make_operator_node",
    "make_variable_node",
    "ParserConfig",
    "Settings",
    "get_settings",
    "CORE_OPERATORS",
    "PRODUCT",
    "UNARY_MINUS",
    "load_operators",
    "operators_from_data",
    "BadParensError",
    "IncorrectArityError",
    "MathParseError",
    "MathSyntaxError",
    "UnknownVariableError",
    "get_logger",
    "setup_logging",
    "BinaryOperator",
    "FunctionOperator",
    "Operator",
    "OperatorPrecedence",
    "OperatorType",
    "UnaryOperator",
    "get_arity",
    "Parser",
    "parse",
    "OperatorProcessor",
    "ClaimToken",
    "StringVisitor",
    "to_string",
]

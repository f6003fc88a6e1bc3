"""
Default operator catalogue.

The catalogue is a read-only table injected into each parser at
construction. Parsers copy it into their own registry, so registering
operators on one parser never affects another.

Custom catalogues can be loaded from YAML::

    operators:
      - {type: binary, name: Modulo, symbol: "%", precedence: medium}
      - {type: function, name: Maximum, symbol: max, arity: 2}
"""

from __future__ import annotations

from pathlib import Path
from types import MappingProxyType
from typing import Any, List, Mapping

import yaml
from pydantic import TypeAdapter

from .logging import get_logger
from .operator import (
    BinaryOperator,
    FunctionOperator,
    Operator,
    OperatorPrecedence,
    UnaryOperator,
)

logger = get_logger(__name__)


CORE_OPERATORS: Mapping[str, Operator] = MappingProxyType(
    {
        "cosin": FunctionOperator(name="Cosine", symbol="cosin", arity=1),
        "diff": BinaryOperator(
            name="Difference", symbol="-", precedence=OperatorPrecedence.NORMAL
        ),
        "exp": BinaryOperator(
            name="Exponent", symbol="^", precedence=OperatorPrecedence.HIGH
        ),
        "log": FunctionOperator(name="Log10", symbol="log", arity=1),
        "pow": FunctionOperator(name="Exponent", symbol="pow", arity=2),
        "prod": BinaryOperator(
            name="Product", symbol="*", precedence=OperatorPrecedence.MEDIUM
        ),
        "quot": BinaryOperator(
            name="Quotient", symbol="/", precedence=OperatorPrecedence.MEDIUM
        ),
        "sin": FunctionOperator(name="Sine", symbol="sin", arity=1),
        "sum": BinaryOperator(
            name="Sum", symbol="+", precedence=OperatorPrecedence.NORMAL
        ),
        "tan": FunctionOperator(name="Tangent", symbol="tan", arity=1),
    }
)

# Inserted between adjacent operands when implicit multiplication is on.
PRODUCT: BinaryOperator = CORE_OPERATORS["prod"]

# Kept out of the catalogue: the parser only tries it when the previous
# token cannot end an operand.
UNARY_MINUS = UnaryOperator(name="Minus", symbol="-")

_operator_list_adapter = TypeAdapter(List[Operator])


def operators_from_data(data: Any) -> list[Operator]:
    """
    Build operators from already-loaded catalogue data.

    Args:
        data: A list of operator mappings, or a mapping with an
            ``operators`` key holding that list

    Returns:
        Validated operators, in catalogue order

    Raises:
        pydantic.ValidationError: If an entry is malformed
    """
    if isinstance(data, Mapping):
        data = data.get("operators", [])
    if data is None:
        data = []
    return _operator_list_adapter.validate_python(data)


def load_operators(path: str | Path) -> list[Operator]:
    """
    Load an operator catalogue from a YAML file.

    Args:
        path: Path to YAML catalogue

    Returns:
        Validated operators, in file order
    """
    with open(path, "r") as f:
        data = yaml.safe_load(f)

    operators = operators_from_data(data)
    logger.debug(
        "Loaded operator catalogue",
        extra={"extra_data": {"path": str(path), "count": len(operators)}},
    )
    return operators

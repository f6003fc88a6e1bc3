"""
Operator definitions.

Operators are plain data: a closed set of three frozen pydantic models
(unary, binary and function operators) discriminated by their ``type``
field. The parser never mutates an operator; registries hold references
to these records.
"""

from enum import Enum, IntEnum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OperatorType(str, Enum):
    """Operator kinds."""

    UNARY = "unary"
    BINARY = "binary"
    FUNCTION = "function"


class OperatorPrecedence(IntEnum):
    """Binary operator precedence levels, lowest first."""

    LOW = 1
    NORMAL = 2
    MEDIUM = 3
    HIGH = 4


class UnaryOperator(BaseModel):
    """
    Prefix operator taking exactly one operand.

    Examples: -x, $1
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["unary"] = "unary"
    name: str = Field(min_length=1, description="Display name")
    symbol: str = Field(min_length=1, description="Matched symbol")


class BinaryOperator(BaseModel):
    """
    Infix operator taking exactly two operands.

    Examples: 1 + 2, x ^ 2
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["binary"] = "binary"
    name: str = Field(min_length=1, description="Display name")
    symbol: str = Field(min_length=1, description="Matched symbol")
    precedence: OperatorPrecedence = Field(
        default=OperatorPrecedence.NORMAL, description="Binding strength"
    )

    @field_validator("precedence", mode="before")
    @classmethod
    def _precedence_from_name(cls, value):
        # Catalogue files spell precedences by name ("high").
        if isinstance(value, str):
            try:
                return OperatorPrecedence[value.upper()]
            except KeyError:
                raise ValueError(f"Unknown precedence: {value!r}") from None
        return value


class FunctionOperator(BaseModel):
    """
    Named function called with a parenthesized argument list.

    Examples: sin(x), pow(2, 3)
    """

    model_config = ConfigDict(frozen=True)

    type: Literal["function"] = "function"
    name: str = Field(min_length=1, description="Display name")
    symbol: str = Field(min_length=1, description="Matched symbol")
    arity: int = Field(gt=0, description="Number of arguments")


Operator = Annotated[
    Union[UnaryOperator, BinaryOperator, FunctionOperator],
    Field(discriminator="type"),
]


def get_arity(operator: Operator) -> int:
    """Number of operands the operator consumes when reduced."""
    if isinstance(operator, UnaryOperator):
        return 1
    if isinstance(operator, BinaryOperator):
        return 2
    if isinstance(operator, FunctionOperator):
        return operator.arity
    raise TypeError(f"Not an operator: {operator!r}")

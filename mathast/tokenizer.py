"""
Claim-token scanner for mathematical expressions.

Each scanner looks at the source text from a cursor position and either
claims a span of characters it recognizes or returns None. The parser
decides which scanner to try first; the scanners themselves keep no state.
"""

import re
import string
from dataclasses import dataclass
from typing import AbstractSet, Optional

from .operator import BinaryOperator, FunctionOperator, Operator, UnaryOperator

# Integer part, fraction, exponent: 12, 1.5, .5, 2e10, 1.5E-3
LITERAL_PATTERN = re.compile(r"[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?")

WHITESPACE_PATTERN = re.compile(r"\s+")

VARIABLE_CHARACTERS = frozenset(string.ascii_letters)


@dataclass(frozen=True)
class ClaimToken:
    """
    A span of the source text claimed by a scanner.

    Attributes:
        start: Offset of the first claimed character
        end: Offset just past the last claimed character
    """

    start: int
    end: int

    def text(self, source: str) -> str:
        """The claimed characters."""
        return source[self.start:self.end]

    def __repr__(self) -> str:
        return f"ClaimToken({self.start}, {self.end})"


def get_literal_claim_token(text: str, pointer: int) -> Optional[ClaimToken]:
    """
    Attempt to claim a number literal at the cursor.

    Args:
        text: Full source text
        pointer: Cursor position

    Returns:
        The claimed span, or None if no literal starts here
    """
    match = LITERAL_PATTERN.match(text, pointer)

    if not match:
        return None

    return ClaimToken(pointer, match.end())


def get_variable_claim_token(
    valid_variables: Optional[AbstractSet[str]], text: str, pointer: int
) -> Optional[ClaimToken]:
    """
    Attempt to claim a single-letter variable at the cursor.

    A letter outside the whitelist is not claimed, so the parser reports
    it instead of accepting it.

    Args:
        valid_variables: Allowed names, or None to allow every letter
        text: Full source text
        pointer: Cursor position

    Returns:
        The claimed span, or None
    """
    if pointer >= len(text) or text[pointer] not in VARIABLE_CHARACTERS:
        return None

    if valid_variables is not None and text[pointer] not in valid_variables:
        return None

    return ClaimToken(pointer, pointer + 1)


def get_operator_claim_token(
    operator: Operator, text: str, pointer: int
) -> Optional[ClaimToken]:
    """
    Attempt to claim an operator's symbol at the cursor.

    Symbols are compared as exact string prefixes.

    Args:
        operator: Candidate operator
        text: Full source text
        pointer: Cursor position

    Returns:
        The claimed span, or None
    """
    if isinstance(operator, (UnaryOperator, BinaryOperator, FunctionOperator)):
        symbol = operator.symbol
    else:
        raise TypeError(f"Not an operator: {operator!r}")

    if text.startswith(symbol, pointer):
        return ClaimToken(pointer, pointer + len(symbol))

    return None


def get_whitespace_claim_token(text: str, pointer: int) -> Optional[ClaimToken]:
    """Attempt to claim a run of whitespace at the cursor."""
    match = WHITESPACE_PATTERN.match(text, pointer)

    if not match:
        return None

    return ClaimToken(pointer, match.end())

"""
Parser driver for mathematical expressions.

The parser walks a cursor over the expression, asks the claim-token
scanners what starts at the cursor, and forwards each claimed token to an
OperatorProcessor, which builds the tree.

Scanners are tried in a fixed order:

1. number literal
2. "("
3. ")" or ","
4. registered unary operators
5. the built-in unary minus (only where a minus cannot subtract)
6. registered binary operators
7. registered function operators (must be followed by "(")
8. single-letter variable

Within a category the first registered operator whose symbol matches wins.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Union

from .ast import ASTNode, Span
from .config import ParserConfig
from .core_operators import CORE_OPERATORS, PRODUCT, UNARY_MINUS
from .errors import MathParseError, MathSyntaxError, UnknownVariableError
from .logging import get_logger
from .operator import BinaryOperator, FunctionOperator, Operator, UnaryOperator
from .processor import OperatorProcessor
from .tokenizer import (
    VARIABLE_CHARACTERS,
    ClaimToken,
    get_literal_claim_token,
    get_operator_claim_token,
    get_variable_claim_token,
    get_whitespace_claim_token,
)
from .visitors import to_string

logger = get_logger(__name__)


class Parser:
    """
    Math expression parser with a per-instance operator registry.

    The registry starts as a copy of the default catalogue and grows with
    add_operator(). Registering operators while another thread is parsing
    with the same instance is not synchronized; callers must avoid it.
    """

    def __init__(
        self,
        config: Union[ParserConfig, Mapping[str, Any], None] = None,
        operators: Optional[Iterable[Operator]] = None,
    ):
        """
        Initialize parser.

        Args:
            config: Parser options (defaults to ParserConfig())
            operators: Operator catalogue to start from (defaults to
                CORE_OPERATORS)
        """
        if config is None:
            config = ParserConfig()
        elif not isinstance(config, ParserConfig):
            config = ParserConfig.model_validate(config)
        self.config = config

        self.unary_operators: list[UnaryOperator] = []
        self.binary_operators: list[BinaryOperator] = []
        self.function_operators: list[FunctionOperator] = []

        if operators is None:
            operators = CORE_OPERATORS.values()

        for operator in operators:
            self._register(operator)

    @staticmethod
    def parse_text(text: str) -> ASTNode:
        """Parse with a default parser."""
        return Parser().parse(text)

    def add_operator(self, operator: Operator) -> None:
        """
        Register an operator.

        Symbols are not checked for uniqueness: of two operators of the same
        kind with the same symbol, the one registered first is matched.
        """
        self._register(operator)
        logger.debug(
            "Registered operator",
            extra={
                "extra_data": {
                    "operator": operator.name,
                    "symbol": operator.symbol,
                    "kind": operator.type,
                }
            },
        )

    def parse(self, text: str) -> ASTNode:
        """
        Parse an expression string to an AST.

        Args:
            text: The mathematical expression

        Returns:
            Root AST node

        Raises:
            MathSyntaxError: If the expression is malformed
            IncorrectArityError: If an operator gets the wrong operand count
        """
        processor = OperatorProcessor(self.config, self._multiply_operator())

        try:
            pointer = 0
            while pointer < len(text):
                whitespace = get_whitespace_claim_token(text, pointer)
                if whitespace is not None:
                    pointer = whitespace.end
                    continue

                processor.start_pass()
                pointer = self._process_token(processor, text, pointer)

            root = processor.done()
        except MathParseError as error:
            logger.debug(
                "Parse failed",
                extra={
                    "extra_data": {
                        "expression": text,
                        "error_type": error.__class__.__name__,
                        **error.details,
                    }
                },
            )
            raise

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Parsed expression",
                extra={"extra_data": {"expression": text, "tree": to_string(root)}},
            )
        return root

    # Private helpers

    def _register(self, operator: Operator) -> None:
        if isinstance(operator, UnaryOperator):
            self.unary_operators.append(operator)
        elif isinstance(operator, BinaryOperator):
            self.binary_operators.append(operator)
        elif isinstance(operator, FunctionOperator):
            self.function_operators.append(operator)
        else:
            raise TypeError(f"Not an operator: {operator!r}")

    def _multiply_operator(self) -> BinaryOperator:
        # Implicit products use the registered "*" when there is one.
        for operator in self.binary_operators:
            if operator.symbol == PRODUCT.symbol:
                return operator
        return PRODUCT

    def _process_token(
        self, processor: OperatorProcessor, text: str, pointer: int
    ) -> int:
        """
        Claim one token at the cursor and hand it to the processor.

        Returns:
            Cursor position after the claimed token
        """
        token = get_literal_claim_token(text, pointer)
        if token is not None:
            processor.add_literal(float(token.text(text)), _span(token))
            return token.end

        char = text[pointer]

        if char == "(":
            processor.add_open_parens(Span(pointer, pointer + 1))
            return pointer + 1

        if char in (")", ","):
            processor.add_close_symbol(char, Span(pointer, pointer + 1))
            return pointer + 1

        for operator in self.unary_operators:
            token = get_operator_claim_token(operator, text, pointer)
            if token is not None:
                processor.add_operator(operator, _span(token))
                return token.end

        token = get_operator_claim_token(UNARY_MINUS, text, pointer)
        if token is not None and processor.should_process_minus_as_unary():
            processor.add_operator(UNARY_MINUS, _span(token))
            return token.end

        for operator in self.binary_operators:
            token = get_operator_claim_token(operator, text, pointer)
            if token is not None:
                processor.add_operator(operator, _span(token))
                return token.end

        for operator in self.function_operators:
            token = get_operator_claim_token(operator, text, pointer)
            if token is not None:
                return self._process_function(processor, operator, token, text)

        token = get_variable_claim_token(self.config.valid_variables, text, pointer)
        if token is not None:
            processor.add_variable(token.text(text), _span(token))
            return token.end

        if char in VARIABLE_CHARACTERS:
            raise UnknownVariableError(char, pointer)

        raise MathSyntaxError(f"Unexpected token: '{char}'", pointer)

    def _process_function(
        self,
        processor: OperatorProcessor,
        operator: FunctionOperator,
        token: ClaimToken,
        text: str,
    ) -> int:
        """Add a function operator and consume the "(" that must follow it."""
        pointer = token.end
        whitespace = get_whitespace_claim_token(text, pointer)
        if whitespace is not None:
            pointer = whitespace.end

        if pointer >= len(text) or text[pointer] != "(":
            raise MathSyntaxError(
                f"Expected '(' after function operator '{operator.symbol}'",
                token.start,
                details={"operator": operator.name},
            )

        processor.add_operator(operator, _span(token))
        return pointer + 1


def parse(
    text: str, config: Union[ParserConfig, Mapping[str, Any], None] = None
) -> ASTNode:
    """Parse an expression with a fresh parser."""
    return Parser(config).parse(text)


def _span(token: ClaimToken) -> Span:
    return Span(token.start, token.end)

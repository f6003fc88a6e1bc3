"""Tests for the OperatorProcessor stack machine."""

import pytest

from mathast import (
    CORE_OPERATORS,
    UNARY_MINUS,
    BadParensError,
    BinaryOp,
    FunctionOp,
    IncorrectArityError,
    Literal,
    MathSyntaxError,
    OperatorProcessor,
    ParserConfig,
    Span,
    UnaryOp,
    Variable,
)
from mathast.processor import FunctionStartMarker, OpenParenMarker, OperatorEntry, TokenKind

SUM = CORE_OPERATORS["sum"]
PROD = CORE_OPERATORS["prod"]
EXP = CORE_OPERATORS["exp"]
POW = CORE_OPERATORS["pow"]


def feed(processor, *tokens):
    """Feed (method, *args) tuples to the processor, one pass each."""
    for method, *args in tokens:
        processor.start_pass()
        getattr(processor, method)(*args)
    return processor


class TestReduction:
    """Test precedence-driven reduction."""

    def test_single_literal(self):
        """Test that a lone literal is the root."""
        processor = feed(OperatorProcessor(), ("add_literal", 1))
        assert processor.done() == Literal(1)

    def test_higher_precedence_waits(self):
        """Test that a tighter operator stays on the stack."""
        processor = feed(
            OperatorProcessor(),
            ("add_literal", 1),
            ("add_operator", SUM),
            ("add_literal", 2),
            ("add_operator", PROD),
        )
        assert [entry.operator for entry in processor.operator_stack] == [SUM, PROD]

    def test_equal_precedence_reduces_when_left_associative(self):
        """Test that an equal-precedence operator reduces the stacked one."""
        processor = feed(
            OperatorProcessor(),
            ("add_literal", 1),
            ("add_operator", SUM),
            ("add_literal", 2),
            ("add_operator", SUM),
        )
        assert len(processor.operator_stack) == 1
        assert processor.nodes == [BinaryOp(SUM, [Literal(1), Literal(2)])]

    def test_equal_precedence_waits_when_right_associative(self):
        """Test that right associativity only reduces strictly tighter operators."""
        processor = feed(
            OperatorProcessor(ParserConfig(left_associative=False)),
            ("add_literal", 1),
            ("add_operator", SUM),
            ("add_literal", 2),
            ("add_operator", SUM),
        )
        assert len(processor.operator_stack) == 2
        assert processor.nodes == [Literal(1), Literal(2)]

    def test_unary_reduced_by_binary(self):
        """Test that a stacked unary operator is reduced before a binary push."""
        processor = feed(
            OperatorProcessor(),
            ("add_operator", UNARY_MINUS),
            ("add_literal", 2),
            ("add_operator", EXP),
        )
        assert processor.nodes == [UnaryOp(UNARY_MINUS, [Literal(2)])]

    def test_missing_operand(self):
        """Test that reducing without enough operands raises."""
        processor = feed(OperatorProcessor(), ("add_literal", 1), ("add_operator", PROD))
        with pytest.raises(MathSyntaxError):
            processor.done()

    def test_adjacent_operands_without_implicit_multiply(self):
        """Test that a second operand without an operator raises immediately."""
        processor = feed(OperatorProcessor(ParserConfig(implicit_multiply=False)), ("add_literal", 1))
        processor.start_pass()
        with pytest.raises(MathSyntaxError, match="Missing operator"):
            processor.add_literal(2, Span(2, 3))

    def test_too_many_nodes(self):
        """Test that leftover operands raise."""
        processor = feed(OperatorProcessor(), ("add_literal", 1))
        processor.nodes.append(Literal(2))
        with pytest.raises(MathSyntaxError, match="Invalid equation"):
            processor.done()


class TestMarkers:
    """Test parenthesis and function markers."""

    def test_open_paren_marker(self):
        """Test that "(" pushes a marker recording the node depth."""
        processor = feed(OperatorProcessor(), ("add_literal", 1), ("add_operator", SUM), ("add_open_parens",))
        marker = processor.operator_stack[-1]
        assert isinstance(marker, OpenParenMarker)
        assert marker.depth == 1

    def test_function_pushes_operator_and_marker(self):
        """Test that a function pushes itself followed by its start marker."""
        processor = feed(OperatorProcessor(), ("add_operator", POW))
        entry, marker = processor.operator_stack
        assert isinstance(entry, OperatorEntry)
        assert entry.operator == POW
        assert isinstance(marker, FunctionStartMarker)
        assert marker.remaining == 2

    def test_comma_keeps_function_marker(self):
        """Test that a comma leaves the argument list open."""
        processor = feed(
            OperatorProcessor(),
            ("add_operator", POW),
            ("add_literal", 1),
            ("add_close_symbol", ","),
        )
        marker = processor.operator_stack[-1]
        assert isinstance(marker, FunctionStartMarker)
        assert marker.remaining == 1

    def test_close_reduces_function(self):
        """Test that ")" reduces the function with its arguments."""
        processor = feed(
            OperatorProcessor(),
            ("add_operator", POW),
            ("add_variable", "x"),
            ("add_close_symbol", ","),
            ("add_literal", 2),
            ("add_close_symbol", ")"),
        )
        assert processor.operator_stack == []
        assert processor.done() == FunctionOp(POW, [Variable("x"), Literal(2)])

    def test_too_few_arguments(self):
        """Test closing a function before all arguments are given."""
        processor = feed(OperatorProcessor(), ("add_operator", POW), ("add_literal", 1))
        processor.start_pass()
        with pytest.raises(IncorrectArityError):
            processor.add_close_symbol(")")

    def test_unmatched_close(self):
        """Test ")" with nothing open."""
        processor = feed(OperatorProcessor(), ("add_literal", 1))
        processor.start_pass()
        with pytest.raises(BadParensError):
            processor.add_close_symbol(")")

    def test_residual_marker(self):
        """Test that an open parenthesis at the end raises."""
        processor = feed(OperatorProcessor(), ("add_open_parens",), ("add_literal", 1))
        with pytest.raises(BadParensError):
            processor.done()

    def test_invalid_close_symbol(self):
        """Test that only ")" and "," close expressions."""
        processor = OperatorProcessor()
        processor.start_pass()
        with pytest.raises(ValueError):
            processor.add_close_symbol("]")


class TestPassState:
    """Test the token kinds tracked across passes."""

    def test_minus_is_unary_at_start(self):
        """Test that a minus at the start negates."""
        processor = OperatorProcessor()
        processor.start_pass()
        assert processor.should_process_minus_as_unary()

    @pytest.mark.parametrize(
        "token,expected",
        [
            (("add_literal", 1), False),
            (("add_close_symbol", ")"), False),
            (("add_variable", "x"), True),
            (("add_open_parens",), True),
            (("add_operator", UNARY_MINUS), True),
        ],
    )
    def test_minus_after_token(self, token, expected):
        """Test which previous tokens turn a minus into a subtraction."""
        processor = OperatorProcessor()
        if token[0] == "add_close_symbol":
            feed(processor, ("add_open_parens",), ("add_literal", 1))
        feed(processor, token)
        processor.start_pass()
        assert processor.should_process_minus_as_unary() is expected

    def test_implicit_multiply_keeps_token_kind(self):
        """Test that an implicit product does not replace the pass's token kind."""
        processor = feed(OperatorProcessor(), ("add_literal", 3), ("add_variable", "x"))
        assert processor.kind_added_current_pass == TokenKind.VARIABLE
        assert processor.operator_stack[-1].operator == PROD

    def test_custom_multiply_operator(self):
        """Test that implicit products use the injected operator."""
        processor = feed(
            OperatorProcessor(multiply_operator=SUM),
            ("add_literal", 3),
            ("add_variable", "x"),
        )
        assert processor.done() == BinaryOp(SUM, [Literal(3), Variable("x")])

    def test_no_tokens_after_done(self):
        """Test that a finished processor rejects new passes."""
        processor = feed(OperatorProcessor(), ("add_literal", 1))
        processor.done()
        with pytest.raises(RuntimeError):
            processor.start_pass()
        with pytest.raises(RuntimeError):
            processor.done()

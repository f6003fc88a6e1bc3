"""
Shared pytest fixtures for parser tests.

This module provides:
- Parsers with default, custom and restricted configurations
- A renderer turning parsed trees into fully parenthesized strings
"""

import pytest

from mathast import Parser, UnaryOperator, to_string


@pytest.fixture
def parser():
    """A parser with the default configuration and catalogue."""
    return Parser()


@pytest.fixture
def dollar_operator():
    """A custom unary operator used across tests."""
    return UnaryOperator(name="Blah", symbol="$")


@pytest.fixture
def custom_parser(dollar_operator):
    """A default parser with the "$" unary operator registered."""
    parser = Parser()
    parser.add_operator(dollar_operator)
    return parser


@pytest.fixture
def render():
    """Parse an expression and render the tree's grouping."""
    def _render(text: str, parser: Parser | None = None) -> str:
        """
        Args:
            text: Expression to parse
            parser: Parser to use (defaults to a fresh default parser)

        Returns:
            Fully parenthesized rendering of the parsed tree
        """
        parser = parser or Parser()
        return to_string(parser.parse(text))

    return _render

"""
Parser exceptions.

Every error raised while parsing derives from MathParseError so that
embedding applications can catch the whole family at the call boundary.
"""

from typing import Any, Dict, Optional


class MathParseError(Exception):
    """Base exception for expression parsing errors"""

    default_message = "Math parse error"

    def __init__(
        self,
        message: Optional[str] = None,
        position: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        self.position = position
        self.details = dict(details or {})
        if position is not None:
            self.details.setdefault("position", position)
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Standardized error payload"""
        return {
            "error": {
                "type": self.__class__.__name__,
                "message": self.message,
                "details": self.details,
            }
        }


class MathSyntaxError(MathParseError):
    """Raised for invalid math equation syntax"""

    default_message = "Math syntax error"


class BadParensError(MathSyntaxError):
    """Raised when parentheses are unbalanced"""

    default_message = "Unbalanced parentheses"


class UnknownVariableError(MathSyntaxError):
    """Raised when a variable is not allowed by the parser configuration"""

    def __init__(self, variable: str, position: Optional[int] = None):
        self.variable = variable
        super().__init__(
            message=f"Unknown variable: '{variable}'",
            position=position,
            details={"variable": variable},
        )


class IncorrectArityError(MathParseError):
    """Raised when an operator receives the wrong number of operands"""

    def __init__(
        self,
        operator_name: str,
        expected: int,
        actual: int,
        position: Optional[int] = None,
    ):
        self.operator_name = operator_name
        self.expected = expected
        self.actual = actual
        super().__init__(
            message=(
                f"Operator '{operator_name}' expects {expected} "
                f"operand(s), got {actual}"
            ),
            position=position,
            details={
                "operator": operator_name,
                "expected": expected,
                "actual": actual,
            },
        )

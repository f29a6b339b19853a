from bigexpr.builder import ExpressionBuilder
from bigexpr.calculator import Calculator
from bigexpr.expression import Expression
from bigexpr.extra.exceptions import (ArityError, ConfigError, DivisionByZeroError, DomainError, ExpressionError,
                                      ExpressionSyntaxError, InvalidParenthesisError, LexicalError,
                                      UnboundVariableError, VariableOvershadowError)
from bigexpr.extra.types import Function, Operator, ValidationResult

__all__ = [
    "ExpressionBuilder", "Calculator", "Expression", "Function", "Operator", "ValidationResult",
    "ExpressionError", "ConfigError", "VariableOvershadowError", "LexicalError", "ExpressionSyntaxError",
    "InvalidParenthesisError", "ArityError", "UnboundVariableError", "DivisionByZeroError", "DomainError",
]

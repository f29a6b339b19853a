from typing import Literal


class ExpressionError(Exception):
    """
    Base class for every error raised while building or evaluating an expression
    """


class ConfigError(ExpressionError, ValueError):
    def __init__(self, message,
                 exc_type: Literal["empty_expression", "invalid_symbol", "invalid_name", "name_collision",
                                   "invalid_arity"]):
        super().__init__(message)
        self.exc_type = exc_type


class VariableOvershadowError(ConfigError):
    def __init__(self, message):
        super().__init__(message, exc_type="name_collision")


class LexicalError(ExpressionError, ValueError):
    def __init__(self, message,
                 exc_type: Literal["unknown_token", "unknown_operator", "unknown_function", "invalid_number"]):
        super().__init__(message)
        self.exc_type = exc_type


class ExpressionSyntaxError(ExpressionError, SyntaxError):
    def __init__(self, message, exc_type: Literal["separator", "argument", "statement", "empty", "unbalanced"]):
        super().__init__(message)
        self.exc_type = exc_type


class InvalidParenthesisError(ExpressionSyntaxError):
    def __init__(self, message, exc_type: Literal["empty", "unbalanced"]):
        super().__init__(message, exc_type=exc_type)


class ArityError(ExpressionError, TypeError):
    pass


class UnboundVariableError(ExpressionError, NameError):
    def __init__(self, message, name: str):
        super().__init__(message)
        self.name = name


class DivisionByZeroError(ExpressionError, ZeroDivisionError):
    pass


class DomainError(ExpressionError, ValueError):
    pass

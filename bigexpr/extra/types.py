import decimal
from dataclasses import dataclass, field
from typing import Callable


@dataclass(frozen=True)
class Operator:
    """
    Class representing an operator
    :param symbol: sign of the operator, made of allowed operator characters only
    :param operands: 1 for unary operators, 2 for binary ones
    :param priority: priority of operator(higher binds tighter)
    :param callable_function: function that will be called when met in expression(operands passed as arguments)
    :param is_right: is operator right associative. Unary operators which are not right associative are postfix ones
    :param validators: callable validators will be called with the operands before calling 'callable_function'
    """
    symbol: str
    operands: int
    priority: int
    callable_function: Callable[..., decimal.Decimal]
    is_right: bool = False
    validators: tuple[Callable, ...] = ()

    @property
    def is_postfix(self) -> bool:
        return self.operands == 1 and not self.is_right


@dataclass(frozen=True)
class Function:
    """
    Class representing a function
    :param name: name of the function as written in expressions
    :param callable_function: function that will be called when met in expression
    :param min_args: min amount of args
    :param max_args: max amount of args(-1 for unlimited)
    :param validators: callable validators will be called with the arguments before calling 'callable_function'
    """
    name: str
    callable_function: Callable[..., decimal.Decimal]
    min_args: int = 1
    max_args: int = 1
    validators: tuple[Callable, ...] = ()

    @property
    def arity(self) -> int:
        return self.min_args

    @property
    def is_variadic(self) -> bool:
        return self.max_args != self.min_args

    def accepts(self, args: int) -> bool:
        return self.min_args <= args and (self.max_args == -1 or args <= self.max_args)


@dataclass(frozen=True)
class NumberToken:
    value: decimal.Decimal


@dataclass(frozen=True)
class VariableToken:
    name: str


@dataclass(frozen=True)
class OperatorToken:
    operator: Operator


@dataclass(frozen=True)
class FunctionToken:
    """
    :param function: resolved function
    :param arguments: amount of arguments the call site passes
    """
    function: Function
    arguments: int


@dataclass(frozen=True)
class ParenthesisToken:
    is_open: bool


@dataclass(frozen=True)
class SeparatorToken:
    pass


Token = NumberToken | VariableToken | OperatorToken | FunctionToken | ParenthesisToken | SeparatorToken


@dataclass
class Context:
    """
    Class representing the names scope of one expression
    :param functions: map from function name to user Function dataclass
    :param operators: map from (symbol, operands) to user Operator dataclass
    :param variable_names: declared variable names
    :param implicit_multiplication: insert '*' between adjacent operands
    """
    functions: dict[str, Function] = field(default_factory=dict)
    operators: dict[tuple[str, int], Operator] = field(default_factory=dict)
    variable_names: set[str] = field(default_factory=set)
    implicit_multiplication: bool = True


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    errors: list[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.ok


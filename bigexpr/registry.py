import decimal
import math
from typing import Callable

import bigexpr.constants as cst
from bigexpr.extra.exceptions import DivisionByZeroError, DomainError
from bigexpr.extra.types import Function, Operator
from bigexpr.extra.utils import to_decimal


def non_negative_validator(*args, **kwargs):
    """
    Validates that every argument is non-negative.
    :param args: numbers to validate
    :param kwargs: must contain 'op' key with operator or function name
    :raises DomainError: if any of the arguments are negative
    """
    if any(x < 0 for x in args):
        args = [str(arg) for arg in args]
        raise DomainError(f"Cannot apply '{kwargs['op']}' to {', '.join(args)}: only non-negative values are allowed")


def positive_validator(*args, **kwargs):
    if any(x <= 0 for x in args):
        args = [str(arg) for arg in args]
        raise DomainError(f"Cannot apply '{kwargs['op']}' to {', '.join(args)}: only positive values are allowed")


def log1p_validator(*args, **kwargs):
    if args[0] <= -1:
        raise DomainError(f"Cannot apply '{kwargs['op']}' to {args[0]}: only values greater than -1 are allowed")


def logb_validator(*args, **kwargs):
    positive_validator(*args, **kwargs)
    if args[0] == 1:
        raise DomainError(f"Cannot apply '{kwargs['op']}' with base 1")


def divisor_validator(*args, **kwargs):
    """
    Validates that the last operand(the divisor) is not zero
    :raises DivisionByZeroError: divisor is zero
    """
    if args[-1] == 0:
        raise DivisionByZeroError(f"Division by zero in '{kwargs['op']}'")


def pow_validator(*args, **kwargs):
    base, exponent = args
    if base == 0 and exponent < 0:
        raise DivisionByZeroError(f"Division by zero in '{kwargs['op']}': 0 raised to a negative power")


def _reciprocal(value: float, name: str) -> float:
    if value == 0:
        raise DivisionByZeroError(f"Division by zero in {name}")
    return 1 / value


def float_function(formula: Callable[[float], float]) -> Callable[[decimal.Decimal], decimal.Decimal]:
    """
    Wraps float math into a Decimal to Decimal function
    :param formula: function of one float argument
    :return: function of one Decimal argument
    """
    def apply(x: decimal.Decimal) -> decimal.Decimal:
        return to_decimal(formula(float(x)))
    return apply


def decimal_pow(base: decimal.Decimal, exponent: decimal.Decimal) -> decimal.Decimal:
    """
    Raises base to the power, 0^0 is 1
    """
    if exponent == 0:
        return decimal.Decimal(1)
    return base ** exponent


def signum(x: decimal.Decimal) -> decimal.Decimal:
    if x > 0:
        return decimal.Decimal(1)
    elif x < 0:
        return decimal.Decimal(-1)
    return decimal.Decimal(0)


def logb(base: decimal.Decimal, x: decimal.Decimal) -> decimal.Decimal:
    return to_decimal(math.log(float(x)) / math.log(float(base)))


OPERATORS: dict[tuple[str, int], Operator] = {
    ("+", 2): Operator("+", 2, cst.PRECEDENCE_ADDITION, lambda x, y: x + y),
    ("-", 2): Operator("-", 2, cst.PRECEDENCE_SUBTRACTION, lambda x, y: x - y),
    ("*", 2): Operator("*", 2, cst.PRECEDENCE_MULTIPLICATION, lambda x, y: x * y),
    ("/", 2): Operator("/", 2, cst.PRECEDENCE_DIVISION, lambda x, y: x / y, validators=(divisor_validator,)),
    ("%", 2): Operator("%", 2, cst.PRECEDENCE_MODULO, lambda x, y: x % y, validators=(divisor_validator,)),
    ("^", 2): Operator("^", 2, cst.PRECEDENCE_POWER, decimal_pow, True, (pow_validator,)),
    ("-", 1): Operator("-", 1, cst.PRECEDENCE_UNARY_MINUS, lambda x: -x, True),
    ("+", 1): Operator("+", 1, cst.PRECEDENCE_UNARY_PLUS, lambda x: x, True),
}

MULTIPLICATION = OPERATORS[("*", 2)]


FUNCTIONS: dict[str, Function] = {
    "sin": Function("sin", float_function(math.sin)),
    "cos": Function("cos", float_function(math.cos)),
    "tan": Function("tan", float_function(math.tan)),
    "cot": Function("cot", float_function(lambda x: _reciprocal(math.tan(x), "cotangent"))),
    "csc": Function("csc", float_function(lambda x: _reciprocal(math.sin(x), "cosecant"))),
    "sec": Function("sec", float_function(lambda x: _reciprocal(math.cos(x), "secant"))),
    "sinh": Function("sinh", float_function(math.sinh)),
    "cosh": Function("cosh", float_function(math.cosh)),
    "tanh": Function("tanh", float_function(math.tanh)),
    "csch": Function("csch", float_function(lambda x: _reciprocal(math.sinh(x), "hyperbolic cosecant"))),
    "sech": Function("sech", float_function(lambda x: 1 / math.cosh(x))),
    "coth": Function("coth", float_function(lambda x: math.cosh(x) * _reciprocal(math.sinh(x), "hyperbolic cotangent"))),
    "asin": Function("asin", float_function(math.asin)),
    "acos": Function("acos", float_function(math.acos)),
    "atan": Function("atan", float_function(math.atan)),
    "sqrt": Function("sqrt", lambda x: x.sqrt(), validators=(non_negative_validator,)),
    "cbrt": Function("cbrt", float_function(math.cbrt)),
    "abs": Function("abs", abs),
    "ceil": Function("ceil", lambda x: x.to_integral_value(rounding=decimal.ROUND_CEILING)),
    "floor": Function("floor", lambda x: x.to_integral_value(rounding=decimal.ROUND_FLOOR)),
    "pow": Function("pow", decimal_pow, 2, 2, (pow_validator,)),
    "exp": Function("exp", lambda x: x.exp()),
    "expm1": Function("expm1", float_function(math.expm1)),
    "log": Function("log", lambda x: x.ln(), validators=(positive_validator,)),
    "log2": Function("log2", float_function(math.log2), validators=(positive_validator,)),
    "log10": Function("log10", lambda x: x.log10(), validators=(positive_validator,)),
    "log1p": Function("log1p", float_function(math.log1p), validators=(log1p_validator,)),
    "logb": Function("logb", logb, 2, 2, (logb_validator,)),
    "signum": Function("signum", signum),
    "toradian": Function("toradian", float_function(math.radians)),
    "todegree": Function("todegree", float_function(math.degrees)),
    "max": Function("max", lambda *args: max(args), 1, -1),
    "min": Function("min", lambda *args: min(args), 1, -1),
}


def get_builtin_function(name: str) -> Function | None:
    return FUNCTIONS.get(name)


def get_operator(symbol: str, operands: int,
                 user_operators: dict[tuple[str, int], Operator] | None = None) -> Operator | None:
    """
    Looks the operator up in user operators first, then in the built-in ones
    :param symbol: operator sign
    :param operands: 1 for unary, 2 for binary
    :param user_operators: operators registered for the current expression
    :return: Operator or None if nothing is registered
    """
    if user_operators:
        op = user_operators.get((symbol, operands))
        if op is not None:
            return op
    return OPERATORS.get((symbol, operands))

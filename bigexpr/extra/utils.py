import decimal
import math
from functools import wraps

import bigexpr.constants as cst
from bigexpr.extra.exceptions import DomainError


def check_is_integer(dec: decimal.Decimal) -> bool:
    return dec.as_integer_ratio()[1] == 1


def round_decimal(dec: decimal.Decimal, n_digits: int = cst.ROUNDING_DIGITS, rounding=cst.ROUNDING):
    """
    Rounds decimal to n digits after point
    :param dec: decimal to round
    :param n_digits: number of digits to round to
    :rounding: rounding method
    :return: rounded decimal
    """
    quantizer = decimal.Decimal('1.' + '0' * n_digits)
    try:
        return dec.quantize(quantizer, rounding=rounding)
    except decimal.InvalidOperation:
        return dec


def to_decimal(value) -> decimal.Decimal:
    """
    Converts a number to Decimal. Floats are converted through their shortest repr, so 0.1 stays 0.1
    :param value: Decimal, int, float or numeric string
    :raises DomainError: value is not a finite number
    :return: decimal value
    """
    if isinstance(value, decimal.Decimal):
        result = value
    elif isinstance(value, float):
        if not math.isfinite(value):
            raise DomainError(f"Result '{value}' is not a finite number")
        result = decimal.Decimal(repr(value))
    else:
        try:
            result = decimal.Decimal(value)
        except (decimal.InvalidOperation, TypeError, ValueError):
            raise DomainError(f"Cannot convert '{value}' to a decimal number")
    if not result.is_finite():
        raise DomainError(f"Result '{value}' is not a finite number")
    return result


def is_allowed_operator_char(s: str) -> bool:
    return s in cst.ALLOWED_OPERATOR_CHARS


def is_valid_operator_symbol(symbol: str) -> bool:
    return bool(symbol) and all(is_allowed_operator_char(s) for s in symbol)


def is_name_start(s: str) -> bool:
    return s.isalpha() or s == "_"


def is_name_char(s: str) -> bool:
    return s.isalnum() or s == "_"


def log_exception(func):

    """Decorator to automatically log exceptions"""

    @wraps(func)
    def wrapper(self, *args, **kwargs):

        try:
            return func(self, *args, **kwargs)
        except Exception as e:
            self.logger.exception(f"Exception in {func.__name__}: {e}")
            raise

    return wrapper

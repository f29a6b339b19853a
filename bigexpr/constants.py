import decimal
import logging
import math

FORMAT = "[%(levelname)s - %(funcName)4s() ] %(message)s"
LOG_FILE = "logs/bigexpr.log"
LOG_LEVEL = logging.INFO

PRECISION = 100
ROUNDING_DIGITS = 10
ROUNDING = decimal.ROUND_HALF_UP

SCIENTIFIC_FORM: int | None = None  # 5 = e5 format

ALLOWED_OPERATOR_CHARS = frozenset("+-*/^%!#§$&;:~<>|=¬")

PRECEDENCE_ADDITION = 500
PRECEDENCE_SUBTRACTION = PRECEDENCE_ADDITION
PRECEDENCE_MULTIPLICATION = 1000
PRECEDENCE_DIVISION = PRECEDENCE_MULTIPLICATION
PRECEDENCE_MODULO = PRECEDENCE_DIVISION
PRECEDENCE_POWER = 10000
PRECEDENCE_UNARY_MINUS = 5000
PRECEDENCE_UNARY_PLUS = PRECEDENCE_UNARY_MINUS

DEFAULT_VARIABLES: dict[str, decimal.Decimal] = {
    "pi": decimal.Decimal(repr(math.pi)),
    "π": decimal.Decimal(repr(math.pi)),
    "e": decimal.Decimal(repr(math.e)),
    "φ": decimal.Decimal("1.61803398874"),
}

STACK_INITIAL_CAPACITY = 5
STACK_GROWTH_FACTOR = 1.2

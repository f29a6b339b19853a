import decimal
import logging
import os
from sys import stdout

import bigexpr.constants as cst
from bigexpr.calculator import Calculator
from bigexpr.extra.exceptions import ExpressionError
from bigexpr.extra.utils import check_is_integer, round_decimal

logger = logging.getLogger(__name__)


def format_result(result: decimal.Decimal) -> str:
    """
    Formats result for the output: rounds it and drops the fractional part of integers
    :param result: calculated value
    :return: formatted string
    """
    result = round_decimal(result)
    if check_is_integer(result):
        result = decimal.Decimal(int(result))
    else:
        result = result.normalize()
    if cst.SCIENTIFIC_FORM:
        return ("{:." + str(cst.SCIENTIFIC_FORM) + "e}").format(result)
    return str(result)


def configure_logging():
    log_dir = os.path.dirname(cst.LOG_FILE)
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
    logging.basicConfig(
        level=cst.LOG_LEVEL,
        handlers=[
            logging.FileHandler(cst.LOG_FILE, mode="a", encoding="utf-8"),
            logging.StreamHandler(stdout),
        ],
        format=cst.FORMAT
    )


def main():
    """
    Entry point for application. Gets expression from stdin and passes it to Calculator.calc()
    """
    configure_logging()
    while True:
        try:
            expression: str = input("Enter the expression to calculate(q to exit): ")
        except EOFError:
            break
        if expression == "q":
            break
        if not expression.strip():
            continue
        try:
            result = Calculator().calc(expression)
        except ExpressionError as e:
            logger.error(f"Could not calculate expression {expression}: {e}")
            continue
        logger.info(f"{expression} = {format_result(result)}")


if __name__ == "__main__":
    main()

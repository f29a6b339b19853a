import decimal
import logging
from typing import Mapping

from bigexpr.builder import ExpressionBuilder
from bigexpr.extra.exceptions import ExpressionSyntaxError
from bigexpr.extra.utils import log_exception, to_decimal


class Calculator:

    """
    Calculates scripts of the form 'let x = 5; let y = x+1; x*y'.
    ';' always separates statements, so operators containing ';' are usable through ExpressionBuilder only
    :param variables: initial variable values
    :param implicit_multiplication: allow '2x' instead of '2*x'
    :param logger: logger to report to
    """
    def __init__(self, variables: Mapping[str, object] | None = None, *, implicit_multiplication: bool = True,
                 logger: logging.Logger | None = None):
        self.variables: dict[str, decimal.Decimal] = {k: to_decimal(v) for k, v in (variables or {}).items()}
        self.implicit_multiplication = implicit_multiplication
        self.logger = logger or logging.getLogger(__name__)

    @log_exception
    def calc(self, expression: str) -> decimal.Decimal:
        """
        Calculates value of the script. Every 'let' statement is calculated once, in order of definition
        :param expression: ';' separated 'let' statements followed by the expression to calculate
        :raises ExpressionSyntaxError: invalid 'let' statement
        :return: value of the last expression
        """
        self.logger.debug(f"expression: {expression}")
        statements = str(expression).split(";")
        for statement in statements[:-1]:
            statement = statement.strip()
            if not statement:
                continue
            name, value = self._parse_let(statement)
            self.variables[name] = self.evaluate(value)
            self.logger.debug(f"let {name} = {self.variables[name]}")
        return self.evaluate(statements[-1])

    @staticmethod
    def _parse_let(statement: str) -> tuple[str, str]:
        if not statement.startswith("let "):
            raise ExpressionSyntaxError(f"{statement}: only 'let' statements can be followed by ';'",
                                        exc_type="statement")
        var = statement[4:]
        if var.count(" let ") > 0:
            raise ExpressionSyntaxError(f"Unseparated variable defines: {statement}", exc_type="statement")
        first_eq = var.find("=")
        if first_eq == -1:
            raise ExpressionSyntaxError(f"{var}: cannot define variable without '='", exc_type="statement")
        var_name, var_val = var[:first_eq].strip(), var[first_eq + 1:].strip()
        if len(var_name) == 0:
            raise ExpressionSyntaxError(f"{var}: cannot define variable with empty name", exc_type="statement")
        if len(var_val) == 0:
            raise ExpressionSyntaxError(f"{var}: variable cannot be empty", exc_type="statement")
        return var_name, var_val

    def evaluate(self, expression: str) -> decimal.Decimal:
        """
        Compiles and calculates a single expression with the current variables
        """
        compiled = (ExpressionBuilder(expression, logger=self.logger)
                    .variables(*self.variables)
                    .implicit_multiplication(self.implicit_multiplication)
                    .build())
        return compiled.set_variables(self.variables).evaluate()

import decimal
import logging
from concurrent.futures import Executor, Future
from typing import Iterable, Mapping

import bigexpr.constants as cst
from bigexpr import registry
from bigexpr.extra.exceptions import (ArityError, DivisionByZeroError, DomainError, ExpressionError,
                                      UnboundVariableError, VariableOvershadowError)
from bigexpr.extra.stack import ArrayStack
from bigexpr.extra.types import (FunctionToken, NumberToken, OperatorToken, Token, ValidationResult,
                                 VariableToken)
from bigexpr.extra.utils import log_exception, to_decimal


class Expression:
    """
    Compiled expression: postfix program with its variable values.

    The postfix tokens are never changed after compilation and are shared between copies,
    while every copy owns its variables. An instance is not thread safe: evaluate a separate
    ``copy()`` in each thread (or guard the instance with a lock).

    :param tokens: postfix program produced by ConverterRPN
    :param user_function_names: names of user functions, forbidden as variable names
    :param logger: logger to report to
    """

    def __init__(self, tokens: Iterable[Token], user_function_names: Iterable[str] = (), *,
                 logger: logging.Logger | None = None):
        self.tokens: tuple[Token, ...] = tuple(tokens)
        self.variables: dict[str, decimal.Decimal] = dict(cst.DEFAULT_VARIABLES)
        self.user_function_names: set[str] = set(user_function_names)
        self.logger = logger or logging.getLogger(__name__)

    def copy(self) -> "Expression":
        clone = Expression(self.tokens, self.user_function_names, logger=self.logger)
        clone.variables = dict(self.variables)
        return clone

    __copy__ = copy

    def set_variable(self, name: str, value) -> "Expression":
        """
        Sets value of the variable
        :param name: variable name
        :param value: Decimal, int, float or numeric string
        :raises VariableOvershadowError: there is a function with the same name
        :return: self
        """
        self._check_variable_name(name)
        if name in cst.DEFAULT_VARIABLES:
            self.logger.warning(f"Variable '{name}' overrides the default constant")
        self.variables[name] = to_decimal(value)
        return self

    def _check_variable_name(self, name: str):
        if name in self.user_function_names or registry.get_builtin_function(name) is not None:
            raise VariableOvershadowError(
                f"The variable name '{name}' is invalid. Since there exists a function with the same name")

    def set_variables(self, variables: Mapping[str, object]) -> "Expression":
        for name, value in variables.items():
            self.set_variable(name, value)
        return self

    def clear_variables(self) -> "Expression":
        self.variables.clear()
        return self

    def get_variable_names(self) -> set[str]:
        return {t.name for t in self.tokens if isinstance(t, VariableToken)}

    def validate(self, check_variables_bound: bool = True) -> ValidationResult:
        """
        Checks the program without calculating it
        :param check_variables_bound: report variables with no value
        :return: ValidationResult with the list of found problems
        """
        errors: list[str] = []
        if check_variables_bound:
            for t in self.tokens:
                if isinstance(t, VariableToken) and t.name not in self.variables:
                    errors.append(f"The variable '{t.name}' has not been set")

        count = 0
        for t in self.tokens:
            if isinstance(t, (NumberToken, VariableToken)):
                count += 1
            elif isinstance(t, FunctionToken):
                if t.arguments > count:
                    errors.append(f"Not enough arguments for '{t.function.name}'")
                if t.arguments > 1:
                    count -= t.arguments - 1
                elif t.arguments == 0:
                    count += 1
            elif isinstance(t, OperatorToken):
                if t.operator.operands == 2:
                    count -= 1
            if count < 1:
                errors.append("Too many operators")
                return ValidationResult(False, errors)
        if count > 1:
            errors.append("Too many operands")
        return ValidationResult(not errors, errors)

    def evaluate_async(self, executor: Executor) -> "Future[decimal.Decimal]":
        return executor.submit(self.evaluate)

    @log_exception
    def evaluate(self) -> decimal.Decimal:
        """
        Calculates value of the expression
        :raises UnboundVariableError: variable has no value
        :raises ArityError: not enough operands for an operator or function, or too many operands left
        :raises DivisionByZeroError: division by zero
        :raises DomainError: argument is out of the function domain or the result overflows
        :return: value of expression
        """
        output = ArrayStack()
        with decimal.localcontext() as ctx:
            ctx.prec = cst.PRECISION
            for t in self.tokens:
                if isinstance(t, NumberToken):
                    output.push(t.value)
                elif isinstance(t, VariableToken):
                    value = self.variables.get(t.name)
                    if value is None:
                        raise UnboundVariableError(f"No value has been set for the variable '{t.name}'", t.name)
                    output.push(value)
                elif isinstance(t, OperatorToken):
                    op = t.operator
                    if len(output) < op.operands:
                        raise ArityError(f"Invalid number of operands available for '{op.symbol}' operator")
                    args = self._pop_args(output, op.operands)
                    output.push(self._apply(op.symbol, op.callable_function, op.validators, args))
                elif isinstance(t, FunctionToken):
                    func = t.function
                    if len(output) < t.arguments:
                        raise ArityError(f"Invalid number of arguments available for '{func.name}' function")
                    args = self._pop_args(output, t.arguments)
                    self.logger.debug(f"Calling function {func.name}({args})")
                    output.push(self._apply(func.name, func.callable_function, func.validators, args))

        if len(output) != 1:
            raise ArityError("Invalid number of items on the output. Might be caused by an invalid number of "
                             "arguments for a function or an operator")
        return output.pop()

    @staticmethod
    def _pop_args(output: ArrayStack, amount: int) -> list[decimal.Decimal]:
        args = [output.pop() for _ in range(amount)]
        args.reverse()
        return args

    @staticmethod
    def _apply(name: str, callable_function, validators, args: list[decimal.Decimal]) -> decimal.Decimal:
        for valid in validators:
            valid(*args, op=name)
        try:
            return to_decimal(callable_function(*args))
        except ExpressionError:
            raise
        except ZeroDivisionError as e:
            raise DivisionByZeroError(f"Division by zero in '{name}'") from e
        except (ValueError, OverflowError, decimal.InvalidOperation, decimal.Overflow) as e:
            raise DomainError(f"Cannot apply '{name}' to {', '.join(str(arg) for arg in args)}: {e}") from e

    def __repr__(self):
        return f"Expression(tokens={self.tokens!r})"

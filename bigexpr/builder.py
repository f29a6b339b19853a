import logging
from typing import Iterable, Literal

import bigexpr.constants as cst
from bigexpr import registry
from bigexpr.expression import Expression
from bigexpr.extra.exceptions import ConfigError
from bigexpr.extra.types import Context, Function, Operator
from bigexpr.extra.utils import is_valid_operator_symbol, log_exception
from bigexpr.rpn import ConverterRPN
from bigexpr.tokenizer import Tokenizer


class ExpressionBuilder:
    """
    Collects user functions, user operators and variable names, then compiles the expression
    :param expression: mathematical expression
    :param logger: logger to report to
    :raises ConfigError: expression is empty
    """

    def __init__(self, expression: str, *, logger: logging.Logger | None = None):
        if expression is None or not str(expression).strip():
            raise ConfigError("Expression can not be empty", exc_type="empty_expression")
        self.expression = str(expression)
        self.ctx = Context()
        self.logger = logger or logging.getLogger(__name__)

    def function(self, *functions: Function) -> "ExpressionBuilder":
        for func in functions:
            self.__check_valid_name(func.name, "function")
            if func.min_args < 0 or (func.max_args != -1 and func.max_args < func.min_args):
                raise ConfigError(f"function '{func.name}': invalid amount of arguments "
                                  f"({func.min_args}, {func.max_args})", exc_type="invalid_arity")
            self.ctx.functions[func.name] = func
        return self

    def functions(self, functions: Iterable[Function]) -> "ExpressionBuilder":
        return self.function(*functions)

    def operator(self, *operators: Operator) -> "ExpressionBuilder":
        for op in operators:
            if not is_valid_operator_symbol(op.symbol):
                raise ConfigError(f"The operator symbol '{op.symbol}' is invalid", exc_type="invalid_symbol")
            if op.operands not in (1, 2):
                raise ConfigError(f"operator '{op.symbol}': only unary and binary operators are supported",
                                  exc_type="invalid_arity")
            self.ctx.operators[(op.symbol, op.operands)] = op
        return self

    def operators(self, operators: Iterable[Operator]) -> "ExpressionBuilder":
        return self.operator(*operators)

    def variable(self, name: str) -> "ExpressionBuilder":
        self.ctx.variable_names.add(name)
        return self

    def variables(self, *names: str) -> "ExpressionBuilder":
        self.ctx.variable_names.update(names)
        return self

    def implicit_multiplication(self, enabled: bool) -> "ExpressionBuilder":
        self.ctx.implicit_multiplication = enabled
        return self

    def __check_valid_name(self, name: str, typeof: Literal["function", "variable"]):
        """
        Checks validity of name
        :param name: name
        :param typeof: type of the name(function or variable)
        :raises ConfigError: name is not an identifier or a variable overshadows a function
        """
        if not isinstance(name, str) or not name.isidentifier():
            raise ConfigError(f"{typeof} '{name}': only letters, digits and '_' are allowed in naming, "
                              f"and it can not start with a digit", exc_type="invalid_name")
        if typeof == "variable":
            if registry.get_builtin_function(name) is not None:
                raise ConfigError(f"A variable can not have the same name as a function [{name}]: "
                                  f"variable '{name}' overshadows default function '{name}'",
                                  exc_type="name_collision")
            if name in self.ctx.functions:
                raise ConfigError(f"A variable can not have the same name as a function [{name}]",
                                  exc_type="name_collision")

    @log_exception
    def build(self) -> Expression:
        """
        Compiles the expression
        :raises ConfigError: declared variable overshadows a function or has an invalid name
        :raises LexicalError: unknown part of the expression
        :raises ExpressionSyntaxError: unbalanced parenthesis or misplaced separators
        :raises ArityError: function called with a wrong amount of arguments
        :return: compiled Expression
        """
        self.ctx.variable_names.update(cst.DEFAULT_VARIABLES.keys())
        for name in self.ctx.variable_names:
            self.__check_valid_name(name, "variable")

        tokens = Tokenizer(self.ctx, logger=self.logger).tokenize(self.expression)
        postfix = ConverterRPN(logger=self.logger).rpn(tokens)
        self.logger.debug(f"{self.expression} compiled to {len(postfix)} tokens")
        return Expression(postfix, self.ctx.functions.keys(), logger=self.logger)

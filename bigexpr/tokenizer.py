import decimal
import logging
import string

import bigexpr.extra.exceptions as ex_exc
from bigexpr import registry
from bigexpr.extra import utils
from bigexpr.extra.types import (Context, Function, FunctionToken, NumberToken, Operator, OperatorToken,
                                 ParenthesisToken, SeparatorToken, Token, VariableToken)
from bigexpr.extra.utils import log_exception


class Tokenizer:
    """
    Splits an infix expression into typed tokens
    :param ctx: Context with user functions, user operators and declared variable names
    :param logger: logger to report to
    """
    def __init__(self, ctx: Context, logger: logging.Logger | None = None):
        self.ctx = ctx
        self.logger = logger or logging.getLogger(__name__)

    @log_exception
    def tokenize(self, expression: str) -> list[Token]:
        """
        Tokenizes the expression
        :param expression: raw mathematical expression needed to be tokenized
        :raises LexicalError: a part of the expression is not a number, name, operator or parenthesis
        :return: list of tokens, parenthesis and separators included
        """
        tokens: list[Token] = []
        pos = 0
        length = len(expression)

        def place_token(token: Token):
            if self._needs_multiplication(tokens, token):
                tokens.append(OperatorToken(registry.MULTIPLICATION))
            tokens.append(token)

        while pos < length:
            s = expression[pos]
            if s.isspace():
                pos += 1
                continue

            if s in string.digits or s == ".":
                if tokens and isinstance(tokens[-1], NumberToken):
                    raise ex_exc.LexicalError(f"Two numbers without an operator at position {pos}",
                                              exc_type="invalid_number")
                token, pos = self._parse_number(expression, pos)
                place_token(token)
            elif s == ",":
                tokens.append(SeparatorToken())
                pos += 1
            elif s == "(":
                place_token(ParenthesisToken(True))
                pos += 1
            elif s == ")":
                tokens.append(ParenthesisToken(False))
                pos += 1
            elif utils.is_allowed_operator_char(s):
                token, pos = self._parse_operator(expression, pos, self._expects_operand(tokens))
                tokens.append(token)
            elif utils.is_name_start(s):
                token, pos = self._parse_name(expression, pos)
                place_token(token)
            else:
                raise ex_exc.LexicalError(f"Unknown token: '{s}' at position {pos}", exc_type="unknown_token")

        self.logger.debug(f"{tokens=}")
        return tokens

    def _needs_multiplication(self, tokens: list[Token], token: Token) -> bool:
        """
        Checks if '*' should be inserted between the last token and an operand-like one
        """
        if not self.ctx.implicit_multiplication or not tokens:
            return False
        last = tokens[-1]
        if not isinstance(last, (NumberToken, VariableToken)) and last != ParenthesisToken(False):
            return False
        return isinstance(token, (NumberToken, VariableToken, FunctionToken)) or token == ParenthesisToken(True)

    @staticmethod
    def _expects_operand(tokens: list[Token]) -> bool:
        """
        Checks if an operator met now would be in the unary position
        """
        if not tokens:
            return True
        last = tokens[-1]
        if isinstance(last, OperatorToken):
            return not last.operator.is_postfix
        return isinstance(last, (SeparatorToken, FunctionToken)) or last == ParenthesisToken(True)

    @staticmethod
    def _parse_number(expression: str, pos: int) -> tuple[NumberToken, int]:
        start = pos
        length = len(expression)
        while pos < length and (expression[pos] in string.digits or expression[pos] == "."):
            pos += 1

        if pos < length and expression[pos] in "eE":
            exp_end = pos + 1
            if exp_end < length and expression[exp_end] in "+-":
                exp_end += 1
            if exp_end < length and expression[exp_end] in string.digits:
                while exp_end < length and expression[exp_end] in string.digits:
                    exp_end += 1
                pos = exp_end
            elif exp_end > pos + 1:
                raise ex_exc.LexicalError(f"Unterminated number: '{expression[start:exp_end]}'",
                                          exc_type="invalid_number")
            # otherwise 'e' is a name and not a part of the number

        literal = expression[start:pos]
        try:
            value = decimal.Decimal(literal)
        except decimal.InvalidOperation:
            raise ex_exc.LexicalError(f"Invalid number: '{literal}'", exc_type="invalid_number")
        return NumberToken(value), pos

    def _parse_operator(self, expression: str, pos: int, expects_operand: bool) -> tuple[OperatorToken, int]:
        """
        Finds the longest registered operator at the position
        :param expects_operand: operator is in the unary position
        :raises LexicalError: no prefix of the operator characters is registered
        """
        run_end = pos
        while run_end < len(expression) and utils.is_allowed_operator_char(expression[run_end]):
            run_end += 1

        for end in range(run_end, pos, -1):
            op = self._find_operator(expression[pos:end], expects_operand)
            if op is not None:
                return OperatorToken(op), end
        raise ex_exc.LexicalError(f"Unknown operator: '{expression[pos:run_end]}'", exc_type="unknown_operator")

    def _find_operator(self, symbol: str, expects_operand: bool) -> Operator | None:
        preferred = (1, 2) if expects_operand else (2, 1)
        for operands in preferred:
            op = registry.get_operator(symbol, operands, self.ctx.operators)
            if op is not None:
                return op
        return None

    def _parse_name(self, expression: str, pos: int) -> tuple[Token, int]:
        """
        Resolves a name against declared variables, user functions and built-in functions
        :raises LexicalError: unknown name is called as a function
        """
        start = pos
        while pos < len(expression) and utils.is_name_char(expression[pos]):
            pos += 1
        name = expression[start:pos]

        if name in self.ctx.variable_names:
            return VariableToken(name), pos
        func: Function | None = self.ctx.functions.get(name) or registry.get_builtin_function(name)
        if func is not None:
            return FunctionToken(func, func.arity), pos

        if expression[pos:].lstrip().startswith("("):
            raise ex_exc.LexicalError(f"Unknown function: '{name}'", exc_type="unknown_function")
        self.logger.debug(f"'{name}' is not declared, treating it as a variable")
        return VariableToken(name), pos


def tokenize(source: str, functions: dict[str, Function] | None = None,
             operators: dict[tuple[str, int], Operator] | None = None, variable_names: set[str] | None = None,
             implicit_multiplication: bool = True) -> list[Token]:
    ctx = Context(functions or {}, operators or {}, set(variable_names or ()), implicit_multiplication)
    return Tokenizer(ctx).tokenize(source)

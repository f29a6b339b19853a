import dataclasses
import logging
from dataclasses import dataclass

from bigexpr.extra.exceptions import ArityError, ExpressionSyntaxError, InvalidParenthesisError
from bigexpr.extra.types import (Function, FunctionToken, NumberToken, OperatorToken, ParenthesisToken,
                                 SeparatorToken, Token, VariableToken)
from bigexpr.extra.utils import log_exception


@dataclass
class _Group:
    """
    One open parenthesis being converted
    :param function: function called with this parenthesis, None for a plain grouping
    :param arguments: amount of finished arguments
    :param filled: current argument has at least one token
    """
    function: Function | None
    arguments: int = 0
    filled: bool = False


class ConverterRPN:
    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger(__name__)

    @log_exception
    def rpn(self, tokens: list[Token]) -> tuple[Token, ...]:
        """
        Converts list of infix tokens to RPN using the shunting-yard algorithm
        :param tokens: tokens produced by Tokenizer
        :raises InvalidParenthesisError: unbalanced or empty parenthesis
        :raises ExpressionSyntaxError: misplaced separator or empty function argument
        :raises ArityError: function called with a wrong amount of arguments
        :return: postfix program without parenthesis and separators
        """
        output: list[Token] = []
        stack_ops: list[Token] = []  # operators, functions and open parenthesis
        groups: list[_Group] = []
        previous: Token | None = None

        for t in tokens:
            if groups and not isinstance(t, (SeparatorToken, ParenthesisToken)):
                groups[-1].filled = True

            if isinstance(t, (NumberToken, VariableToken)):
                output.append(t)

            elif isinstance(t, FunctionToken):
                stack_ops.append(t)

            elif isinstance(t, SeparatorToken):
                if not groups or groups[-1].function is None:
                    raise ExpressionSyntaxError("Misplaced function separator ','", exc_type="separator")
                while stack_ops and stack_ops[-1] != ParenthesisToken(True):
                    output.append(stack_ops.pop())
                if not stack_ops:
                    raise ExpressionSyntaxError("Misplaced function separator ',' or mismatched parenthesis",
                                                exc_type="separator")
                group = groups[-1]
                if not group.filled:
                    raise ExpressionSyntaxError(f"Empty argument for function '{group.function.name}'",
                                                exc_type="argument")
                group.arguments += 1
                group.filled = False

            elif t == ParenthesisToken(True):
                if groups:
                    groups[-1].filled = True
                function = previous.function if isinstance(previous, FunctionToken) else None
                groups.append(_Group(function))
                stack_ops.append(t)

            elif t == ParenthesisToken(False):
                while stack_ops and stack_ops[-1] != ParenthesisToken(True):
                    output.append(stack_ops.pop())
                if not stack_ops or not groups:
                    raise InvalidParenthesisError("Unbalanced parenthesis in expression", exc_type="unbalanced")
                stack_ops.pop()
                group = groups.pop()
                if group.function is None:
                    if not group.filled:
                        raise InvalidParenthesisError("Empty parenthesis", exc_type="empty")
                else:
                    output.append(self._close_call(group.function, group, stack_ops.pop()))  # type: ignore

            elif isinstance(t, OperatorToken):
                op = t.operator
                while stack_ops and isinstance(stack_ops[-1], OperatorToken):
                    top = stack_ops[-1].operator  # type: ignore
                    if op.operands == 1 and top.operands == 2:
                        break
                    if top.priority > op.priority or (top.priority == op.priority and not op.is_right):
                        output.append(stack_ops.pop())
                    else:
                        break
                stack_ops.append(t)

            previous = t

        for t in stack_ops[::-1]:
            if isinstance(t, ParenthesisToken):
                raise InvalidParenthesisError("Unbalanced parenthesis in expression", exc_type="unbalanced")
            output.append(t)

        self.logger.debug(f"{output=}")
        return tuple(output)

    @staticmethod
    def _close_call(func: Function, group: _Group, token: FunctionToken) -> FunctionToken:
        """
        Counts arguments of a finished function call
        :raises ExpressionSyntaxError: trailing separator
        :raises ArityError: amount of arguments does not fit the function
        """
        if group.filled:
            group.arguments += 1
        elif group.arguments:
            raise ExpressionSyntaxError(f"Empty argument for function '{func.name}'", exc_type="argument")

        if not func.accepts(group.arguments):
            if func.max_args == -1:
                expected = f"at least {func.min_args}"
            elif func.is_variadic:
                expected = f"from {func.min_args} to {func.max_args}"
            else:
                expected = str(func.min_args)
            raise ArityError(f"{func.name} requires {expected} arguments but {group.arguments} were given")
        return dataclasses.replace(token, arguments=group.arguments)


def convert_to_postfix(tokens: list[Token]) -> tuple[Token, ...]:
    return ConverterRPN().rpn(tokens)

import copy
import decimal
import logging
from concurrent.futures import ThreadPoolExecutor

import pytest

from bigexpr.builder import ExpressionBuilder
from bigexpr.expression import Expression
from bigexpr.extra.exceptions import ArityError, ConfigError, DomainError, UnboundVariableError
from bigexpr.extra.stack import ArrayStack
from bigexpr.extra.types import Function, FunctionToken, NumberToken, OperatorToken, VariableToken
from bigexpr.registry import FUNCTIONS, OPERATORS


def test_unbound_variable():
    expression = ExpressionBuilder("x+1").variable("x").build()
    with pytest.raises(UnboundVariableError) as exc_info:
        expression.evaluate()
    assert exc_info.value.name == "x"
    assert expression.set_variable("x", 2).evaluate() == 3


def test_undeclared_variable_is_resolved_at_evaluation():
    expression = ExpressionBuilder("2*y").build()
    assert expression.get_variable_names() == {"y"}
    with pytest.raises(NameError):
        expression.evaluate()
    assert expression.set_variable("y", decimal.Decimal("1.5")).evaluate() == 3


@pytest.mark.parametrize("value, expected",
                         [
                             (2, decimal.Decimal(2)),
                             (0.1, decimal.Decimal("0.1")),
                             ("3.25", decimal.Decimal("3.25")),
                             (decimal.Decimal("7"), decimal.Decimal(7)),
                         ])
def test_set_variable_converts_values(value, expected):
    expression = ExpressionBuilder("x").variable("x").build().set_variable("x", value)
    assert expression.variables["x"] == expected
    assert expression.evaluate() == expected


@pytest.mark.parametrize("value", ["abc", float("nan"), float("inf")])
def test_set_variable_invalid_values(value):
    with pytest.raises(DomainError):
        ExpressionBuilder("x").variable("x").build().set_variable("x", value)


def test_set_variables_and_clear():
    expression = ExpressionBuilder("x*y+pi-pi").variables("x", "y").build()
    assert expression.set_variables({"x": 3, "y": 4}).evaluate() == 12
    expression.clear_variables()
    assert expression.variables == {}
    assert not expression.validate().ok
    with pytest.raises(UnboundVariableError):
        expression.evaluate()


def test_get_variable_names():
    expression = ExpressionBuilder("x + sin(y) * 2z + pi").variables("x", "y", "z").build()
    assert expression.get_variable_names() == {"x", "y", "z", "pi"}


def test_override_default_constant(caplog):
    expression = ExpressionBuilder("e+1").build()
    with caplog.at_level(logging.WARNING):
        expression.set_variable("e", 1)
    assert "overrides the default constant" in caplog.text
    assert expression.evaluate() == 2


@pytest.mark.parametrize("expression, ok, error",
                         [
                             ("1+", False, "Too many operators"),
                             ("*", False, "Too many operators"),
                             ("1+2", True, None),
                             ("-1", True, None),
                             ("pow(1, 2)", True, None),
                             ("max(1, 2, 3)", True, None),
                         ])
def test_validate_structure(expression, ok, error):
    result = ExpressionBuilder(expression).build().validate(False)
    assert result.ok is ok
    assert bool(result) is ok
    if error:
        assert error in result.errors


def test_validate_too_many_operands():
    result = ExpressionBuilder("2x").variable("x").implicit_multiplication(False).build().validate(False)
    assert not result.ok
    assert result.errors == ["Too many operands"]


def test_validate_does_not_evaluate():
    calls = []

    def spy(x):
        calls.append(x)
        return x

    expression = ExpressionBuilder("spy(1)+").function(Function("spy", spy)).build()
    assert not expression.validate(False).ok
    assert calls == []
    with pytest.raises(ArityError):
        expression.evaluate()


def test_validate_variables_bound():
    expression = ExpressionBuilder("x+y").variables("x", "y").build()
    result = expression.validate()
    assert not result.ok
    assert "The variable 'x' has not been set" in result.errors
    assert "The variable 'y' has not been set" in result.errors
    assert expression.validate(False).ok
    expression.set_variables({"x": 1, "y": 2})
    assert expression.validate().ok


def test_validate_function_without_arguments():
    tokens = [FunctionToken(FUNCTIONS["pow"], 2), NumberToken(decimal.Decimal(1))]
    result = Expression(tokens).validate(False)
    assert not result.ok
    assert "Not enough arguments for 'pow'" in result.errors


def test_evaluate_hand_made_program():
    tokens = [NumberToken(decimal.Decimal(2)), VariableToken("pi"), OperatorToken(OPERATORS[("*", 2)]),
              FunctionToken(FUNCTIONS["cos"], 1)]
    assert float(Expression(tokens).evaluate()) == pytest.approx(1.0)


def test_evaluate_operator_without_operands():
    expression = Expression([OperatorToken(OPERATORS[("-", 1)])])
    with pytest.raises(ArityError):
        expression.evaluate()


def test_evaluate_is_deterministic():
    expression = ExpressionBuilder("sin(x)^2 + cos(x)^2 + x/3 + e^pi").variable("x").build()
    expression.set_variable("x", decimal.Decimal("0.7"))
    first = expression.evaluate()
    assert all(expression.evaluate() == first for _ in range(5))
    assert str(expression.evaluate()) == str(first)


def test_copy_does_not_share_variables():
    original = ExpressionBuilder("x*2").variable("x").function(Function("f", lambda x: x)).build()
    original.set_variable("x", 1)
    clone = original.copy()
    clone.set_variable("x", 10)
    assert original.evaluate() == 2
    assert clone.evaluate() == 20
    assert clone.tokens is original.tokens
    assert clone.user_function_names == original.user_function_names
    assert clone.user_function_names is not original.user_function_names
    with pytest.raises(ConfigError):
        clone.set_variable("f", 1)


def test_copy_module_uses_copy():
    original = ExpressionBuilder("x").variable("x").build().set_variable("x", 1)
    clone = copy.copy(original)
    clone.set_variable("x", 2)
    assert original.evaluate() == 1
    assert clone.evaluate() == 2


def test_evaluate_async():
    expression = ExpressionBuilder("2^10 + x").variable("x").build().set_variable("x", 1)
    with ThreadPoolExecutor(max_workers=2) as executor:
        future = expression.evaluate_async(executor)
        assert future.result() == expression.evaluate() == 1025


def test_evaluate_async_copies_in_parallel():
    expression = ExpressionBuilder("x^2").variable("x").build()
    copies = [expression.copy().set_variable("x", i) for i in range(10)]
    with ThreadPoolExecutor(max_workers=4) as executor:
        futures = [c.evaluate_async(executor) for c in copies]
        assert [f.result() for f in futures] == [i * i for i in range(10)]


def test_evaluate_async_error_is_in_future():
    expression = ExpressionBuilder("x").variable("x").build()
    with ThreadPoolExecutor(max_workers=1) as executor:
        future = expression.evaluate_async(executor)
        with pytest.raises(UnboundVariableError):
            future.result()


def test_evaluate_uses_configured_precision():
    expression = ExpressionBuilder("1/3").build()
    with ThreadPoolExecutor(max_workers=1) as executor:
        assert expression.evaluate_async(executor).result() == expression.evaluate()


def test_array_stack_grows():
    stack = ArrayStack()
    assert stack.capacity == 5
    for i in range(6):
        stack.push(decimal.Decimal(i))
    assert stack.capacity == 7
    assert len(stack) == 6
    assert stack.peek() == 5
    assert [stack.pop() for _ in range(6)] == [5, 4, 3, 2, 1, 0]
    assert stack.is_empty()
    with pytest.raises(IndexError):
        stack.pop()


def test_array_stack_invalid_capacity():
    with pytest.raises(ValueError):
        ArrayStack(0)

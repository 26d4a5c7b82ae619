"""Unit tests for expression parsing and evaluation."""

import ast

import pytest

from lv2hostconfig.errors import (
    ArityError,
    CoercionError,
    EvaluationError,
    ExpressionSyntaxError,
    RangeError,
)
from lv2hostconfig.expression.evaluator import Expression, ExpressionEvaluator, compile_expression
from lv2hostconfig.expression.functions import FunctionRegistry
from lv2hostconfig.expression.values import Number, Text


def make_evaluator(**environment) -> ExpressionEvaluator:
    """Create an evaluator with the built-in library."""
    return ExpressionEvaluator(environment, FunctionRegistry.with_builtins())


class TestLiteralBranch:
    """Tests for plain numeric text."""

    def test_literal(self):
        assert make_evaluator().resolve("0.75") == 0.75

    def test_literal_ignores_environment(self):
        """Test literals never consult the environment or functions."""
        evaluator = ExpressionEvaluator({}, FunctionRegistry())

        assert evaluator.resolve("-6") == -6.0
        assert evaluator.resolve("1e-3") == 0.001

    def test_literal_not_shadowed(self):
        """Test a literal is not re-read as an expression."""
        registry = FunctionRegistry()
        registry.register("boom", 0, lambda: 1 / 0)

        assert ExpressionEvaluator({"e3": 99}, registry).resolve("1e3") == 1000.0


class TestExpressionBranch:
    """Tests for expression evaluation."""

    def test_variable_arithmetic(self):
        """Test variable lookup with arithmetic."""
        assert make_evaluator(myvalue=10).resolve("myvalue + 5") == 15.0

    def test_function_call(self):
        """Test function call without custom environment."""
        assert make_evaluator().resolve("sqrt(9)") == 3.0

    def test_precedence_and_parentheses(self):
        assert make_evaluator().resolve("2 + 3 * 4") == 14.0
        assert make_evaluator().resolve("(2 + 3) * 4") == 20.0

    def test_operators(self):
        evaluator = make_evaluator(x=7)

        assert evaluator.resolve("x - 2") == 5.0
        assert evaluator.resolve("x / 2") == 3.5
        assert evaluator.resolve("x % 4") == 3.0
        assert evaluator.resolve("x ** 2") == 49.0
        assert evaluator.resolve("-x") == -7.0
        assert evaluator.resolve("+x") == 7.0

    def test_mod_sign_follows_dividend(self):
        assert make_evaluator().resolve("-7 % 4") == -3.0

    def test_nested_calls(self):
        """Test function results feed other functions."""
        evaluator = make_evaluator(reference=-6.0)

        assert evaluator.resolve("decibel(linear(reference))") == pytest.approx(-6.0)
        assert evaluator.resolve("max(min(reference, 0), -3)") == -3.0

    def test_surrounding_whitespace(self):
        """Test whitespace around an expression is ignored."""
        assert make_evaluator(x=1).resolve("  x + 1 ") == 2.0

    def test_whitespace_around_number(self):
        """Test padded numbers resolve through the expression branch."""
        assert make_evaluator().resolve(" 2.5 ") == 2.5

    def test_numeric_text_variable(self):
        """Test textual variables holding numbers are coerced."""
        assert make_evaluator(level="-12").resolve("level + 2") == -10.0

    def test_bare_numeric_text_variable(self):
        assert make_evaluator(level="0.5").resolve("level") == 0.5

    def test_string_literal_argument(self):
        """Test quoted numeric strings are accepted as arguments."""
        assert make_evaluator().resolve("abs('-3')") == 3.0

    def test_custom_function(self):
        registry = FunctionRegistry.with_builtins()
        registry.register("half", 1, lambda x: x / 2)

        assert ExpressionEvaluator({"g": 3}, registry).resolve("half(g) + 1") == 2.5


class TestErrors:
    """Tests for error kinds raised while resolving."""

    @pytest.mark.parametrize(
        "text",
        ["", "   ", "1 +", "(2", "linear(", "a b", "x.y", "x[0]", "x if y else z", "x < 1", "f(x=1)", "f(*a)", "lambda: 1", "True", "None"],
    )
    def test_syntax_errors(self, text):
        """Test text outside the grammar raises ExpressionSyntaxError."""
        with pytest.raises(ExpressionSyntaxError) as exc_info:
            make_evaluator().resolve(text)

        assert exc_info.value.text == text

    def test_attribute_call_rejected(self):
        with pytest.raises(ExpressionSyntaxError, match="simple function calls"):
            compile_expression("math.sqrt(4)")

    def test_unknown_variable(self):
        """Test unknown variables raise EvaluationError carrying the text."""
        with pytest.raises(EvaluationError, match="Unknown variable: missing") as exc_info:
            make_evaluator().resolve("missing * 2")

        assert exc_info.value.text == "missing * 2"

    def test_unknown_function(self):
        with pytest.raises(EvaluationError, match="Unknown function"):
            make_evaluator().resolve("nope(1)")

    def test_division_by_zero(self):
        with pytest.raises(EvaluationError, match="Division by zero"):
            make_evaluator().resolve("1 / 0")

    def test_power_overflow(self):
        with pytest.raises(EvaluationError):
            make_evaluator().resolve("10 ** 1000")

    def test_arity(self):
        with pytest.raises(ArityError):
            make_evaluator().resolve("min(1)")

    def test_range(self):
        with pytest.raises(RangeError):
            make_evaluator().resolve("scale(15, 0, 10, 0, 100)")

    def test_non_numeric_result(self):
        """Test a textual result that is not a number is a CoercionError."""
        with pytest.raises(CoercionError) as exc_info:
            make_evaluator(mode="loud").resolve("mode")

        assert exc_info.value.text == "mode"

    def test_non_numeric_operand(self):
        with pytest.raises(CoercionError):
            make_evaluator().resolve("'loud' + 1")

    def test_unsupported_environment_value(self):
        """Test environment values of other types fail naming the type."""
        with pytest.raises(CoercionError) as exc_info:
            make_evaluator(levels=[1, 2]).resolve("levels")

        assert exc_info.value.type_name == "list"

    def test_oversized_int_variable(self):
        """Test an int beyond float range fails as a CoercionError."""
        with pytest.raises(CoercionError) as exc_info:
            make_evaluator(x=10**400).resolve("x + 1")

        assert exc_info.value.type_name == "int"
        assert exc_info.value.text == "x + 1"

    @pytest.mark.parametrize("text,position", [("abs(level)", 1), ("max(1, level)", 2), ("min(level + 1, 2)", 1)])
    def test_argument_position_for_unsupported_variable(self, text, position):
        """Test a failing argument names its position in the call."""
        with pytest.raises(CoercionError) as exc_info:
            make_evaluator(level=None).resolve(text)

        assert exc_info.value.position == position
        assert exc_info.value.type_name == "NoneType"

    def test_out_of_range_literal(self):
        """Test a literal beyond float range is rejected rather than read as inf."""
        with pytest.raises(EvaluationError, match="out of range") as exc_info:
            make_evaluator().resolve("1e500")

        assert exc_info.value.text == "1e500"

    def test_out_of_range_number_in_expression(self):
        with pytest.raises(EvaluationError, match="out of range"):
            make_evaluator().resolve("1e500 - 1")

    def test_long_expression(self):
        """Test an expression too deep to parse fails with ExpressionSyntaxError."""
        text = "+".join(["1"] * 3000)

        with pytest.raises(ExpressionSyntaxError, match="too complex") as exc_info:
            make_evaluator().resolve(text)

        assert exc_info.value.text == text

    def test_moderate_expression(self):
        assert make_evaluator().resolve("+".join(["1"] * 100)) == 100.0

    def test_deep_tree_evaluation(self):
        """Test a tree too deep to walk fails with EvaluationError."""
        node = ast.Constant(1)
        for _ in range(5000):
            node = ast.BinOp(left=node, op=ast.Add(), right=ast.Constant(1))
        expression = Expression("deep", ast.Expression(body=node))

        with pytest.raises(EvaluationError, match="too complex") as exc_info:
            expression.evaluate({}, FunctionRegistry())

        assert exc_info.value.text == "deep"

    def test_evaluation_does_not_mutate_environment(self):
        environment = {"x": 1}
        ExpressionEvaluator(environment, FunctionRegistry.with_builtins()).resolve("x + 1")

        assert environment == {"x": 1}


class TestCompiledExpression:
    """Tests for the Expression object."""

    def test_variables_and_functions(self):
        """Test name extraction distinguishes variables from call targets."""
        expression = compile_expression("scale(level, lo, hi, 0, 1) + offset")

        assert expression.variables == {"level", "lo", "hi", "offset"}
        assert expression.functions == {"scale"}

    def test_evaluate_returns_tagged_value(self):
        registry = FunctionRegistry.with_builtins()

        assert compile_expression("x").evaluate({"x": "abc"}, registry) == Text("abc")
        assert compile_expression("x * 2").evaluate({"x": 2}, registry) == Number(4.0)

    def test_reusable(self):
        """Test one compiled expression evaluates against different environments."""
        expression = compile_expression("x + 1")
        registry = FunctionRegistry()

        assert expression.evaluate({"x": 1}, registry) == Number(2.0)
        assert expression.evaluate({"x": 2}, registry) == Number(3.0)

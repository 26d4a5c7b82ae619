"""Expression parsing and evaluation.

A parameter's formatted text is resolved in two steps. Text that is a
plain float literal is returned as is. Anything else is parsed as an
arithmetic expression and evaluated against the variable environment
and the function registry.

The grammar is the arithmetic subset of Python expression syntax:
numbers, quoted strings, + - * / % **, unary + and -, parentheses,
variable names and positional function calls. Parsing goes through
ast.parse and the resulting tree is checked against that subset before
anything is evaluated; eval() is never used.
"""

import ast
import logging
import math
import operator
from collections.abc import Callable, Mapping
from typing import Any

from lv2hostconfig.errors import CoercionError, EvaluationError, ExpressionSyntaxError, HostConfigError
from lv2hostconfig.expression.functions import FunctionRegistry
from lv2hostconfig.expression.values import Number, Text, Value, as_value, parse_float_literal, to_number

logger = logging.getLogger(__name__)

# Allowed binary operators
_BINOPS: dict[type, Callable[[float, float], float]] = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.Mod: math.fmod,
    ast.Pow: math.pow,
}

# Allowed unary operators
_UNARYOPS: dict[type, Callable[[float], float]] = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


class Expression:
    """A parsed, validated expression ready for evaluation."""

    def __init__(self, text: str, tree: ast.Expression):
        self.text = text
        self._tree = tree

    @property
    def variables(self) -> set[str]:
        """Names of all variables the expression reads."""
        return {
            node.id
            for node in ast.walk(self._tree)
            if isinstance(node, ast.Name) and not _is_call_target(self._tree, node)
        }

    @property
    def functions(self) -> set[str]:
        """Names of all functions the expression calls."""
        return {node.func.id for node in ast.walk(self._tree) if isinstance(node, ast.Call)}

    def evaluate(self, environment: Mapping[str, Any], functions: FunctionRegistry) -> Value:
        """Evaluate against an environment and a function registry.

        Raises:
            EvaluationError: On unknown names or failed arithmetic (including
                the ArityError, CoercionError and RangeError subclasses).
        """
        try:
            return _Evaluation(environment, functions).visit(self._tree.body)
        except (RecursionError, MemoryError):
            raise EvaluationError("Expression too complex", text=self.text) from None

    def __repr__(self) -> str:
        return f"Expression({self.text!r})"


def _is_call_target(tree: ast.Expression, name: ast.Name) -> bool:
    return any(isinstance(node, ast.Call) and node.func is name for node in ast.walk(tree))


def _check_node(node: ast.AST, text: str) -> None:
    """Reject any node outside the arithmetic subset."""
    if isinstance(node, ast.Constant):
        if isinstance(node.value, bool) or not isinstance(node.value, (int, float, str)):
            raise ExpressionSyntaxError(f"Unsupported constant: {node.value!r}", text=text)
    elif isinstance(node, ast.Name):
        pass
    elif isinstance(node, ast.BinOp):
        if type(node.op) not in _BINOPS:
            raise ExpressionSyntaxError(f"Unsupported operator: {type(node.op).__name__}", text=text)
        _check_node(node.left, text)
        _check_node(node.right, text)
    elif isinstance(node, ast.UnaryOp):
        if type(node.op) not in _UNARYOPS:
            raise ExpressionSyntaxError(f"Unsupported operator: {type(node.op).__name__}", text=text)
        _check_node(node.operand, text)
    elif isinstance(node, ast.Call):
        if not isinstance(node.func, ast.Name):
            raise ExpressionSyntaxError("Only simple function calls are allowed", text=text)
        if node.keywords:
            raise ExpressionSyntaxError("Keyword arguments are not allowed", text=text)
        for arg in node.args:
            if isinstance(arg, ast.Starred):
                raise ExpressionSyntaxError("Starred arguments are not allowed", text=text)
            _check_node(arg, text)
    else:
        raise ExpressionSyntaxError(f"Unsupported syntax: {type(node).__name__}", text=text)


def compile_expression(text: str) -> Expression:
    """Parse text into an Expression.

    Raises:
        ExpressionSyntaxError: If the text is empty, does not parse, or uses
            syntax outside the arithmetic subset.
    """
    source = text.strip()
    if not source:
        raise ExpressionSyntaxError("Empty expression", text=text)

    try:
        tree = ast.parse(source, mode="eval")
    except SyntaxError as e:
        raise ExpressionSyntaxError(f"Invalid expression: {e.msg}", text=text) from None
    except ValueError as e:
        raise ExpressionSyntaxError(f"Invalid expression: {e}", text=text) from None
    except (RecursionError, MemoryError):
        raise ExpressionSyntaxError("Expression too complex", text=text) from None

    try:
        _check_node(tree.body, text)
    except RecursionError:
        raise ExpressionSyntaxError("Expression too complex", text=text) from None
    return Expression(text, tree)


class _Evaluation:
    """Single walk over an expression tree."""

    def __init__(self, environment: Mapping[str, Any], functions: FunctionRegistry):
        self._environment = environment
        self._functions = functions

    def visit(self, node: ast.AST) -> Value:
        if isinstance(node, ast.Constant):
            if isinstance(node.value, str):
                return Text(node.value)
            try:
                value = float(node.value)
            except OverflowError:
                raise EvaluationError(f"Number too large: {node.value}") from None
            # 1e500 parses to an infinite float constant
            if not math.isfinite(value):
                raise EvaluationError("Number out of range")
            return Number(value)

        if isinstance(node, ast.Name):
            if node.id not in self._environment:
                raise EvaluationError(f"Unknown variable: {node.id}")
            return as_value(self._environment[node.id])

        if isinstance(node, ast.BinOp):
            left = to_number(self.visit(node.left))
            right = to_number(self.visit(node.right))
            return Number(self._apply(_BINOPS[type(node.op)], left, right))

        if isinstance(node, ast.UnaryOp):
            operand = to_number(self.visit(node.operand))
            return Number(_UNARYOPS[type(node.op)](operand))

        if isinstance(node, ast.Call):
            args = []
            for position, arg in enumerate(node.args, start=1):
                try:
                    args.append(self.visit(arg))
                except CoercionError as e:
                    if e.position is None:
                        e.position = position
                    raise
            return Number(self._functions.call(node.func.id, args))

        # compile_expression() rejects everything else
        raise EvaluationError(f"Unsupported node: {type(node).__name__}")

    @staticmethod
    def _apply(op: Callable[[float, float], float], left: float, right: float) -> float:
        try:
            return op(left, right)
        except ZeroDivisionError:
            raise EvaluationError("Division by zero") from None
        except (OverflowError, ValueError) as e:
            raise EvaluationError(f"Arithmetic error: {e}") from e


class ExpressionEvaluator:
    """Resolves formatted parameter text to floats.

    Holds references to an environment and a function registry; the store
    passes snapshots of its own so a pass never sees a change made while it
    runs.
    """

    def __init__(self, environment: Mapping[str, Any], functions: FunctionRegistry):
        self.environment = environment
        self.functions = functions

    def resolve(self, text: str) -> float:
        """Resolve one formatted value.

        Literal text never reaches the expression parser, so it resolves
        the same way whatever the environment holds.

        Raises:
            ExpressionSyntaxError: If text is neither a literal nor a valid
                expression.
            EvaluationError: If evaluation or coercion of the result fails.
        """
        literal = parse_float_literal(text)
        if literal is not None:
            return literal

        expression = compile_expression(text)
        try:
            result = to_number(expression.evaluate(self.environment, self.functions))
        except HostConfigError as e:
            e.with_context(text=text)
            raise

        logger.debug("Evaluated %r -> %s", text, result)
        return result

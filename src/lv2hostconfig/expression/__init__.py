"""Expression engine: literal/expression resolution and the function library."""

from lv2hostconfig.expression.constants import DECIBEL_FLOOR, REFERENCE_VARIABLE
from lv2hostconfig.expression.evaluator import Expression, ExpressionEvaluator, compile_expression
from lv2hostconfig.expression.functions import BUILTIN_FUNCTIONS, FunctionRegistry, NumericFunction
from lv2hostconfig.expression.values import Number, Text, Value, as_value, coerce, parse_float_literal, to_number

__all__ = [
    "BUILTIN_FUNCTIONS",
    "DECIBEL_FLOOR",
    "REFERENCE_VARIABLE",
    "Expression",
    "ExpressionEvaluator",
    "FunctionRegistry",
    "Number",
    "NumericFunction",
    "Text",
    "Value",
    "as_value",
    "coerce",
    "compile_expression",
    "parse_float_literal",
    "to_number",
]

"""Tagged evaluation values and numeric coercion.

Expressions produce either a Number or a Text. Environment entries are
wrapped once at the boundary by as_value(); after that every conversion
to float goes through to_number().
"""

import math
import numbers
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Union

from lv2hostconfig.errors import CoercionError
from lv2hostconfig.expression.constants import FLOAT_LITERAL


@dataclass(frozen=True)
class Number:
    """Numeric evaluation result."""

    value: float


@dataclass(frozen=True)
class Text:
    """Textual evaluation result."""

    value: str


Value = Union[Number, Text]


def parse_float_literal(text: str) -> float | None:
    """Parse text as a plain decimal float literal.

    Returns None when the text is not a literal. Surrounding whitespace,
    digit separators and special names such as "inf" or "nan" are not
    literals, and neither is a literal outside the float range ("1e500").

    Example:
        >>> parse_float_literal("-6.5")
        -6.5
        >>> parse_float_literal("reference - 6") is None
        True
    """
    if not FLOAT_LITERAL.fullmatch(text):
        return None
    value = float(text)
    if not math.isfinite(value):
        return None
    return value


def as_value(raw: Any) -> Value:
    """Wrap a Python object from the environment or a function result.

    Raises:
        CoercionError: If the object is neither a real number nor a string.
    """
    if isinstance(raw, (Number, Text)):
        return raw
    if isinstance(raw, bool):
        raise CoercionError(f"Cannot use {type(raw).__name__} as a number", type_name=type(raw).__name__)
    if isinstance(raw, (numbers.Real, Decimal)):
        try:
            return Number(float(raw))
        except OverflowError:
            raise CoercionError(
                f"{type(raw).__name__} value too large for a float",
                type_name=type(raw).__name__,
            ) from None
    if isinstance(raw, str):
        return Text(raw)
    raise CoercionError(f"Cannot use {type(raw).__name__} as a number", type_name=type(raw).__name__)


def to_number(value: Value, position: int | None = None) -> float:
    """Convert a tagged value to float.

    Args:
        value: Number or Text.
        position: 1-based argument position, recorded on the error when the
            value is a function argument.

    Raises:
        CoercionError: If a Text value does not hold a float literal.
    """
    if isinstance(value, Number):
        return value.value

    parsed = parse_float_literal(value.value)
    if parsed is None:
        where = f"argument {position}: " if position is not None else ""
        raise CoercionError(
            f"{where}text '{value.value}' is not a number",
            type_name="str",
            position=position,
        )
    return parsed


def coerce(raw: Any, position: int | None = None) -> float:
    """Convert any supported Python object straight to float."""
    try:
        value = as_value(raw)
    except CoercionError as e:
        if position is not None:
            e.position = position
            e.message = f"argument {position}: {e.message}"
        raise
    return to_number(value, position)


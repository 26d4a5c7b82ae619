"""Numeric function library and registry.

Every function has a fixed arity. Calls check the argument count first,
then coerce each argument to float, then run the implementation.
"""

import logging
import math
from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any

from lv2hostconfig.errors import ArityError, EvaluationError, HostConfigError, RangeError
from lv2hostconfig.expression.constants import DECIBEL_FLOOR
from lv2hostconfig.expression.values import Value, as_value, to_number

logger = logging.getLogger(__name__)


class NumericFunction:
    """A named function of a fixed number of float arguments."""

    def __init__(self, name: str, arity: int, func: Callable[..., Any]):
        if arity < 0:
            raise ValueError(f"Arity must be non-negative, got {arity}")
        self.name = name
        self.arity = arity
        self.func = func

    def __call__(self, args: Sequence[Value]) -> float:
        """Invoke with tagged argument values.

        Raises:
            ArityError: If len(args) differs from the arity.
            CoercionError: If an argument or the result is not numeric.
            RangeError: If the implementation rejects its inputs.
            EvaluationError: If the implementation fails in any other way.
        """
        if len(args) != self.arity:
            raise ArityError(self.name, self.arity, len(args))

        floats = [to_number(arg, position) for position, arg in enumerate(args, start=1)]

        try:
            result = self.func(*floats)
        except HostConfigError:
            raise
        except (ArithmeticError, ValueError, TypeError) as e:
            raise EvaluationError(f"{self.name}() failed: {e}") from e

        return to_number(as_value(result))

    def __repr__(self) -> str:
        return f"NumericFunction({self.name!r}, arity={self.arity})"


class FunctionRegistry:
    """Mapping of function names to NumericFunction instances."""

    def __init__(self, functions: Mapping[str, NumericFunction] | None = None) -> None:
        self._functions: dict[str, NumericFunction] = dict(functions or {})

    @classmethod
    def with_builtins(cls) -> "FunctionRegistry":
        """Create a registry holding the built-in library."""
        return cls({fn.name: fn for fn in BUILTIN_FUNCTIONS})

    def register(self, name: str, arity: int, func: Callable[..., Any]) -> NumericFunction:
        """Register (or replace) a function. Returns the wrapped function."""
        if name in self._functions:
            logger.debug("Replacing function %s", name)
        function = NumericFunction(name, arity, func)
        self._functions[name] = function
        return function

    def add(self, function: NumericFunction) -> None:
        """Register an already wrapped function under its own name."""
        self._functions[function.name] = function

    def unregister(self, name: str) -> bool:
        """Remove function by name. Returns True if removed, False if not found."""
        if name in self._functions:
            del self._functions[name]
            return True
        return False

    def get(self, name: str) -> NumericFunction | None:
        return self._functions.get(name)

    def call(self, name: str, args: Sequence[Value]) -> float:
        """Look up and invoke a function.

        Raises:
            EvaluationError: If no function is registered under name.
        """
        function = self._functions.get(name)
        if function is None:
            raise EvaluationError(f"Unknown function: {name}")
        return function(args)

    def items(self) -> list[tuple[str, NumericFunction]]:
        return list(self._functions.items())

    def copy(self) -> "FunctionRegistry":
        """Shallow copy; later registrations on either side are not shared."""
        return FunctionRegistry(self._functions)

    @property
    def names(self) -> list[str]:
        return sorted(self._functions)

    def __contains__(self, name: object) -> bool:
        return name in self._functions

    def __iter__(self) -> Iterator[str]:
        return iter(self._functions)

    def __len__(self) -> int:
        return len(self._functions)


# ============================================================================
# Built-in Library
# ============================================================================


def linear(db: float) -> float:
    """Decibels to linear gain."""
    return math.pow(10.0, db / 20.0)


def decibel(x: float) -> float:
    """Linear gain to decibels; zero maps to DECIBEL_FLOOR."""
    if x == 0:
        return DECIBEL_FLOOR
    if x < 0:
        raise RangeError("decibel", f"negative gain {x}")
    return 20.0 * math.log10(x)


def square_root(a: float) -> float:
    if a < 0:
        raise RangeError("sqrt", f"negative input {a}")
    return math.sqrt(a)


def scale(val: float, old_min: float, old_max: float, new_min: float, new_max: float) -> float:
    """Linearly rescale val from [old_min, old_max] to [new_min, new_max].

    Both ranges must be strictly increasing and val must lie inside the
    source range. Inverted target ranges are rejected, not mirrored.
    """
    if old_min >= old_max:
        raise RangeError("scale", f"source range [{old_min}, {old_max}] is empty or inverted")
    if new_min >= new_max:
        raise RangeError("scale", f"target range [{new_min}, {new_max}] is empty or inverted")
    if val < old_min or val > old_max:
        raise RangeError("scale", f"value {val} outside [{old_min}, {old_max}]")
    return new_min + (new_max - new_min) * (val - old_min) / (old_max - old_min)


def clamp(val: float, lo: float, hi: float) -> float:
    """Limit val to [lo, hi]."""
    if lo > hi:
        raise RangeError("clamp", f"lower bound {lo} above upper bound {hi}")
    return min(max(val, lo), hi)


BUILTIN_FUNCTIONS = (
    NumericFunction("linear", 1, linear),
    NumericFunction("decibel", 1, decibel),
    NumericFunction("min", 2, min),
    NumericFunction("max", 2, max),
    NumericFunction("abs", 1, abs),
    NumericFunction("sqrt", 1, square_root),
    NumericFunction("pow", 2, math.pow),
    NumericFunction("scale", 5, scale),
    NumericFunction("clamp", 3, clamp),
)

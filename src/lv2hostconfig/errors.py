"""Exception hierarchy for configuration loading and evaluation."""

from pathlib import Path


class HostConfigError(Exception):
    """Base class for all configuration errors.

    Errors raised while resolving a parameter carry the offending formatted
    text. The store attaches the plugin URI and parameter name before
    re-raising, so a single message names everything needed to find the
    problem in the source document.
    """

    def __init__(
        self,
        message: str,
        *,
        text: str | None = None,
        plugin_uri: str | None = None,
        parameter: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.text = text
        self.plugin_uri = plugin_uri
        self.parameter = parameter

    def with_context(
        self,
        plugin_uri: str | None = None,
        parameter: str | None = None,
        text: str | None = None,
    ) -> "HostConfigError":
        """Fill in any context fields not already set. Returns self."""
        if self.plugin_uri is None:
            self.plugin_uri = plugin_uri
        if self.parameter is None:
            self.parameter = parameter
        if self.text is None:
            self.text = text
        return self

    def __str__(self) -> str:
        context = []
        if self.plugin_uri is not None:
            context.append(f"plugin '{self.plugin_uri}'")
        if self.parameter is not None:
            context.append(f"parameter '{self.parameter}'")
        if self.text is not None:
            context.append(f"expression '{self.text}'")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class DocumentError(HostConfigError):
    """Source document is unreadable or structurally invalid."""

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        super().__init__(message)
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message} ({self.path})"


class ExpressionSyntaxError(HostConfigError):
    """Text is neither a float literal nor a valid expression."""


class EvaluationError(HostConfigError):
    """Expression parsed but could not be evaluated."""


class ArityError(EvaluationError):
    """Function called with the wrong number of arguments."""

    def __init__(self, function: str, expected: int, actual: int) -> None:
        noun = "argument" if expected == 1 else "arguments"
        super().__init__(f"{function}() takes {expected} {noun}, got {actual}")
        self.function = function
        self.expected = expected
        self.actual = actual


class CoercionError(EvaluationError):
    """Value cannot be converted to a number."""

    def __init__(
        self,
        message: str,
        type_name: str,
        position: int | None = None,
        **kwargs,
    ) -> None:
        super().__init__(message, **kwargs)
        self.type_name = type_name
        self.position = position


class RangeError(EvaluationError):
    """Function input outside the domain the function accepts."""

    def __init__(self, function: str, message: str) -> None:
        super().__init__(f"{function}(): {message}")
        self.function = function

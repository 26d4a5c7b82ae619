"""Unit tests for the error hierarchy."""

from pathlib import Path

from lv2hostconfig.errors import (
    ArityError,
    CoercionError,
    DocumentError,
    EvaluationError,
    HostConfigError,
    RangeError,
)


class TestHostConfigError:
    """Tests for HostConfigError context handling."""

    def test_plain_message(self):
        assert str(HostConfigError("Unknown variable: x")) == "Unknown variable: x"

    def test_context_in_message(self):
        """Test plugin, parameter and text all appear in str()."""
        error = HostConfigError("Unknown variable: x", text="x + 1")
        error.with_context(plugin_uri="urn:eq", parameter="g")

        assert str(error) == "Unknown variable: x (plugin 'urn:eq', parameter 'g', expression 'x + 1')"
        assert error.message == "Unknown variable: x"

    def test_with_context_keeps_existing(self):
        """Test context set closer to the failure is not overwritten."""
        error = HostConfigError("bad", text="inner", parameter="p")

        returned = error.with_context(plugin_uri="urn:a", parameter="q", text="outer")

        assert returned is error
        assert error.text == "inner"
        assert error.parameter == "p"
        assert error.plugin_uri == "urn:a"


class TestSubclasses:
    """Tests for specific error kinds."""

    def test_hierarchy(self):
        assert issubclass(ArityError, EvaluationError)
        assert issubclass(CoercionError, EvaluationError)
        assert issubclass(RangeError, EvaluationError)
        assert issubclass(DocumentError, HostConfigError)

    def test_arity_message(self):
        assert ArityError("sqrt", 1, 2).message == "sqrt() takes 1 argument, got 2"
        assert ArityError("min", 2, 1).message == "min() takes 2 arguments, got 1"

    def test_range_message(self):
        error = RangeError("scale", "old_min equals old_max")

        assert error.message == "scale(): old_min equals old_max"
        assert error.function == "scale"

    def test_coercion_fields(self):
        error = CoercionError("argument 1: text 'loud' is not a number", "str", position=1, text="abs(mode)")

        assert error.type_name == "str"
        assert error.position == 1
        assert error.text == "abs(mode)"

    def test_document_path(self):
        error = DocumentError("Config is empty", path="/etc/lv2host.yaml")

        assert error.path == Path("/etc/lv2host.yaml")
        assert str(error) == "Config is empty (/etc/lv2host.yaml)"

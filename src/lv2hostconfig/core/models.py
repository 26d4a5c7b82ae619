"""Data models for plugin host configuration."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lv2hostconfig.expression.values import parse_float_literal

# ============================================================================
# Document Models
# ============================================================================


class RawPlugin(BaseModel):
    """One plugin entry exactly as it appears in the source document."""

    plugin_uri: str = Field(..., alias="pluginUri", description="Plugin URI")
    parameters: dict[str, str] = Field(default_factory=dict, description="Parameter text keyed by name")

    @field_validator("parameters", mode="before")
    @classmethod
    def empty_parameters(cls, v: Any) -> Any:
        """Treat an empty 'parameters:' key as no parameters."""
        if v is None or v == "":
            return {}
        return v

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "pluginUri": "http://lsp-plug.in/plugins/lv2/para_equalizer_x8_mono",
                "parameters": {"g_in": "linear(reference)", "g_out": "1.0"},
            }
        },
    )


class HostDocument(BaseModel):
    """Raw document shape read and written by the document adapter."""

    reference_level: float | None = Field(None, alias="referenceLevel", description="Seeds the 'reference' variable")
    plugins: list[RawPlugin] = Field(default_factory=list, description="Plugins in document order")

    @field_validator("plugins", mode="before")
    @classmethod
    def empty_plugins(cls, v: Any) -> Any:
        """Treat an empty 'plugins:' key as no plugins."""
        if v is None or v == "":
            return []
        return v

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "referenceLevel": -6.0,
                "plugins": [
                    {
                        "pluginUri": "http://lsp-plug.in/plugins/lv2/para_equalizer_x8_mono",
                        "parameters": {"g_in": "linear(reference)", "g_out": "1.0"},
                    }
                ],
            }
        },
    )


# ============================================================================
# Store Models
# ============================================================================


class PluginConfig(BaseModel):
    """Configuration of one plugin.

    formatted holds the source text of every parameter and is the only part
    ever written back to a document. resolved holds the numeric values from
    the last successful evaluation and is empty until then.
    """

    plugin_uri: str = Field(..., frozen=True, description="Plugin URI")
    formatted: dict[str, str] = Field(default_factory=dict, description="Source text keyed by parameter name")
    resolved: dict[str, float] = Field(default_factory=dict, description="Evaluated values keyed by parameter name")

    def value(self, name: str) -> float:
        """Get the resolved value of a parameter.

        Raises:
            KeyError: If the parameter has not been resolved.
        """
        return self.resolved[name]

    def is_literal(self, name: str) -> bool:
        """True if the parameter's source text is a plain number."""
        return parse_float_literal(self.formatted[name]) is not None

    @property
    def is_resolved(self) -> bool:
        return self.resolved.keys() == self.formatted.keys()

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "plugin_uri": "http://lsp-plug.in/plugins/lv2/para_equalizer_x8_mono",
                "formatted": {"g_in": "linear(reference)", "g_out": "1.0"},
                "resolved": {"g_in": 0.501187, "g_out": 1.0},
            }
        }
    )


# ============================================================================
# API Request/Response Models
# ============================================================================


class ParameterView(BaseModel):
    """Formatted and resolved form of one parameter."""

    formatted: str = Field(..., description="Source text")
    resolved: float | None = Field(None, description="Evaluated value, None before evaluation")
    literal: bool = Field(..., description="Whether the source text is a plain number")


class PluginView(BaseModel):
    """One plugin as returned by the API."""

    plugin_uri: str = Field(..., description="Plugin URI")
    parameters: dict[str, ParameterView] = Field(default_factory=dict, description="Parameters keyed by name")

    @classmethod
    def from_config(cls, plugin: PluginConfig) -> "PluginView":
        return cls(
            plugin_uri=plugin.plugin_uri,
            parameters={
                name: ParameterView(
                    formatted=text,
                    resolved=plugin.resolved.get(name),
                    literal=plugin.is_literal(name),
                )
                for name, text in plugin.formatted.items()
            },
        )


class PluginsResponse(BaseModel):
    """Response model for GET /api/plugins."""

    evaluated: bool = Field(..., description="Whether resolved values are current")
    last_evaluation: datetime | None = Field(None, description="Timestamp of last successful evaluation")
    plugins: list[PluginView] = Field(default_factory=list, description="Plugins in document order")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "evaluated": True,
                "last_evaluation": "2026-01-13T10:30:00",
                "plugins": [
                    {
                        "plugin_uri": "http://lsp-plug.in/plugins/lv2/para_equalizer_x8_mono",
                        "parameters": {
                            "g_in": {"formatted": "linear(reference)", "resolved": 0.501187, "literal": False},
                        },
                    }
                ],
            }
        }
    )


class EnvironmentResponse(BaseModel):
    """Response model for GET /api/environment."""

    variables: dict[str, float | str] = Field(default_factory=dict, description="Variables keyed by name")


class VariableSetRequest(BaseModel):
    """Request model for PUT /api/environment/{name}."""

    value: float | str = Field(..., description="New variable value")

    model_config = ConfigDict(json_schema_extra={"example": {"value": -12.0}})


class VariableSetResponse(BaseModel):
    """Response model for a successful variable update."""

    success: bool = Field(True, description="Operation success status")
    name: str = Field(..., description="Variable name")
    old_value: float | str | None = Field(None, description="Previous value, None if the variable was new")
    new_value: float | str = Field(..., description="New value")
    timestamp: datetime = Field(default_factory=datetime.now, description="Operation timestamp")


class EvaluateResponse(BaseModel):
    """Response model for a successful evaluation pass."""

    success: bool = Field(True, description="Operation success status")
    plugins_count: int = Field(..., ge=0, description="Number of plugins evaluated")
    parameters_count: int = Field(..., ge=0, description="Number of parameters resolved")
    timestamp: datetime = Field(default_factory=datetime.now, description="Operation timestamp")


class SaveResponse(BaseModel):
    """Response model for POST /api/save."""

    success: bool = Field(True, description="Operation success status")
    path: str = Field(..., description="File written")
    plugins_count: int = Field(..., ge=0, description="Number of plugins written")


class ErrorResponse(BaseModel):
    """Response model for errors."""

    success: bool = Field(False, description="Operation success status")
    error: str = Field(..., description="Error message")
    plugin_uri: str | None = Field(None, description="Plugin whose parameter failed")
    parameter: str | None = Field(None, description="Parameter that failed")
    text: str | None = Field(None, description="Formatted text that failed")
    timestamp: datetime = Field(default_factory=datetime.now, description="Error timestamp")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": False,
                "error": "Unknown variable: gain",
                "plugin_uri": "http://lsp-plug.in/plugins/lv2/para_equalizer_x8_mono",
                "parameter": "g_in",
                "text": "linear(gain)",
                "timestamp": "2026-01-13T10:30:00",
            }
        }
    )


class HealthResponse(BaseModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status (healthy/degraded/unhealthy)")
    plugins_count: int = Field(..., ge=0, description="Number of loaded plugins")
    evaluated: bool = Field(..., description="Whether resolved values are current")
    last_evaluation: datetime | None = Field(None, description="Last successful evaluation timestamp")

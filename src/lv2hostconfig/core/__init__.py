"""Core application functionality."""

from lv2hostconfig.core.config import Settings, setup_logging
from lv2hostconfig.core.models import HostDocument, PluginConfig, RawPlugin

# ConfigurationStore not re-exported to avoid circular import
# (document -> core.models -> core.__init__ -> core.store -> document)

__all__ = [
    "HostDocument",
    "PluginConfig",
    "RawPlugin",
    "Settings",
    "setup_logging",
]

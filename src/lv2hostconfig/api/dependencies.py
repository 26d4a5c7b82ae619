"""FastAPI dependency injection for shared application state."""

import threading

from lv2hostconfig.core.config import Settings
from lv2hostconfig.core.store import ConfigurationStore


class AppState:
    """Holds shared application state instances.

    Created during app startup and accessed via FastAPI dependencies.
    """

    def __init__(self) -> None:
        self.settings: Settings | None = None
        self.store: ConfigurationStore | None = None
        # Held by handlers that change the store; they run in the threadpool
        self.lock = threading.Lock()


# Global app state singleton
app_state = AppState()


def get_store() -> ConfigurationStore:
    """Get the configuration store instance."""
    assert app_state.store is not None, "App not initialized"
    return app_state.store


def get_settings() -> Settings:
    """Get the settings instance."""
    assert app_state.settings is not None, "App not initialized"
    return app_state.settings


def get_lock() -> threading.Lock:
    """Get the lock that serializes store mutations."""
    return app_state.lock
